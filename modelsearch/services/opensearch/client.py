import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from opensearchpy import OpenSearch, helpers
from opensearchpy.exceptions import NotFoundError, RequestError, TransportError

from modelsearch.config import Settings, get_settings
from modelsearch.exceptions import IndexingException

from .query_builder import ModelQueryBuilder

logger = logging.getLogger(__name__)


class OpenSearchClient:
    """
    Client for OpenSearch operations including index management, bulk indexing and search.
    """

    def __init__(self, host: str = "http://localhost:9200", settings: Optional[Settings] = None, client: Optional[OpenSearch] = None):
        """Initialize OpenSearch client."""
        self.host = host
        self.settings = settings or get_settings()

        # Create the low-level client
        self.client = client or OpenSearch(
            hosts=[host],
            http_compress=True,
            use_ssl=False,
            verify_certs=False,
            ssl_assert_hostname=False,
            ssl_show_warn=False,
            timeout=self.settings.opensearch.request_timeout,
        )
        logger.info(f"OpenSearch client initialized with host: {host}")

    # ============================================================
    # INDEX MANAGEMENT
    # ============================================================

    def index_exists(self, index_name: str) -> bool:
        try:
            return bool(self.client.indices.exists(index=index_name))
        except Exception as e:
            logger.error(f"Error checking index {index_name}: {e}")
            return False

    def create_index(self, index_name: str, body: Dict[str, Any], force: bool = False) -> bool:
        """
        Create an index with settings and mappings.

        Args:
            index_name: Full index name, prefix included
            body: Index settings and mappings
            force: If True, delete existing index before creating

        Returns:
            True if index was created, False if it already exists or creation failed
        """
        try:
            if self.client.indices.exists(index=index_name):
                if force:
                    logger.info(f"Deleting existing index: {index_name}")
                    self.client.indices.delete(index=index_name)
                else:
                    logger.info(f"Index {index_name} already exists")
                    return False

            response = self.client.indices.create(index=index_name, body=body)

            if response.get("acknowledged"):
                logger.info(f"Successfully created index: {index_name}")
                return True
            else:
                logger.error(f"Failed to create index: {response}")
                return False

        except RequestError as e:
            logger.error(f"Error creating index {index_name}: {e}")
            return False

    def delete_index(self, index_name: str) -> bool:
        """Delete an index; False when it does not exist."""
        try:
            self.client.indices.delete(index=index_name)
            logger.info(f"Deleted index: {index_name}")
            return True
        except NotFoundError:
            logger.warning(f"Index {index_name} does not exist")
            return False

    # ============================================================
    # DOCUMENT INDEXING
    # ============================================================

    def bulk_index(self, index_name: str, documents: Iterable[Tuple[Any, Dict[str, Any]]]) -> Dict[str, int]:
        """
        Bulk index ``(document_id, document)`` pairs.

        Returns:
            Counts of successful and failed documents

        Raises:
            IndexingException: If the bulk request itself cannot be sent
        """
        actions = []
        for document_id, document in documents:
            action = {"_index": index_name, "_source": document}
            if document_id is not None:
                action["_id"] = document_id
            actions.append(action)

        if not actions:
            return {"success": 0, "failed": 0}

        try:
            success, errors = helpers.bulk(self.client, actions, raise_on_error=False, stats_only=False)
        except TransportError as e:
            logger.error(f"Bulk request to {index_name} failed: {e}")
            raise IndexingException(f"Bulk request to {index_name} failed: {e}") from e

        for error in errors[:5]:
            logger.warning(f"Bulk item failed: {error}")
        results = {"success": success, "failed": len(errors)}
        logger.info(f"Bulk indexing into {index_name}: {results['success']} success, {results['failed']} failed")
        return results

    # ============================================================
    # SEARCH
    # ============================================================

    def search(self, index_name: str, query_builder: ModelQueryBuilder) -> Dict[str, Any]:
        """
        Run a search built by ``query_builder``.

        Returns:
            Search results with hits and metadata
        """
        try:
            response = self.client.search(index=index_name, body=query_builder.build())

            results = {
                "total": response["hits"]["total"]["value"],
                "max_score": response["hits"].get("max_score"),
                "hits": [],
            }
            for hit in response["hits"]["hits"]:
                document = dict(hit.get("_source", {}))
                document["_id"] = hit["_id"]
                document["_score"] = hit["_score"]
                results["hits"].append(document)

            logger.info(f"Search for '{query_builder.query}' in {index_name} returned {results['total']} results")
            return results

        except NotFoundError:
            logger.error(f"Index {index_name} not found")
            return {"total": 0, "max_score": None, "hits": [], "error": "Index not found"}
        except Exception as e:
            logger.error(f"Search error: {e}")
            return {"total": 0, "max_score": None, "hits": [], "error": str(e)}

    # ============================================================
    # HEALTH & STATS
    # ============================================================

    def health_check(self) -> bool:
        """Check if OpenSearch is healthy and accessible."""
        try:
            health = self.client.cluster.health()
            return health["status"] in ["green", "yellow"]
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False
