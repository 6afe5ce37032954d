import logging
from typing import Any, Dict, List, Optional

from modelsearch.config import Settings, get_settings
from modelsearch.core.projector import DocumentProjector
from modelsearch.db.entity import SQLAlchemyEntity
from modelsearch.db.interfaces.base import BaseDatabase
from modelsearch.db.repository import EntityRepository, resolve_model_class
from modelsearch.registry import ModelRegistry
from modelsearch.services.opensearch.client import OpenSearchClient
from modelsearch.services.opensearch.query_builder import ModelQueryBuilder

logger = logging.getLogger(__name__)


class SearchService:
    """Weighted multi-field search over configured model indexes."""

    def __init__(
        self,
        opensearch_client: OpenSearchClient,
        registry: ModelRegistry,
        database: Optional[BaseDatabase] = None,
        settings: Optional[Settings] = None,
    ):
        self.opensearch_client = opensearch_client
        self.registry = registry
        self.database = database
        self.settings = settings or get_settings()

    def search(
        self,
        model_id: str,
        query: str,
        size: Optional[int] = None,
        from_: int = 0,
        analyzer: Optional[str] = None,
        hydrate: bool = False,
    ) -> Dict[str, Any]:
        """
        Search one model's index.

        Args:
            model_id: Configured model identifier
            query: Search query text
            size: Number of results, defaults to the configured search limit
            from_: Offset for pagination
            analyzer: Search-time analyzer override
            hydrate: Replace hit sources with the model's return_fields read from the database

        Returns:
            ``{"total", "max_score", "hits"}``; every hit carries ``_id`` and ``_score``
        """
        compiled = self.registry.get(model_id)
        query_builder = ModelQueryBuilder(
            query=query,
            fields=self.registry.weighted_fields(model_id),
            size=size or self.settings.search.limit,
            from_=from_,
            type=self.settings.search.type,
            operator=self.settings.search.operator,
            analyzer=analyzer,
        )
        results = self.opensearch_client.search(compiled.index_name, query_builder)

        if hydrate and results["hits"]:
            results["hits"] = self._hydrate(model_id, results["hits"])
        return results

    def search_all(self, query: str, size: Optional[int] = None) -> Dict[str, Dict[str, Any]]:
        """Search every model whose index exists; failures in one model do not stop the others."""
        results = {}
        for model_id in self.registry.model_ids():
            index_name = self.registry.get(model_id).index_name
            if not self.opensearch_client.index_exists(index_name):
                logger.info(f"Index {index_name} does not exist, skipping {model_id}")
                continue
            model_results = self.search(model_id, query, size=size)
            if "error" in model_results:
                logger.warning(f"Search failed for {model_id}: {model_results['error']}")
                continue
            results[model_id] = model_results
        return results

    def _hydrate(self, model_id: str, hits: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        compiled = self.registry.get(model_id)
        if self.database is None or not compiled.model_path or compiled.return_fields.is_empty():
            return hits

        model_cls = resolve_model_class(compiled.model_path)
        projector = DocumentProjector(compiled.return_fields)
        scores = {str(hit["_id"]): hit["_score"] for hit in hits}

        with self.database.get_session() as session:
            repository = EntityRepository(session, model_cls)
            records = repository.load_ordered(
                [hit["_id"] for hit in hits], compiled.return_fields.relation_paths()
            )
            hydrated = []
            for record in records:
                entity = SQLAlchemyEntity(record)
                document = projector.project(entity)
                document["_id"] = str(entity.get_key())
                document["_score"] = scores.get(document["_id"])
                hydrated.append(document)
        return hydrated
