import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from modelsearch.config import Settings, get_settings
from modelsearch.db.entity import SQLAlchemyEntity
from modelsearch.db.interfaces.base import BaseDatabase
from modelsearch.db.repository import EntityRepository, resolve_model_class
from modelsearch.exceptions import IndexingException, ModelResolutionError, RepositoryException
from modelsearch.registry import ModelRegistry
from modelsearch.services.opensearch.client import OpenSearchClient
from modelsearch.services.opensearch.index_config import build_index_body

logger = logging.getLogger(__name__)


class ModelIndexer:
    """Creates model indexes and bulk-indexes projected records into them."""

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
        self.max_workers = max(1, self.settings.indexing.max_workers)

    # ============================================================
    # INDEX MANAGEMENT
    # ============================================================

    def create_index(self, model_id: str, force: bool = False) -> bool:
        compiled = self.registry.get(model_id)
        body = build_index_body(compiled, self.registry.schema(model_id), self.settings.opensearch)
        return self.opensearch_client.create_index(compiled.index_name, body, force=force)

    def create_indexes(self, model_ids: Optional[List[str]] = None) -> Dict[str, bool]:
        """Create missing indexes without indexing any data."""
        return {model_id: self.create_index(model_id) for model_id in model_ids or self.registry.model_ids()}

    def delete_indexes(self, model_ids: Optional[List[str]] = None) -> Dict[str, bool]:
        return {
            model_id: self.opensearch_client.delete_index(self.registry.get(model_id).index_name)
            for model_id in model_ids or self.registry.model_ids()
        }

    # ============================================================
    # DOCUMENT INDEXING
    # ============================================================

    def index_model(self, model_id: str, chunk_size: Optional[int] = None, force: bool = False) -> Dict[str, Any]:
        """
        Create the model's index and bulk-index every matching record.

        Records are read in chunks with the configured relations eager-loaded,
        projected in this thread and shipped by a pool of bulk workers.

        Args:
            model_id: Configured model identifier
            chunk_size: Records per chunk, defaults to the model's chunk_size
            force: Delete and recreate an existing index

        Returns:
            Dictionary with indexing statistics
        """
        compiled = self.registry.get(model_id)
        results: Dict[str, Any] = {
            "model": model_id,
            "index": compiled.index_name,
            "total": 0,
            "indexed": 0,
            "failed": 0,
            "chunks": 0,
            "errors": [],
            "skipped": False,
            "processing_time": 0,
        }

        if self.opensearch_client.index_exists(compiled.index_name) and not force:
            logger.warning(f"Index {compiled.index_name} already exists. Use force to reindex.")
            results["skipped"] = True
            return results

        if self.database is None:
            raise RepositoryException("Database not configured, cannot load records to index")
        if not compiled.model_path:
            raise ModelResolutionError(f"Model {model_id} has no model class configured", "model")

        start_time = datetime.now()
        model_cls = resolve_model_class(compiled.model_path)
        if not self.create_index(model_id, force=force):
            raise IndexingException(f"Could not create index {compiled.index_name} for {model_id}")
        chunk_size = chunk_size or compiled.chunk_size

        with self.database.get_session() as session:
            repository = EntityRepository(session, model_cls)
            results["total"] = repository.count(compiled.query_conditions)
            logger.info(f"Found {results['total']} {model_id} records to index, chunk size {chunk_size}")

            chunks = repository.iter_chunks(chunk_size, compiled.relation_paths(), compiled.query_conditions)
            self._ship(model_id, chunks, results)

        results["processing_time"] = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Indexed {model_id} in {results['processing_time']:.1f}s: "
            f"{results['indexed']} indexed, {results['failed']} failed, {len(results['errors'])} errors"
        )
        return results

    def reindex(self, model_ids: Optional[List[str]] = None) -> Dict[str, Dict[str, Any]]:
        """Delete, recreate and fill the indexes of the given (or all) models."""
        return {
            model_id: self.index_model(model_id, force=True) for model_id in model_ids or self.registry.model_ids()
        }

    def _project(self, model_id: str, records: Iterable[Any]) -> List[Any]:
        projector = self.registry.projector(model_id)
        documents = []
        for record in records:
            entity = SQLAlchemyEntity(record)
            documents.append((entity.get_key(), projector.project(entity)))
        return documents

    def _ship(self, model_id: str, chunks: Iterable[List[Any]], results: Dict[str, Any]) -> None:
        index_name = self.registry.get(model_id).index_name
        pending: Set[Future] = set()

        def collect(done: Iterable[Future]) -> None:
            for future in done:
                try:
                    counts = future.result()
                except IndexingException as e:
                    results["errors"].append(str(e))
                    continue
                results["indexed"] += counts["success"]
                results["failed"] += counts["failed"]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for records in chunks:
                documents = self._project(model_id, records)
                results["chunks"] += 1
                pending.add(executor.submit(self.opensearch_client.bulk_index, index_name, documents))
                if len(pending) >= self.max_workers * 2:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    collect(done)
            collect(pending)
