from typing import Dict, List, Optional

from fastapi import APIRouter, Query

from modelsearch.dependencies import IndexerDep
from modelsearch.schemas.api.models import IndexResponse

router = APIRouter(prefix="/indexes", tags=["indexes"])


@router.put("", response_model=Dict[str, bool])
def create_indexes(
    indexer: IndexerDep,
    model: Optional[List[str]] = Query(None, description="Model identifiers, defaults to every configured model"),
) -> Dict[str, bool]:
    """Create missing indexes with their generated mappings, without indexing data."""
    return indexer.create_indexes(model)


@router.delete("", response_model=Dict[str, bool])
def delete_indexes(
    indexer: IndexerDep,
    model: Optional[List[str]] = Query(None, description="Model identifiers, defaults to every configured model"),
) -> Dict[str, bool]:
    return indexer.delete_indexes(model)


@router.post("/reindex", response_model=Dict[str, IndexResponse])
def reindex(
    indexer: IndexerDep,
    model: Optional[List[str]] = Query(None, description="Model identifiers, defaults to every configured model"),
) -> Dict[str, IndexResponse]:
    """Delete, recreate and fill indexes."""
    return {model_id: IndexResponse(**results) for model_id, results in indexer.reindex(model).items()}
