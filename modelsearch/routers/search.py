from typing import Dict, Optional

from fastapi import APIRouter, Query

from modelsearch.dependencies import SearchServiceDep
from modelsearch.schemas.api.search import SearchResponse

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=Dict[str, SearchResponse])
def search_all(
    search_service: SearchServiceDep,
    q: str = Query("", description="Search query text"),
    size: Optional[int] = Query(None, ge=1, le=100),
) -> Dict[str, SearchResponse]:
    """Search every model with an existing index, keyed by model identifier."""
    results = search_service.search_all(q, size=size)
    return {
        model_id: SearchResponse(model_id=model_id, query=q, **model_results)
        for model_id, model_results in results.items()
    }


@router.get("/{model_id}", response_model=SearchResponse)
def search(
    model_id: str,
    search_service: SearchServiceDep,
    q: str = Query("", description="Search query text"),
    size: Optional[int] = Query(None, ge=1, le=100),
    from_: int = Query(0, ge=0, alias="from"),
    analyzer: Optional[str] = Query(None, description="Search-time analyzer override"),
    hydrate: bool = Query(False, description="Read hit fields back from the database"),
) -> SearchResponse:
    results = search_service.search(model_id, q, size=size, from_=from_, analyzer=analyzer, hydrate=hydrate)
    return SearchResponse(model_id=model_id, query=q, **results)
