from typing import List, Optional

from fastapi import APIRouter

from modelsearch.core.mapping import schema_to_properties
from modelsearch.dependencies import IndexerDep, RegistryDep
from modelsearch.schemas.api.models import (
    IndexRequest,
    IndexResponse,
    MappingResponse,
    ModelSummary,
    WeightedFieldResponse,
)

router = APIRouter(prefix="/models", tags=["models"])


@router.get("", response_model=List[ModelSummary])
def list_models(registry: RegistryDep) -> List[ModelSummary]:
    summaries = []
    for model_id in registry.model_ids():
        compiled = registry.get(model_id)
        summaries.append(
            ModelSummary(
                model_id=model_id,
                index=compiled.index_name,
                relations=compiled.relation_paths(),
                locales=list(compiled.locales.codes),
            )
        )
    return summaries


@router.get("/{model_id}/mapping", response_model=MappingResponse)
def model_mapping(model_id: str, registry: RegistryDep) -> MappingResponse:
    """Index mapping properties generated from the model's field configuration."""
    compiled = registry.get(model_id)
    return MappingResponse(
        model_id=model_id,
        index=compiled.index_name,
        properties=schema_to_properties(registry.schema(model_id)),
    )


@router.get("/{model_id}/fields", response_model=List[WeightedFieldResponse])
def model_fields(model_id: str, registry: RegistryDep) -> List[WeightedFieldResponse]:
    """Weighted field list used for multi-field queries."""
    return [WeightedFieldResponse(path=field.path, weight=field.weight) for field in registry.weighted_fields(model_id)]


@router.post("/{model_id}/index", response_model=IndexResponse)
def index_model(model_id: str, indexer: IndexerDep, body: Optional[IndexRequest] = None) -> IndexResponse:
    body = body or IndexRequest()
    results = indexer.index_model(model_id, chunk_size=body.chunk_size, force=body.force)
    return IndexResponse(**results)
