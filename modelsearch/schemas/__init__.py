from .api.health import HealthResponse, ServiceStatus
from .api.models import IndexRequest, IndexResponse, MappingResponse, ModelSummary, WeightedFieldResponse
from .api.search import SearchResponse

__all__ = [
    "HealthResponse",
    "ServiceStatus",
    "IndexRequest",
    "IndexResponse",
    "MappingResponse",
    "ModelSummary",
    "WeightedFieldResponse",
    "SearchResponse",
]
