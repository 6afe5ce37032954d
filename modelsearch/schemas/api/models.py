from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ModelSummary(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str = Field(..., description="Configured model identifier")
    index: str = Field(..., description="OpenSearch index name")
    relations: List[str] = Field(default_factory=list, description="Relation paths eager-loaded for indexing")
    locales: List[str] = Field(default_factory=list, description="Locales translatable fields expand into")


class WeightedFieldResponse(BaseModel):
    path: str
    weight: float


class MappingResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    index: str
    properties: Dict[str, Any]


class IndexRequest(BaseModel):
    force: bool = Field(default=False, description="Delete and recreate an existing index")
    chunk_size: Optional[int] = Field(default=None, gt=0, description="Records per chunk")


class IndexResponse(BaseModel):
    model: str
    index: str
    total: int = 0
    indexed: int = 0
    failed: int = 0
    chunks: int = 0
    errors: List[str] = Field(default_factory=list)
    skipped: bool = False
    processing_time: float = 0
