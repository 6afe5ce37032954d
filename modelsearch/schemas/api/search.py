from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    query: str
    total: int = 0
    max_score: Optional[float] = None
    hits: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Search error, if OpenSearch failed")
