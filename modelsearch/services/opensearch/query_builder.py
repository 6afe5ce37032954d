import logging
from typing import Any, Dict, List, Optional

from modelsearch.core.weigher import WeightedFieldList

logger = logging.getLogger(__name__)


class ModelQueryBuilder:
    """
    Query builder for configured model indexes.

    Builds OpenSearch queries with:
    - Multi-field search over the model's weighted field list
    - Pagination
    """

    def __init__(
        self,
        query: str,
        fields: WeightedFieldList,
        size: int = 10,
        from_: int = 0,
        type: str = "best_fields",
        operator: str = "and",
        analyzer: Optional[str] = None,
        track_total_hits: bool = True,
    ):
        """
        Initialize query builder.

        Args:
            query: Search query text
            fields: Weighted fields; zero-weight fields are not searched
            size: Number of results to return
            from_: Offset for pagination
            type: multi_match type
            operator: Whether all terms (and) or any term (or) must match
            analyzer: Search-time analyzer override
            track_total_hits: Whether to track total hits accurately
        """
        self.query = query
        self.fields = fields
        self.size = size
        self.from_ = from_
        self.type = type
        self.operator = operator
        self.analyzer = analyzer
        self.track_total_hits = track_total_hits

    def build(self) -> Dict[str, Any]:
        """Build the complete OpenSearch query."""
        return {
            "query": self._build_query(),
            "size": self.size,
            "from": self.from_,
            "track_total_hits": self.track_total_hits,
        }

    def _build_query(self) -> Dict[str, Any]:
        if not self.query.strip():
            return {"match_all": {}}

        multi_match: Dict[str, Any] = {
            "query": self.query,
            "type": self.type,
            "operator": self.operator,
        }
        fields = self.search_fields()
        if fields:
            multi_match["fields"] = fields
        else:
            logger.warning("No weighted fields to search, falling back to the index default fields")
        if self.analyzer:
            multi_match["analyzer"] = self.analyzer
        return {"multi_match": multi_match}

    def search_fields(self) -> List[str]:
        """Fields in ``path^weight`` notation, e.g. ``title_en^5``."""
        return [field.to_query_field() for field in self.fields if field.weight > 0]

