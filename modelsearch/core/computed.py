from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .entity import MISSING, EntityNode


@dataclass(frozen=True)
class ComputedField:
    """Document field assembled from other projected fields or attributes."""

    name: str
    source_fields: Tuple[str, ...]
    kind: str = "text"
    analyzer: Optional[str] = None

    def compute(self, document: Mapping[str, Any], entity: EntityNode) -> str:
        parts = []
        for source in self.source_fields:
            value = document.get(source, MISSING)
            if value is MISSING:
                value = entity.get_attribute(source)
            if value is MISSING or value is None or value == "":
                continue
            parts.append(str(value))
        return " ".join(parts)
