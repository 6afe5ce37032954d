import json
import logging
from typing import Any, Mapping, Optional

from .field_tree import FieldTree

logger = logging.getLogger(__name__)


def is_translatable(path: str, tree: FieldTree) -> bool:
    """Whether a dotted field path names a translatable field.

    Every segment but the last must be a relation of ``tree``; the last must be
    one of the leaves reached. Top-level fields are simply paths of one segment.
    """
    *relations, field = path.split(".")
    node = tree
    for relation in relations:
        child = node.children.get(relation)
        if child is None:
            return False
        node = child
    return field in node.leaves


def decode_translations(raw: Any) -> Optional[Mapping[str, Any]]:
    """Decode a stored translatable value into a locale -> text mapping.

    Returns ``None`` when the value is not a locale mapping.
    """
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        return None
    try:
        decoded = json.loads(raw)
    except ValueError:
        logger.debug(f"Translatable value is not JSON: {raw[:50]!r}")
        return None
    return decoded if isinstance(decoded, Mapping) else None
