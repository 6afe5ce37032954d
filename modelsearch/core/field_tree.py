"""Field trees parsed from hand-written model configuration.

A searchable-fields configuration mixes plain field names and named relation
subtrees in one collection::

    ["title", "sku", {"category": ["id", "title"]}]
    {"0": "title", "1": "sku", "category": ["id", "title"]}

Both forms parse to the same ``FieldTree``. An entry is a leaf when it sits at
the next sequential position of its collection (list items, or mapping keys
``0, 1, 2, ...`` given as integers or digit strings); every other mapping key
names a relation whose value is parsed recursively.
"""

from collections import deque
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from modelsearch.exceptions import FieldTreeError

DEFAULT_WEIGHT = 1.0


class FieldTree:
    """Immutable tree of leaf field names and named relation subtrees."""

    __slots__ = ("_leaves", "_children")

    def __init__(self, leaves: Iterable[str] = (), children: Optional[Mapping[str, "FieldTree"]] = None):
        self._leaves: Tuple[str, ...] = tuple(dict.fromkeys(leaves))
        self._children: Mapping[str, FieldTree] = MappingProxyType(dict(children or {}))

    @property
    def leaves(self) -> Tuple[str, ...]:
        return self._leaves

    @property
    def children(self) -> Mapping[str, "FieldTree"]:
        return self._children

    def is_empty(self) -> bool:
        return not self._leaves and not self._children

    def merge(self, other: "FieldTree") -> "FieldTree":
        """Return the union of both trees, merging relations that share a name."""
        children = dict(self._children)
        for name, subtree in other.children.items():
            children[name] = children[name].merge(subtree) if name in children else subtree
        return FieldTree(self._leaves + other.leaves, children)

    def relation_paths(self, prefix: str = "") -> List[str]:
        """Dotted paths of every relation in the tree, parents before children."""
        paths = []
        for name, subtree in self._children.items():
            path = f"{prefix}{name}"
            paths.append(path)
            paths.extend(subtree.relation_paths(f"{path}."))
        return paths

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldTree):
            return NotImplemented
        return frozenset(self._leaves) == frozenset(other.leaves) and dict(self._children) == dict(other.children)

    def __hash__(self) -> int:
        return hash((frozenset(self._leaves), frozenset(self._children.items())))

    def __repr__(self) -> str:
        return f"FieldTree(leaves={list(self._leaves)!r}, children={dict(self._children)!r})"


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _is_position(key: Any, position: int) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return key == position
    if isinstance(key, str) and key.isascii() and key.isdigit():
        return str(int(key)) == key and int(key) == position
    return False


def _check_name(name: str, path: str) -> str:
    if not name:
        raise FieldTreeError("Field names cannot be empty", path or None)
    if "." in name:
        raise FieldTreeError(f"Field name '{name}' cannot contain '.'", path or None)
    return name


def parse_field_tree(raw: Any, path: str = "") -> FieldTree:
    """Parse a raw searchable-fields configuration value into a ``FieldTree``.

    Args:
        raw: A field name, a list, or a mapping (see module docstring).
            ``None`` yields an empty tree.
        path: Dotted path of ``raw`` inside the enclosing configuration,
            used in error messages.

    Returns:
        The parsed tree. Relations declared twice at the same level are merged.

    Raises:
        FieldTreeError: If an entry is neither a field name nor a collection.
    """
    leaves: List[str] = []
    children: Dict[str, FieldTree] = {}
    if raw is not None:
        _collect(raw, path, leaves, children)
    return FieldTree(leaves, children)


def _collect(raw: Any, path: str, leaves: List[str], children: Dict[str, FieldTree]) -> None:
    if isinstance(raw, str):
        leaves.append(_check_name(raw, path))
    elif isinstance(raw, Mapping):
        position = 0
        for key, value in raw.items():
            if _is_position(key, position):
                _collect_positional(value, f"{path}[{position}]", leaves, children)
                position += 1
            else:
                _add_relation(str(key), value, path, children)
    elif isinstance(raw, (list, tuple)):
        for index, value in enumerate(raw):
            _collect_positional(value, f"{path}[{index}]", leaves, children)
    else:
        raise FieldTreeError(f"Unsupported field configuration of type {type(raw).__name__}", path or None)


def _collect_positional(value: Any, path: str, leaves: List[str], children: Dict[str, FieldTree]) -> None:
    # positional collections are spliced into the enclosing level
    if isinstance(value, (str, Mapping, list, tuple)):
        _collect(value, path, leaves, children)
    else:
        raise FieldTreeError(
            f"Field entry must be a field name or a collection, got {type(value).__name__}", path
        )


def _add_relation(name: str, value: Any, path: str, children: Dict[str, FieldTree]) -> None:
    relation_path = _join(path, name)
    _check_name(name, relation_path)
    if not isinstance(value, (str, Mapping, list, tuple)):
        raise FieldTreeError(
            f"Relation '{name}' must map to a field name or a field list, got {type(value).__name__}",
            relation_path,
        )
    subtree = parse_field_tree(value, relation_path)
    children[name] = children[name].merge(subtree) if name in children else subtree


def walk_leaves(tree: FieldTree, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield ``(full_path, leaf_name)`` breadth-first in configuration order."""
    queue = deque([(tree, prefix)])
    while queue:
        node, node_prefix = queue.popleft()
        for leaf in node.leaves:
            yield f"{node_prefix}{leaf}", leaf
        for name, subtree in node.children.items():
            queue.append((subtree, f"{node_prefix}{name}."))


class BoostTree:
    """Per-field relevance weights, nested by relation name."""

    __slots__ = ("_weights", "_children")

    def __init__(self, weights: Optional[Mapping[str, float]] = None, children: Optional[Mapping[str, "BoostTree"]] = None):
        self._weights: Mapping[str, float] = MappingProxyType(dict(weights or {}))
        self._children: Mapping[str, BoostTree] = MappingProxyType(dict(children or {}))

    @property
    def weights(self) -> Mapping[str, float]:
        return self._weights

    @property
    def children(self) -> Mapping[str, "BoostTree"]:
        return self._children

    def weight_for(self, path: str) -> float:
        """Weight configured for a dotted field path, ``1.0`` when absent.

        A weight given for a relation name covers every field below it.
        """
        node = self
        segments = path.split(".")
        for segment in segments[:-1]:
            if segment in node.weights:
                return node.weights[segment]
            child = node.children.get(segment)
            if child is None:
                return DEFAULT_WEIGHT
            node = child
        return node.weights.get(segments[-1], DEFAULT_WEIGHT)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoostTree):
            return NotImplemented
        return dict(self._weights) == dict(other.weights) and dict(self._children) == dict(other.children)

    def __repr__(self) -> str:
        return f"BoostTree(weights={dict(self._weights)!r}, children={dict(self._children)!r})"


def parse_boost_tree(raw: Any, path: str = "") -> BoostTree:
    """Parse ``searchable_fields_boost`` into a ``BoostTree``."""
    if raw is None:
        return BoostTree()
    if not isinstance(raw, Mapping):
        raise FieldTreeError(f"Boost configuration must be a mapping, got {type(raw).__name__}", path or None)

    weights: Dict[str, float] = {}
    children: Dict[str, BoostTree] = {}
    for key, value in raw.items():
        name = str(key)
        entry_path = _join(path, name)
        _check_name(name, entry_path)
        if isinstance(value, bool) or not isinstance(value, (int, float, Mapping)):
            raise FieldTreeError(f"Boost for '{name}' must be a number or a mapping", entry_path)
        if isinstance(value, Mapping):
            children[name] = parse_boost_tree(value, entry_path)
        elif value < 0:
            raise FieldTreeError(f"Boost for '{name}' cannot be negative", entry_path)
        else:
            weights[name] = float(value)
    return BoostTree(weights, children)
