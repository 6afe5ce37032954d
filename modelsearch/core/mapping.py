from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from modelsearch.exceptions import ConfigurationError

from .computed import ComputedField
from .field_tree import FieldTree, walk_leaves
from .locales import LocaleSet, analyzer_for_locale
from .translatable import is_translatable

# Field kinds and the OpenSearch type each maps to
OPENSEARCH_TYPES = {
    "text": "text",
    "keyword": "keyword",
    "numeric": "double",
    "date": "date",
    "boolean": "boolean",
}


@dataclass(frozen=True)
class FieldType:
    """Schema descriptor of one indexed field."""

    kind: str
    analyzer: Optional[str] = None
    search_analyzer: Optional[str] = None
    normalizer: Optional[str] = None
    subfields: Tuple[Tuple[str, "FieldType"], ...] = ()

    def __post_init__(self):
        if self.kind not in OPENSEARCH_TYPES:
            raise ConfigurationError(f"Unknown field kind '{self.kind}'")

    def to_mapping(self) -> Dict[str, Any]:
        mapping: Dict[str, Any] = {"type": OPENSEARCH_TYPES[self.kind]}
        if self.analyzer:
            mapping["analyzer"] = self.analyzer
        if self.search_analyzer:
            mapping["search_analyzer"] = self.search_analyzer
        if self.normalizer:
            mapping["normalizer"] = self.normalizer
        if self.subfields:
            mapping["fields"] = {name: subfield.to_mapping() for name, subfield in self.subfields}
        return mapping


MappingSchema = Dict[str, FieldType]

TEXT = FieldType("text", analyzer="standard")
KEYWORD = FieldType("keyword")
NUMERIC = FieldType("numeric")
DATE = FieldType("date")
BOOLEAN = FieldType("boolean")
# Exact-match code with normalized sub-fields for free-text and prefix search
CODE = FieldType(
    "keyword",
    normalizer="lowercase_normalizer",
    subfields=(
        ("text", FieldType("text", analyzer="code_analyzer")),
        ("autocomplete", FieldType("text", analyzer="autocomplete", search_analyzer="standard")),
    ),
)

FIELD_KINDS = {
    "text": TEXT,
    "keyword": KEYWORD,
    "code": CODE,
    "numeric": NUMERIC,
    "date": DATE,
    "boolean": BOOLEAN,
}

IDENTIFIER_NAMES = {"id", "sku", "code", "ean", "isbn"}
IDENTIFIER_SUFFIXES = ("_id", "_code", "_sku", "_number")
DATE_SUFFIXES = ("_at", "_date", "_on")
BOOLEAN_PREFIXES = ("is_", "has_")
NUMERIC_NAMES = {"price", "quantity", "weight", "width", "height", "length", "rating"}
NUMERIC_SUFFIXES = ("_count", "_qty", "_amount", "_dia")


def infer_field_type(name: str) -> FieldType:
    """Default type rule based on the field name."""
    lowered = name.lower()
    if lowered in IDENTIFIER_NAMES or lowered.endswith(IDENTIFIER_SUFFIXES):
        return CODE
    if lowered.endswith(DATE_SUFFIXES):
        return DATE
    if lowered.startswith(BOOLEAN_PREFIXES) or lowered.endswith("_flag"):
        return BOOLEAN
    if lowered in NUMERIC_NAMES or lowered.startswith("price_") or lowered.endswith(NUMERIC_SUFFIXES):
        return NUMERIC
    return TEXT


def field_type_for_kind(kind: str, path: Optional[str] = None) -> FieldType:
    try:
        return FIELD_KINDS[kind]
    except KeyError:
        raise ConfigurationError(f"Unknown field kind '{kind}', expected one of {sorted(FIELD_KINDS)}", path)


def build_schema(
    fields: FieldTree,
    translatable: FieldTree,
    locales: LocaleSet,
    type_of: Callable[[str], FieldType] = infer_field_type,
    overrides: Optional[Mapping[str, FieldType]] = None,
    computed_fields: Iterable[ComputedField] = (),
) -> MappingSchema:
    """
    Build the index field schema for a field tree.

    Args:
        fields: Searchable fields
        translatable: Fields carrying per-locale translations
        locales: Locales to expand translatable fields into
        type_of: Type rule applied to plain leaf names
        overrides: Explicit types keyed by dotted path or leaf name
        computed_fields: Extra fields assembled at projection time

    Returns:
        Field path (locale-suffixed for translatable fields) -> FieldType
    """
    overrides = overrides or {}
    schema: MappingSchema = {}

    for path, leaf in walk_leaves(fields):
        if is_translatable(path, translatable):
            for locale in locales.codes:
                schema[f"{path}_{locale}"] = FieldType("text", analyzer=analyzer_for_locale(locale))
        elif path in overrides:
            schema[path] = overrides[path]
        elif leaf in overrides:
            schema[path] = overrides[leaf]
        else:
            schema[path] = type_of(leaf)

    for computed in computed_fields:
        base = field_type_for_kind(computed.kind, computed.name)
        schema[computed.name] = replace(base, analyzer=computed.analyzer) if computed.analyzer else base

    return schema


def schema_to_properties(schema: MappingSchema) -> Dict[str, Any]:
    """Nest dotted schema paths into OpenSearch ``properties`` objects."""
    properties: Dict[str, Any] = {}
    for path, field_type in schema.items():
        *parents, leaf = path.split(".")
        node = properties
        for parent in parents:
            entry = node.setdefault(parent, {"properties": {}})
            if "properties" not in entry:
                raise ConfigurationError(f"Relation '{parent}' clashes with a field of the same name", path)
            node = entry["properties"]
        if leaf in node and "properties" in node[leaf]:
            raise ConfigurationError(f"Field '{leaf}' clashes with a relation of the same name", path)
        node[leaf] = field_type.to_mapping()
    return properties
