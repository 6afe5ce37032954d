from .computed import ComputedField
from .entity import MISSING, NOT_LOADED, EntityNode, Many, MappingEntity, Single
from .field_tree import BoostTree, FieldTree, parse_boost_tree, parse_field_tree
from .locales import LocaleSet
from .mapping import FieldType, build_schema, infer_field_type, schema_to_properties
from .projector import DocumentProjector, project
from .translatable import is_translatable
from .weigher import WeightedField, build_weighted_fields

__all__ = [
    "BoostTree",
    "ComputedField",
    "DocumentProjector",
    "EntityNode",
    "FieldTree",
    "FieldType",
    "LocaleSet",
    "MISSING",
    "Many",
    "MappingEntity",
    "NOT_LOADED",
    "Single",
    "WeightedField",
    "build_schema",
    "build_weighted_fields",
    "infer_field_type",
    "is_translatable",
    "parse_boost_tree",
    "parse_field_tree",
    "project",
    "schema_to_properties",
]
