import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from modelsearch.cache import BaseCache, NullCache, TTLCacheStore
from modelsearch.config import CacheSettings, ModelIndexConfig, QueryConditions, Settings
from modelsearch.core.computed import ComputedField
from modelsearch.core.field_tree import BoostTree, FieldTree, parse_boost_tree, parse_field_tree
from modelsearch.core.locales import LocaleSet
from modelsearch.core.mapping import FieldType, MappingSchema, build_schema, field_type_for_kind
from modelsearch.core.projector import DocumentProjector
from modelsearch.core.weigher import WeightedFieldList, build_weighted_fields
from modelsearch.exceptions import ConfigurationError, UnknownModelError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledModel:
    """Parsed, validated form of a ``ModelIndexConfig``."""

    model_id: str
    index_name: str
    fields: FieldTree
    translatable: FieldTree
    boosts: BoostTree
    locales: LocaleSet
    computed_fields: Tuple[ComputedField, ...]
    field_types: Mapping[str, FieldType]
    chunk_size: int
    query_conditions: QueryConditions
    index_settings: Mapping[str, Any]
    return_fields: FieldTree
    model_path: Optional[str] = None

    def relation_paths(self) -> List[str]:
        """Relations the data-access layer must eager-load before projection."""
        return self.fields.relation_paths()


def index_name_for(index: str, prefix: str = "") -> str:
    return f"{prefix}_{index}" if prefix else index


def compile_model(model_id: str, config: ModelIndexConfig, settings: Settings) -> CompiledModel:
    """Parse every field tree of a model configuration.

    Raises:
        ConfigurationError: With the dotted path of the first malformed entry.
    """
    fields = parse_field_tree(config.searchable_fields, "searchable_fields")

    translatable = FieldTree()
    if config.translatable.enabled:
        translatable = parse_field_tree(config.translatable_fields, "translatable_fields").merge(
            parse_field_tree(config.translatable.fields, "translatable.fields")
        )

    codes = config.translatable.locales or settings.translatable.locales
    fallback = config.translatable.fallback_locale
    if fallback is None and settings.translatable.fallback_locale in codes:
        fallback = settings.translatable.fallback_locale
    locales = LocaleSet.of(codes, fallback)

    computed_fields = []
    for name, computed in config.computed_fields.items():
        field_type_for_kind(computed.type, f"computed_fields.{name}")
        computed_fields.append(
            ComputedField(name=name, source_fields=tuple(computed.source_fields), kind=computed.type, analyzer=computed.analyzer)
        )

    field_types = {
        path: field_type_for_kind(kind, f"field_types.{path}") for path, kind in config.field_types.items()
    }

    return CompiledModel(
        model_id=model_id,
        index_name=index_name_for(config.index, settings.opensearch.index_prefix),
        fields=fields,
        translatable=translatable,
        boosts=parse_boost_tree(config.searchable_fields_boost, "searchable_fields_boost"),
        locales=locales,
        computed_fields=tuple(computed_fields),
        field_types=field_types,
        chunk_size=config.chunk_size or settings.indexing.chunk_size,
        query_conditions=config.query_conditions,
        index_settings=dict(config.index_settings),
        return_fields=parse_field_tree(config.return_fields, "return_fields"),
        model_path=config.model,
    )


def config_version(config: ModelIndexConfig) -> str:
    payload = json.dumps(config.model_dump(mode="json"), default=str)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()[:12]


def make_cache(settings: CacheSettings) -> BaseCache:
    if not settings.enabled:
        return NullCache()
    return TTLCacheStore(maxsize=settings.maxsize, ttl=settings.ttl)


class ModelRegistry:
    """
    Configured models and their derived, cached artifacts.

    Everything derived from a model's configuration (compiled trees, schema,
    weighted field list, projector) is read through the cache under a key that
    includes a hash of that configuration.
    """

    def __init__(self, models: Mapping[str, ModelIndexConfig], settings: Settings, cache: Optional[BaseCache] = None):
        self.settings = settings
        self.cache = cache if cache is not None else make_cache(settings.cache)
        self._models: Dict[str, ModelIndexConfig] = dict(models)
        self._versions = {model_id: config_version(config) for model_id, config in self._models.items()}
        logger.info(f"Model registry initialized with {len(self._models)} models")

    @classmethod
    def from_settings(cls, settings: Settings, cache: Optional[BaseCache] = None) -> "ModelRegistry":
        return cls(settings.model_configs(), settings, cache)

    def model_ids(self) -> List[str]:
        return list(self._models)

    def config(self, model_id: str) -> ModelIndexConfig:
        try:
            return self._models[model_id]
        except KeyError:
            raise UnknownModelError(model_id) from None

    def get(self, model_id: str) -> CompiledModel:
        config = self.config(model_id)
        return self._cached(model_id, "model", lambda: self._compile(model_id, config))

    def schema(self, model_id: str) -> MappingSchema:
        compiled = self.get(model_id)
        return self._cached(
            model_id,
            "schema",
            lambda: build_schema(
                compiled.fields,
                compiled.translatable,
                compiled.locales,
                overrides=compiled.field_types,
                computed_fields=compiled.computed_fields,
            ),
        )

    def weighted_fields(self, model_id: str) -> WeightedFieldList:
        compiled = self.get(model_id)
        return self._cached(
            model_id,
            "weighted_fields",
            lambda: build_weighted_fields(compiled.fields, compiled.translatable, compiled.boosts, compiled.locales),
        )

    def projector(self, model_id: str) -> DocumentProjector:
        compiled = self.get(model_id)
        return self._cached(
            model_id,
            "projector",
            lambda: DocumentProjector(
                compiled.fields,
                compiled.translatable,
                compiled.locales,
                {computed.name: computed for computed in compiled.computed_fields},
            ),
        )

    def validate(self) -> None:
        """Compile every model so configuration errors surface at startup."""
        for model_id in self._models:
            self.get(model_id)

    def clear_cache(self) -> None:
        self.cache.clear()

    def _compile(self, model_id: str, config: ModelIndexConfig) -> CompiledModel:
        try:
            compiled = compile_model(model_id, config, self.settings)
        except ConfigurationError as e:
            logger.error(f"Invalid configuration for model {model_id}: {e}")
            raise
        logger.debug(f"Compiled model {model_id}: relations={compiled.relation_paths()}")
        return compiled

    def _cached(self, model_id: str, kind: str, compute):
        key = f"modelsearch:{model_id}:{self._versions[model_id]}:{kind}"
        return self.cache.get_or_compute(key, compute)
