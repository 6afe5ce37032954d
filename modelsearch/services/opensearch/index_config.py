from typing import Any, Dict

from modelsearch.config import OpenSearchSettings
from modelsearch.core.mapping import MappingSchema, schema_to_properties
from modelsearch.registry import CompiledModel

# Analysis chain shared by every model index
INDEX_ANALYSIS = {
    "analyzer": {
        "full_text_en": {
            "type": "custom",
            "tokenizer": "standard",
            "filter": ["lowercase", "asciifolding", "porter_stem"],
        },
        "full_text_lv": {
            "type": "custom",
            "tokenizer": "standard",
            "filter": ["lowercase", "asciifolding"],
        },
        # Prefix search on codes and titles
        "autocomplete": {
            "type": "custom",
            "tokenizer": "edge_ngram_tokenizer",
            "filter": ["lowercase", "asciifolding"],
        },
        "code_analyzer": {
            "type": "custom",
            "tokenizer": "standard",
            "filter": ["lowercase", "asciifolding"],
        },
        # Size-like inputs such as "20x47x14", "20-47-14", "20 47 14"
        "size_analyzer": {
            "type": "custom",
            "char_filter": ["numbers_only"],
            "tokenizer": "whitespace",
            "filter": ["lowercase"],
        },
    },
    "tokenizer": {
        "edge_ngram_tokenizer": {
            "type": "edge_ngram",
            "min_gram": 2,
            "max_gram": 20,
            "token_chars": ["letter", "digit"],
        },
    },
    "char_filter": {
        # Keep digits and decimal separators only
        "numbers_only": {
            "type": "pattern_replace",
            "pattern": "[^0-9.,]+",
            "replacement": " ",
        },
    },
    "normalizer": {
        "lowercase_normalizer": {
            "type": "custom",
            "filter": ["lowercase", "asciifolding"],
        },
    },
}


def build_index_settings(compiled: CompiledModel, settings: OpenSearchSettings) -> Dict[str, Any]:
    """Shard/replica defaults and the analysis chain, overridable per model."""
    index_settings = {
        "number_of_shards": settings.number_of_shards,
        "number_of_replicas": settings.number_of_replicas,
        "analysis": INDEX_ANALYSIS,
    }
    index_settings.update(compiled.index_settings)
    return index_settings


def build_index_body(compiled: CompiledModel, schema: MappingSchema, settings: OpenSearchSettings) -> Dict[str, Any]:
    return {
        "settings": build_index_settings(compiled, settings),
        "mappings": {"properties": schema_to_properties(schema)},
    }
