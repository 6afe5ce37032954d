"""Shared fixtures and helpers for tests."""

from typing import Any, Dict, Generator

import pytest

from catalog_models import InMemoryDatabase, seed
from modelsearch.cache import TTLCacheStore
from modelsearch.config import Settings
from modelsearch.registry import ModelRegistry

PRODUCT_CONFIG: Dict[str, Any] = {
    "index": "products",
    "model": "catalog_models:Product",
    "searchable_fields": {
        "0": "title",
        "1": "sku",
        "2": "price",
        "category": ["title", {"parent": ["title"]}],
        "images": ["alt"],
    },
    "translatable_fields": ["title", {"category": ["title", {"parent": "title"}]}, {"images": ["alt"]}],
    "translatable": {"locales": ["en", "lv"], "fallback_locale": "en"},
    "searchable_fields_boost": {"title": 3, "sku": 5, "images": 0.5},
    "return_fields": ["id", "sku", "price"],
}


class FakeTimer:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def settings() -> Settings:
    return Settings(models={"product": PRODUCT_CONFIG}, models_file=None)


@pytest.fixture
def registry(settings: Settings) -> ModelRegistry:
    return ModelRegistry.from_settings(settings, cache=TTLCacheStore(maxsize=64, ttl=60))


@pytest.fixture
def database() -> Generator[InMemoryDatabase, None, None]:
    db = InMemoryDatabase()
    db.startup()
    seed(db)
    yield db
    db.teardown()
