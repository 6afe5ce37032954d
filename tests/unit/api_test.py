"""Tests for the HTTP API with in-memory services."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from modelsearch.config import Settings
from modelsearch.main import create_app
from modelsearch.registry import ModelRegistry
from modelsearch.services.indexer import ModelIndexer
from modelsearch.services.opensearch.client import OpenSearchClient
from modelsearch.services.search import SearchService


@pytest.fixture
def opensearch() -> MagicMock:
    client = MagicMock(spec=OpenSearchClient)
    client.health_check.return_value = True
    client.index_exists.return_value = False
    client.create_index.return_value = True
    client.bulk_index.side_effect = lambda index_name, documents: {"success": len(documents), "failed": 0}
    client.search.return_value = {"total": 1, "max_score": 1.5, "hits": [{"_id": "1", "_score": 1.5, "sku": "6204-2RS"}]}
    return client


@pytest.fixture
def client(opensearch: MagicMock, registry: ModelRegistry, database, settings: Settings) -> TestClient:
    app = create_app()
    # lifespan is not run without a context manager; wire the state directly
    app.state.settings = settings
    app.state.registry = registry
    app.state.database = database
    app.state.opensearch_client = opensearch
    app.state.indexer = ModelIndexer(opensearch, registry, database, settings)
    app.state.search_service = SearchService(opensearch, registry, database, settings)
    return TestClient(app)


class TestPing:
    def test_ping(self, client: TestClient) -> None:
        resp = client.get("/api/v1/ping")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["services"]["opensearch"]["status"] == "healthy"

    def test_degraded_without_database(self, client: TestClient) -> None:
        client.app.state.database = None
        body = client.get("/api/v1/ping").json()
        assert body["status"] == "degraded"
        assert body["services"]["database"]["status"] == "unhealthy"


class TestModels:
    def test_list(self, client: TestClient) -> None:
        resp = client.get("/api/v1/models")
        assert resp.status_code == 200
        assert resp.json() == [
            {
                "model_id": "product",
                "index": "products",
                "relations": ["category", "category.parent", "images"],
                "locales": ["en", "lv"],
            }
        ]

    def test_mapping(self, client: TestClient) -> None:
        properties = client.get("/api/v1/models/product/mapping").json()["properties"]
        assert properties["title_en"] == {"type": "text", "analyzer": "full_text_en"}
        assert "title" not in properties

    def test_fields(self, client: TestClient) -> None:
        fields = client.get("/api/v1/models/product/fields").json()
        assert fields[0] == {"path": "title_en", "weight": 3.0}

    def test_unknown_model(self, client: TestClient) -> None:
        resp = client.get("/api/v1/models/brand/mapping")
        assert resp.status_code == 404
        assert "brand" in resp.json()["detail"]

    def test_index(self, client: TestClient) -> None:
        resp = client.post("/api/v1/models/product/index", json={"chunk_size": 2})
        assert resp.status_code == 200
        body = resp.json()
        assert body["indexed"] == 3
        assert body["chunks"] == 2

    def test_index_without_body(self, client: TestClient) -> None:
        assert client.post("/api/v1/models/product/index").json()["indexed"] == 3

    def test_index_without_database(self, client: TestClient) -> None:
        client.app.state.indexer.database = None
        assert client.post("/api/v1/models/product/index").status_code == 503


class TestSearchRoute:
    def test_search(self, client: TestClient, opensearch: MagicMock) -> None:
        resp = client.get("/api/v1/search/product", params={"q": "6204", "size": 5})
        assert resp.status_code == 200
        body = resp.json()
        assert body["model_id"] == "product"
        assert body["hits"][0]["_id"] == "1"
        assert opensearch.search.call_args.args[1].size == 5

    def test_unknown_model(self, client: TestClient) -> None:
        assert client.get("/api/v1/search/brand", params={"q": "x"}).status_code == 404

    def test_analyzer_override(self, client: TestClient, opensearch: MagicMock) -> None:
        resp = client.get("/api/v1/search/product", params={"q": "20x47x14", "analyzer": "size_analyzer"})
        assert resp.status_code == 200
        assert opensearch.search.call_args.args[1].analyzer == "size_analyzer"

    def test_default_analyzer(self, client: TestClient, opensearch: MagicMock) -> None:
        client.get("/api/v1/search/product", params={"q": "6204"})
        assert opensearch.search.call_args.args[1].analyzer is None

    def test_search_all(self, client: TestClient, opensearch: MagicMock) -> None:
        opensearch.index_exists.return_value = True
        resp = client.get("/api/v1/search", params={"q": "6204", "size": 3})
        assert resp.status_code == 200
        body = resp.json()
        assert list(body) == ["product"]
        assert body["product"]["hits"][0]["sku"] == "6204-2RS"
        assert opensearch.search.call_args.args[1].size == 3

    def test_search_all_skips_missing_indexes(self, client: TestClient, opensearch: MagicMock) -> None:
        resp = client.get("/api/v1/search", params={"q": "6204"})
        assert resp.status_code == 200
        assert resp.json() == {}
        opensearch.search.assert_not_called()


class TestIndexesRoute:
    def test_create(self, client: TestClient, opensearch: MagicMock) -> None:
        resp = client.put("/api/v1/indexes")
        assert resp.status_code == 200
        assert resp.json() == {"product": True}
        assert opensearch.create_index.call_args.args[0] == "products"
        opensearch.bulk_index.assert_not_called()

    def test_delete(self, client: TestClient, opensearch: MagicMock) -> None:
        opensearch.delete_index.return_value = True
        resp = client.delete("/api/v1/indexes", params={"model": "product"})
        assert resp.status_code == 200
        assert resp.json() == {"product": True}
        opensearch.delete_index.assert_called_once_with("products")

    def test_unknown_model(self, client: TestClient, opensearch: MagicMock) -> None:
        assert client.delete("/api/v1/indexes", params={"model": "brand"}).status_code == 404
        opensearch.delete_index.assert_not_called()

    def test_reindex(self, client: TestClient, opensearch: MagicMock) -> None:
        opensearch.index_exists.return_value = True
        resp = client.post("/api/v1/indexes/reindex")
        assert resp.status_code == 200
        body = resp.json()
        assert body["product"]["indexed"] == 3
        assert opensearch.create_index.call_args.kwargs["force"] is True

    def test_failed_index_creation_is_502(self, client: TestClient, opensearch: MagicMock) -> None:
        opensearch.create_index.return_value = False
        resp = client.post("/api/v1/indexes/reindex")
        assert resp.status_code == 502
        assert "products" in resp.json()["detail"]


class TestConfigurationErrors:
    def test_malformed_model_is_422(self) -> None:
        settings = Settings(models={"broken": {"index": "broken", "searchable_fields": {"category": 3}}})
        registry = ModelRegistry.from_settings(settings)
        app = create_app()
        app.state.registry = registry
        resp = TestClient(app).get("/api/v1/models/broken/fields")
        assert resp.status_code == 422
        assert resp.json()["path"] == "searchable_fields.category"


class TestCache:
    def test_clear(self, client: TestClient, registry: ModelRegistry) -> None:
        schema = registry.schema("product")
        assert client.post("/api/v1/cache/clear").json() == {"status": "cleared"}
        assert registry.schema("product") is not schema
