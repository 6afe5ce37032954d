"""Tests for the OpenSearch client wrapper with a mocked low-level client."""

from unittest.mock import MagicMock, patch

import pytest
from opensearchpy.exceptions import ConnectionError as OpenSearchConnectionError
from opensearchpy.exceptions import NotFoundError

from modelsearch.config import Settings
from modelsearch.core.weigher import WeightedField
from modelsearch.exceptions import IndexingException
from modelsearch.services.opensearch.client import OpenSearchClient
from modelsearch.services.opensearch.query_builder import ModelQueryBuilder


@pytest.fixture
def low_level() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(low_level: MagicMock) -> OpenSearchClient:
    return OpenSearchClient(settings=Settings(), client=low_level)


class TestIndexManagement:
    def test_create_index(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.indices.exists.return_value = False
        low_level.indices.create.return_value = {"acknowledged": True}
        assert client.create_index("products", {"mappings": {}})
        low_level.indices.create.assert_called_once_with(index="products", body={"mappings": {}})

    def test_existing_index_is_kept(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.indices.exists.return_value = True
        assert not client.create_index("products", {})
        low_level.indices.delete.assert_not_called()
        low_level.indices.create.assert_not_called()

    def test_force_recreates(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.indices.exists.return_value = True
        low_level.indices.create.return_value = {"acknowledged": True}
        assert client.create_index("products", {}, force=True)
        low_level.indices.delete.assert_called_once_with(index="products")

    def test_delete_missing_index(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.indices.delete.side_effect = NotFoundError(404, "index_not_found_exception", {})
        assert not client.delete_index("products")


class TestBulkIndex:
    def test_actions_carry_ids(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        with patch("modelsearch.services.opensearch.client.helpers.bulk", return_value=(2, [])) as bulk:
            result = client.bulk_index("products", [(1, {"sku": "a"}), (None, {"sku": "b"})])
        assert result == {"success": 2, "failed": 0}
        actions = bulk.call_args.args[1]
        assert actions == [
            {"_index": "products", "_source": {"sku": "a"}, "_id": 1},
            {"_index": "products", "_source": {"sku": "b"}},
        ]

    def test_item_failures_counted(self, client: OpenSearchClient) -> None:
        with patch("modelsearch.services.opensearch.client.helpers.bulk", return_value=(1, [{"index": {}}])):
            assert client.bulk_index("products", [(1, {}), (2, {})]) == {"success": 1, "failed": 1}

    def test_empty_batch_skips_request(self, client: OpenSearchClient) -> None:
        with patch("modelsearch.services.opensearch.client.helpers.bulk") as bulk:
            assert client.bulk_index("products", []) == {"success": 0, "failed": 0}
        bulk.assert_not_called()

    def test_transport_error_raises(self, client: OpenSearchClient) -> None:
        error = OpenSearchConnectionError("N/A", "connection refused", None)
        with patch("modelsearch.services.opensearch.client.helpers.bulk", side_effect=error):
            with pytest.raises(IndexingException):
                client.bulk_index("products", [(1, {})])


class TestSearch:
    def test_hits_carry_id_and_score(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.search.return_value = {
            "hits": {
                "total": {"value": 1},
                "max_score": 2.5,
                "hits": [{"_id": "1", "_score": 2.5, "_source": {"sku": "6204-2RS"}}],
            }
        }
        builder = ModelQueryBuilder("6204", [WeightedField("sku", 5.0)])
        results = client.search("products", builder)
        assert results == {
            "total": 1,
            "max_score": 2.5,
            "hits": [{"sku": "6204-2RS", "_id": "1", "_score": 2.5}],
        }
        low_level.search.assert_called_once_with(index="products", body=builder.build())

    def test_missing_index(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.search.side_effect = NotFoundError(404, "index_not_found_exception", {})
        results = client.search("products", ModelQueryBuilder("6204", []))
        assert results["hits"] == []
        assert results["error"] == "Index not found"


class TestHealth:
    def test_yellow_is_healthy(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.cluster.health.return_value = {"status": "yellow"}
        assert client.health_check()

    def test_unreachable(self, client: OpenSearchClient, low_level: MagicMock) -> None:
        low_level.cluster.health.side_effect = OpenSearchConnectionError("N/A", "refused", None)
        assert not client.health_check()
