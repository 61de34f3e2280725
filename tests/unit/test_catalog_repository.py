"""Unit tests for CatalogRepository."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from produce_order_service.exceptions import StorageUnavailableError
from produce_order_service.models.catalog_models import Item
from produce_order_service.repositories.catalog_repository import CatalogRepository


@pytest.mark.unit
class TestCatalogRepository:
    """Test suite for CatalogRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        """Create a mock DynamoDB resource."""
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> CatalogRepository:
        """Create a CatalogRepository with mocked DynamoDB."""
        return CatalogRepository(
            dynamodb_resource=mock_dynamodb, table_name="test-catalog", catalog_id="default"
        )

    def test_repository_initialization(self, mock_dynamodb: MagicMock) -> None:
        """Test that repository initializes correctly."""
        repo = CatalogRepository(dynamodb_resource=mock_dynamodb, table_name="test-table")
        assert repo.table_name == "test-table"
        assert repo.catalog_id == "default"
        mock_dynamodb.Table.assert_called_once_with("test-table")

    def test_load_items_success(
        self, repository: CatalogRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test loading items keeps stored order."""
        mock_dynamodb.Table.return_value.get_item.return_value = {
            "Item": {
                "catalog_id": "default",
                "items": [
                    {"id": "b", "name": "B", "category": "fruit", "price": Decimal("2"), "unit": "pc", "sort_order": Decimal("0")},
                    {"id": "a", "name": "A", "category": "vegetable", "price": Decimal("1"), "unit": "kg", "sort_order": Decimal("0")},
                ],
            }
        }

        items = repository.load_items()

        assert [item.id for item in items] == ["b", "a"]
        mock_dynamodb.Table.return_value.get_item.assert_called_once_with(
            Key={"catalog_id": "default"}, ConsistentRead=True
        )

    def test_load_items_missing_document(
        self, repository: CatalogRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that a missing catalog document reads as empty."""
        mock_dynamodb.Table.return_value.get_item.return_value = {}

        assert repository.load_items() == []

    def test_load_items_dynamodb_error(
        self, repository: CatalogRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that DynamoDB errors raise StorageUnavailableError."""
        mock_dynamodb.Table.return_value.get_item.side_effect = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "Server error"}}, "GetItem"
        )

        with pytest.raises(StorageUnavailableError):
            repository.load_items()

    def test_save_items_rewrites_document(
        self, repository: CatalogRepository, mock_dynamodb: MagicMock, tomato: Item, apple: Item
    ) -> None:
        """Test that saving writes the whole collection as one document."""
        repository.save_items([tomato, apple])

        put_kwargs = mock_dynamodb.Table.return_value.put_item.call_args.kwargs
        document = put_kwargs["Item"]
        assert document["catalog_id"] == "default"
        assert [entry["id"] for entry in document["items"]] == ["tomato", "apple"]
        assert "updated_at" in document

    def test_save_items_dynamodb_error(
        self, repository: CatalogRepository, mock_dynamodb: MagicMock, tomato: Item
    ) -> None:
        """Test that write failures raise StorageUnavailableError."""
        mock_dynamodb.Table.return_value.put_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "Slow down"}},
            "PutItem",
        )

        with pytest.raises(StorageUnavailableError):
            repository.save_items([tomato])
