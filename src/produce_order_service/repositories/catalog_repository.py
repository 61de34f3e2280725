"""DynamoDB repository for the item catalog.

The whole catalog lives in a single document keyed by ``catalog_id``; every
mutation rewrites it. Storage failures are logged and re-raised as
``StorageUnavailableError`` so callers can tell them apart from validation
errors.
"""

import logging
from datetime import UTC, datetime

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from produce_order_service.exceptions import StorageUnavailableError
from produce_order_service.models.catalog_models import Item

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Repository for loading and saving the catalog document."""

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        catalog_id: str = "default",
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
            catalog_id: Partition key of the catalog document
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.catalog_id = catalog_id
        self.table: Table = dynamodb_resource.Table(table_name)

    def load_items(self) -> list[Item]:
        """Load every item in stored (insertion) order.

        Returns:
            list: Items in the document, empty if the document does not exist

        Raises:
            StorageUnavailableError: If DynamoDB cannot be read
        """
        try:
            response = self.table.get_item(
                Key={"catalog_id": self.catalog_id}, ConsistentRead=True
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to load catalog {self.catalog_id}: {e}")
            raise StorageUnavailableError("Failed to load items") from e

        if "Item" not in response:
            return []

        return [Item.from_dynamodb_item(entry) for entry in response["Item"].get("items", [])]

    def save_items(self, items: list[Item]) -> None:
        """Rewrite the whole catalog document.

        Args:
            items: Complete item list in insertion order

        Raises:
            StorageUnavailableError: If DynamoDB cannot be written
        """
        try:
            self.table.put_item(
                Item={
                    "catalog_id": self.catalog_id,
                    "items": [item.to_dynamodb_item() for item in items],
                    "updated_at": datetime.now(UTC).isoformat(),
                }
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to save catalog {self.catalog_id}: {e}")
            raise StorageUnavailableError("Failed to save items") from e
