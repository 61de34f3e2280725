"""DynamoDB repository for submitted orders.

Orders are keyed by ``order_id``. A global secondary index on
(``record_type``, ``created_key``) serves newest-first listings; ``created_key``
is a fixed-width UTC timestamp followed by a per-process sequence number so
that orders stamped within the same microsecond keep their insertion order.
"""

import itertools
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from produce_order_service.exceptions import StorageUnavailableError
from produce_order_service.models.order_models import Order

logger = logging.getLogger(__name__)

ORDER_RECORD_TYPE = "order"
CREATED_INDEX_NAME = "created_at-index"

_sequence = itertools.count()


def build_created_key(order: Order) -> str:
    """Return the sortable index key for an order."""
    stamp = order.created_at.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return f"{stamp}#{next(_sequence):012d}"


class OrderRepository:
    """Repository for order inserts and newest-first reads."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def save_order(self, order: Order) -> None:
        """Insert a new order.

        The put is conditional on the id being unused, so an existing order is
        never overwritten.

        Args:
            order: Order to insert

        Raises:
            StorageUnavailableError: If the write fails
        """
        item = order.to_dynamodb_item()
        item["record_type"] = ORDER_RECORD_TYPE
        item["created_key"] = build_created_key(order)

        try:
            self.table.put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(order_id)",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to save order {order.order_id}: {e}")
            raise StorageUnavailableError("Failed to create order") from e

    def list_recent(self, limit: int) -> list[Order]:
        """List the most recent orders, newest first.

        Args:
            limit: Maximum number of orders to return

        Returns:
            list: Up to ``limit`` orders

        Raises:
            StorageUnavailableError: If the query fails
        """
        return self._query_newest_first(limit)

    def list_all(self) -> list[Order]:
        """List every order, newest first.

        Raises:
            StorageUnavailableError: If the query fails
        """
        return self._query_newest_first(None)

    def _query_newest_first(self, limit: int | None) -> list[Order]:
        orders: list[Order] = []
        query_kwargs: dict[str, Any] = {
            "IndexName": CREATED_INDEX_NAME,
            "KeyConditionExpression": "record_type = :rt",
            "ExpressionAttributeValues": {":rt": ORDER_RECORD_TYPE},
            "ScanIndexForward": False,  # Most recent first
        }

        try:
            while True:
                if limit is not None:
                    query_kwargs["Limit"] = limit - len(orders)

                response = self.table.query(**query_kwargs)
                orders.extend(Order.from_dynamodb_item(item) for item in response.get("Items", []))

                last_key = response.get("LastEvaluatedKey")
                if not last_key or (limit is not None and len(orders) >= limit):
                    break
                query_kwargs["ExclusiveStartKey"] = last_key

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list orders: {e}")
            raise StorageUnavailableError("Failed to load orders") from e

        return orders if limit is None else orders[:limit]
