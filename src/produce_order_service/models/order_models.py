"""Order models.

An order captures a snapshot of each purchased line at submission time, so
later catalog price changes never alter historical orders.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, Field

from produce_order_service.models.catalog_models import (
    MONEY_MAX_DIGITS,
    QUANTITY_MAX_DIGITS,
    TOTAL_MAX_DIGITS,
    ItemUnit,
)

Quantity = Annotated[Decimal, Field(max_digits=QUANTITY_MAX_DIGITS)]


class OrderLine(BaseModel):
    """One priced item-quantity pairing within an order."""

    item_id: str = Field(..., description="Catalog item identifier")
    name: str = Field(..., description="Item name at submission time")
    unit: ItemUnit = Field(..., description="Unit the quantity is expressed in")
    price: Decimal = Field(..., ge=0, description="Unit price at submission time")
    quantity: Decimal = Field(..., gt=0, description="Ordered quantity")
    line_total: Decimal = Field(..., ge=0, description="price x quantity")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to a DynamoDB map nested inside the order item."""
        return {
            "item_id": self.item_id,
            "name": self.name,
            "unit": self.unit.value,
            "price": self.price,
            "quantity": self.quantity,
            "line_total": self.line_total,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "OrderLine":
        """Create OrderLine from a nested DynamoDB map."""
        return cls(
            item_id=item["item_id"],
            name=item["name"],
            unit=ItemUnit(item["unit"]),
            price=Decimal(str(item["price"])),
            quantity=Decimal(str(item["quantity"])),
            line_total=Decimal(str(item["line_total"])),
        )


class OrderTotals(BaseModel):
    """Derived money amounts for a set of order lines."""

    items_total: Decimal
    delivery_fee: Decimal
    grand_total: Decimal


class CartQuote(BaseModel):
    """Server-side pricing of a storefront cart."""

    lines: list[OrderLine]
    items_total: Decimal
    delivery_fee: Decimal
    grand_total: Decimal


class CartQuoteRequest(BaseModel):
    """Quantities keyed by catalog item id."""

    quantities: dict[str, Quantity] = Field(default_factory=dict)


class OrderLineSubmission(BaseModel):
    """A line as sent by the storefront; ``line_total`` is advisory."""

    item_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    unit: ItemUnit
    price: Decimal = Field(..., max_digits=MONEY_MAX_DIGITS)
    quantity: Decimal = Field(..., gt=0, max_digits=QUANTITY_MAX_DIGITS)
    line_total: Decimal | None = None


class OrderSubmission(BaseModel):
    """Public order submission payload.

    Customer fields are optional at the schema level so that blanks and
    absences are reported together by the order service. Client totals are
    advisory and checked against the server recomputation.
    """

    customer_name: str | None = None
    flat_number: str | None = None
    delivery_day: str | None = None
    phone: str | None = None
    notes: str | None = None
    items: list[OrderLineSubmission] = Field(default_factory=list)
    items_total: Decimal | None = Field(default=None, max_digits=TOTAL_MAX_DIGITS)
    delivery_fee: Decimal | None = Field(default=None, max_digits=TOTAL_MAX_DIGITS)
    grand_total: Decimal | None = Field(default=None, max_digits=TOTAL_MAX_DIGITS)


class OrderSubmitResponse(BaseModel):
    """Response for an accepted order."""

    success: bool
    order_id: str


class Order(BaseModel):
    """A submitted, immutable order."""

    order_id: str = Field(..., description="Unique order identifier")
    created_at: datetime = Field(..., description="Server-side submission timestamp")
    customer_name: str = Field(..., min_length=1)
    flat_number: str = Field(..., min_length=1)
    delivery_day: str = Field(..., min_length=1)
    phone: str = ""
    notes: str = ""
    items: list[OrderLine] = Field(..., min_length=1)
    items_total: Decimal = Field(..., ge=0)
    delivery_fee: Decimal = Field(..., ge=0)
    grand_total: Decimal = Field(..., ge=0)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "order_id": self.order_id,
            "created_at": self.created_at.isoformat(),
            "customer_name": self.customer_name,
            "flat_number": self.flat_number,
            "delivery_day": self.delivery_day,
            "phone": self.phone,
            "notes": self.notes,
            "items": [line.to_dynamodb_item() for line in self.items],
            "items_total": self.items_total,
            "delivery_fee": self.delivery_fee,
            "grand_total": self.grand_total,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Order: Parsed model instance
        """
        return cls(
            order_id=item["order_id"],
            created_at=datetime.fromisoformat(item["created_at"]),
            customer_name=item["customer_name"],
            flat_number=item["flat_number"],
            delivery_day=item["delivery_day"],
            phone=item.get("phone", ""),
            notes=item.get("notes", ""),
            items=[OrderLine.from_dynamodb_item(line) for line in item["items"]],
            items_total=Decimal(str(item["items_total"])),
            delivery_fee=Decimal(str(item["delivery_fee"])),
            grand_total=Decimal(str(item["grand_total"])),
        )
