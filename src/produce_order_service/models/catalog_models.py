"""Catalog item models.

Items are stored together as a single catalog document; these models cover one
entry of that document plus the admin request payloads that create and patch it.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

PLACEHOLDER_IMAGE_URL = "/images/placeholder.jpg"

# DynamoDB numbers hold at most 38 significant digits. Prices and quantities are
# bounded well below that so line totals and order sums always fit.
MONEY_MAX_DIGITS = 12
QUANTITY_MAX_DIGITS = 10
TOTAL_MAX_DIGITS = 38


class ItemCategory(str, Enum):
    """Produce category shown as a storefront section."""

    VEGETABLE = "vegetable"
    FRUIT = "fruit"


class ItemUnit(str, Enum):
    """Unit an item is sold by."""

    KG = "kg"
    PC = "pc"
    BUNDLE = "bundle"


class Item(BaseModel):
    """A sellable catalog item."""

    id: str = Field(..., min_length=1, description="Unique, immutable item identifier")
    name: str = Field(..., min_length=1, description="Display name")
    localized_name: str = Field(default="", description="Optional localized display name")
    category: ItemCategory = Field(..., description="Storefront category")
    price: Decimal = Field(
        ..., ge=0, max_digits=MONEY_MAX_DIGITS, description="Price per unit"
    )
    unit: ItemUnit = Field(..., description="Unit the price applies to")
    image_url: str = Field(default=PLACEHOLDER_IMAGE_URL, description="Image reference")
    active: bool = Field(default=True, description="Whether the item is offered to customers")
    sort_order: int = Field(default=0, description="Display position, ascending")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB map format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "id": self.id,
            "name": self.name,
            "localized_name": self.localized_name,
            "category": self.category.value,
            "price": self.price,
            "unit": self.unit.value,
            "image_url": self.image_url,
            "active": self.active,
            "sort_order": self.sort_order,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Item":
        """Create Item from a DynamoDB map.

        Args:
            item: DynamoDB map from the catalog document

        Returns:
            Item: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            localized_name=item.get("localized_name", ""),
            category=ItemCategory(item["category"]),
            price=Decimal(str(item["price"])),
            unit=ItemUnit(item["unit"]),
            image_url=item.get("image_url", PLACEHOLDER_IMAGE_URL),
            active=bool(item.get("active", True)),
            sort_order=int(item.get("sort_order", 0)),
        )


class ItemCreate(BaseModel):
    """Admin payload for creating an item.

    Required fields are optional here so that absent values surface as a
    ``MissingFieldError`` from the catalog service rather than a schema error.
    """

    id: str | None = None
    name: str | None = None
    localized_name: str | None = None
    category: ItemCategory | None = None
    price: Decimal | None = Field(default=None, max_digits=MONEY_MAX_DIGITS)
    unit: ItemUnit | None = None
    image_url: str | None = None
    active: bool | None = None
    sort_order: int | None = None


class ItemUpdate(BaseModel):
    """Admin payload for a partial item update.

    ``id`` is accepted for client convenience but never applied.
    """

    id: str | None = None
    name: str | None = None
    localized_name: str | None = None
    category: ItemCategory | None = None
    price: Decimal | None = Field(default=None, max_digits=MONEY_MAX_DIGITS)
    unit: ItemUnit | None = None
    image_url: str | None = None
    active: bool | None = None
    sort_order: int | None = None

    def changes(self) -> dict[str, Any]:
        """Return the fields the caller actually supplied, minus the id."""
        data = self.model_dump(exclude_unset=True, exclude={"id"})
        return {key: value for key, value in data.items() if value is not None}
