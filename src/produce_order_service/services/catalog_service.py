"""Catalog service for reading and maintaining sellable items."""

import json
import logging
from pathlib import Path
from typing import Any

from produce_order_service.exceptions import (
    DuplicateIdError,
    InvalidPriceError,
    MissingFieldError,
    NotFoundError,
)
from produce_order_service.models.catalog_models import (
    PLACEHOLDER_IMAGE_URL,
    Item,
    ItemCreate,
    ItemUpdate,
)
from produce_order_service.observability import traced
from produce_order_service.observability.metrics import record_catalog_mutation
from produce_order_service.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

REQUIRED_ITEM_FIELDS = ("id", "name", "category", "price", "unit")


def display_order(items: list[Item]) -> list[Item]:
    """Sort items by ``sort_order``; ties keep insertion order."""
    return sorted(items, key=lambda item: item.sort_order)


def load_seed_items(path: str | Path) -> list[Item]:
    """Read catalog items from a JSON file holding a list of item objects.

    Raises:
        ValueError: If the file does not contain a JSON list
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Catalog seed file {path} must contain a JSON list")

    return [Item.model_validate(entry) for entry in data]


class CatalogService:
    """Service for catalog reads and admin mutations.

    Every mutation loads the full catalog, applies the change in memory and
    rewrites the stored document. Concurrent admin writes resolve as last
    writer wins.
    """

    def __init__(self, catalog_repository: CatalogRepository) -> None:
        """Initialize the CatalogService.

        Args:
            catalog_repository: Repository holding the catalog document
        """
        self.catalog_repository = catalog_repository

    @traced("catalog.list_active")
    async def list_active(self) -> list[Item]:
        """Return active items in display order."""
        items = self.catalog_repository.load_items()
        return display_order([item for item in items if item.active])

    @traced("catalog.list_all")
    async def list_all(self) -> list[Item]:
        """Return every item in display order."""
        return display_order(self.catalog_repository.load_items())

    @traced("catalog.create")
    async def create(self, payload: ItemCreate) -> Item:
        """Add a new item to the catalog.

        Args:
            payload: Fields for the new item

        Returns:
            The stored item with defaults applied

        Raises:
            MissingFieldError: If id, name, category, price or unit is absent
            DuplicateIdError: If the id is already used
            InvalidPriceError: If the price is negative
        """
        fields = payload.model_dump()
        missing = [name for name in REQUIRED_ITEM_FIELDS if _is_blank(fields[name])]
        if missing:
            raise MissingFieldError(missing)

        items = self.catalog_repository.load_items()
        if any(item.id == fields["id"] for item in items):
            raise DuplicateIdError(fields["id"])

        if fields["price"] < 0:
            raise InvalidPriceError("Price must be non-negative")

        item = Item(
            id=fields["id"],
            name=fields["name"],
            localized_name=fields["localized_name"] or "",
            category=fields["category"],
            price=fields["price"],
            unit=fields["unit"],
            image_url=fields["image_url"] or PLACEHOLDER_IMAGE_URL,
            active=fields["active"] if fields["active"] is not None else True,
            sort_order=fields["sort_order"] if fields["sort_order"] is not None else len(items),
        )

        items.append(item)
        self.catalog_repository.save_items(items)
        record_catalog_mutation("create")

        logger.info(f"Created catalog item {item.id}")
        return item

    @traced("catalog.update")
    async def update(self, item_id: str, payload: ItemUpdate) -> Item:
        """Merge the supplied fields over an existing item.

        Args:
            item_id: Id of the item to change
            payload: Fields to overwrite; the id is never changed

        Returns:
            The updated item

        Raises:
            NotFoundError: If no item has this id
            InvalidPriceError: If the resulting price is negative
            MissingFieldError: If the name is set to a blank value
        """
        items = self.catalog_repository.load_items()
        index = next((i for i, item in enumerate(items) if item.id == item_id), None)
        if index is None:
            raise NotFoundError("Item not found")

        changes = payload.changes()
        if "price" in changes and changes["price"] < 0:
            raise InvalidPriceError("Price must be non-negative")
        if "name" in changes and _is_blank(changes["name"]):
            raise MissingFieldError(["name"])

        merged: dict[str, Any] = {**items[index].model_dump(), **changes, "id": item_id}
        updated = Item.model_validate(merged)

        items[index] = updated
        self.catalog_repository.save_items(items)
        record_catalog_mutation("update")

        logger.info(f"Updated catalog item {item_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return updated

    async def seed_if_empty(self, seed_items: list[Item]) -> int:
        """Store ``seed_items`` when the catalog has no items yet.

        Returns:
            Number of items written (0 if the catalog was already populated)

        Raises:
            DuplicateIdError: If the seed list repeats an id
        """
        if self.catalog_repository.load_items():
            return 0

        seen: set[str] = set()
        for item in seed_items:
            if item.id in seen:
                raise DuplicateIdError(item.id)
            seen.add(item.id)

        self.catalog_repository.save_items(list(seed_items))
        record_catalog_mutation("seed")

        logger.info(f"Seeded catalog with {len(seed_items)} items")
        return len(seed_items)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
