"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import UTC, datetime
from decimal import Decimal

import pytest

# Entry modules skip building the real app when imported under test
os.environ.setdefault("ENVIRONMENT", "test")

from produce_order_service.models.catalog_models import Item, ItemCategory, ItemUnit  # noqa: E402
from produce_order_service.models.order_models import Order, OrderLine  # noqa: E402


@pytest.fixture
def tomato() -> Item:
    """Fixture providing an active vegetable sold by the kilo."""
    return Item(
        id="tomato",
        name="Tomato",
        category=ItemCategory.VEGETABLE,
        price=Decimal("5"),
        unit=ItemUnit.KG,
        sort_order=0,
    )


@pytest.fixture
def apple() -> Item:
    """Fixture providing an active fruit sold by the kilo."""
    return Item(
        id="apple",
        name="Apple",
        category=ItemCategory.FRUIT,
        price=Decimal("8"),
        unit=ItemUnit.KG,
        sort_order=1,
    )


@pytest.fixture
def mint() -> Item:
    """Fixture providing an inactive item."""
    return Item(
        id="mint",
        name="Mint",
        category=ItemCategory.VEGETABLE,
        price=Decimal("2.00"),
        unit=ItemUnit.BUNDLE,
        active=False,
        sort_order=2,
    )


@pytest.fixture
def sample_catalog(tomato: Item, apple: Item, mint: Item) -> list[Item]:
    """Fixture providing a small catalog in display order."""
    return [tomato, apple, mint]


@pytest.fixture
def sample_order() -> Order:
    """Fixture providing a stored order for Tomato x2 and Apple x0.5."""
    return Order(
        order_id="ord_abc123",
        created_at=datetime(2024, 5, 1, 9, 30, tzinfo=UTC),
        customer_name="Layla",
        flat_number="1204",
        delivery_day="Today",
        phone="0501234567",
        notes="Ring twice",
        items=[
            OrderLine(
                item_id="tomato",
                name="Tomato",
                unit=ItemUnit.KG,
                price=Decimal("5"),
                quantity=Decimal("2"),
                line_total=Decimal("10"),
            ),
            OrderLine(
                item_id="apple",
                name="Apple",
                unit=ItemUnit.KG,
                price=Decimal("8"),
                quantity=Decimal("0.5"),
                line_total=Decimal("4.0"),
            ),
        ],
        items_total=Decimal("14.0"),
        delivery_fee=Decimal("3"),
        grand_total=Decimal("17.0"),
    )
