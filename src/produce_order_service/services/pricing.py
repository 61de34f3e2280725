"""Order pricing.

All arithmetic is done in ``Decimal``; amounts are only rounded to cents when
formatted for display.
"""

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from produce_order_service.exceptions import (
    InvalidPriceError,
    InvalidTotalError,
    PriceMismatchError,
)
from produce_order_service.models.catalog_models import Item
from produce_order_service.models.order_models import (
    CartQuote,
    OrderLine,
    OrderLineSubmission,
    OrderTotals,
)

CENTS = Decimal("0.01")


def format_money(amount: Decimal) -> str:
    """Format an amount with exactly two decimals."""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def price_cart(catalog: Sequence[Item], quantities: Mapping[str, Decimal]) -> list[OrderLine]:
    """Build order lines for every catalog item with a positive quantity.

    Lines follow catalog display order; ids in ``quantities`` that are not in
    the catalog are ignored.

    Args:
        catalog: Catalog snapshot, already in display order
        quantities: Requested quantity per item id

    Returns:
        Priced order lines
    """
    lines = []
    for item in catalog:
        quantity = quantities.get(item.id)
        if quantity is None or quantity <= 0:
            continue
        lines.append(
            OrderLine(
                item_id=item.id,
                name=item.name,
                unit=item.unit,
                price=item.price,
                quantity=quantity,
                line_total=item.price * quantity,
            )
        )
    return lines


def compute_totals(lines: Sequence[OrderLine], delivery_fee: Decimal) -> OrderTotals:
    """Sum line totals and add the delivery fee."""
    items_total = sum((line.line_total for line in lines), Decimal("0"))
    return OrderTotals(
        items_total=items_total,
        delivery_fee=delivery_fee,
        grand_total=items_total + delivery_fee,
    )


def quote_cart(
    catalog: Sequence[Item], quantities: Mapping[str, Decimal], delivery_fee: Decimal
) -> CartQuote:
    """Price a storefront cart against the catalog."""
    lines = price_cart(catalog, quantities)
    totals = compute_totals(lines, delivery_fee)
    return CartQuote(lines=lines, **totals.model_dump())


def reprice_submitted_lines(submitted: Sequence[OrderLineSubmission]) -> list[OrderLine]:
    """Recompute line totals from the submitted price and quantity.

    Raises:
        InvalidPriceError: If any submitted price is negative
    """
    lines = []
    for line in submitted:
        if line.price < 0:
            raise InvalidPriceError(f"Price for item '{line.item_id}' must be non-negative")
        lines.append(
            OrderLine(
                item_id=line.item_id,
                name=line.name,
                unit=line.unit,
                price=line.price,
                quantity=line.quantity,
                line_total=line.price * line.quantity,
            )
        )
    return lines


def check_catalog_prices(lines: Sequence[OrderLine], catalog: Sequence[Item]) -> None:
    """Verify each line against the current catalog.

    Raises:
        PriceMismatchError: If a line names an unknown or inactive item, or its
            price differs from the catalog price
    """
    by_id = {item.id: item for item in catalog}
    for line in lines:
        item = by_id.get(line.item_id)
        if item is None or not item.active:
            raise PriceMismatchError(f"Item '{line.item_id}' is not available")
        if item.price != line.price:
            raise PriceMismatchError(
                f"Price for '{item.name}' changed to {format_money(item.price)}, "
                f"submitted {format_money(line.price)}"
            )


def check_submitted_totals(
    totals: OrderTotals,
    submitted_items_total: Decimal | None,
    submitted_grand_total: Decimal | None,
    tolerance: Decimal,
) -> None:
    """Compare client totals with the recomputed ones.

    Absent client totals are not checked.

    Raises:
        InvalidTotalError: If a submitted total differs by more than ``tolerance``
    """
    checks = (
        ("items_total", submitted_items_total, totals.items_total),
        ("grand_total", submitted_grand_total, totals.grand_total),
    )
    for name, submitted, computed in checks:
        if submitted is None:
            continue
        if abs(submitted - computed) > tolerance:
            raise InvalidTotalError(
                f"Submitted {name} {format_money(submitted)} does not match "
                f"computed {format_money(computed)}"
            )
