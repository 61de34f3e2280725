"""CSV rendering of submitted orders."""

import csv
import io
from collections.abc import Iterable

from produce_order_service.models.order_models import Order, OrderLine
from produce_order_service.services.pricing import format_money

EXPORT_HEADER = [
    "Order ID",
    "Date",
    "Customer Name",
    "Flat Number",
    "Delivery Day",
    "Phone",
    "Items",
    "Items Total",
    "Delivery Fee",
    "Grand Total",
    "Notes",
]

LINE_SEPARATOR = "; "


def describe_line(line: OrderLine, currency: str) -> str:
    """Render one line as e.g. ``Tomato (2 kg @ 5.00 AED)``."""
    quantity = line.quantity.normalize()
    return f"{line.name} ({quantity:f} {line.unit.value} @ {format_money(line.price)} {currency})"


def export_orders_csv(orders: Iterable[Order], currency: str) -> str:
    """Render orders as CSV text, one row per order.

    Cells containing commas, quotes or newlines are quoted by the csv module, so
    the output parses back with any standard CSV reader.

    Args:
        orders: Orders in the row order wanted
        currency: Currency label used in the items cell

    Returns:
        CSV document including the header row
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADER)

    for order in orders:
        writer.writerow(
            [
                order.order_id,
                order.created_at.isoformat(),
                order.customer_name,
                order.flat_number,
                order.delivery_day,
                order.phone,
                LINE_SEPARATOR.join(describe_line(line, currency) for line in order.items),
                format_money(order.items_total),
                format_money(order.delivery_fee),
                format_money(order.grand_total),
                order.notes,
            ]
        )

    return buffer.getvalue()
