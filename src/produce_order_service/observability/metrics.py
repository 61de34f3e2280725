"""Custom metrics for the ordering service."""

from decimal import Decimal

from opentelemetry import metrics

from produce_order_service.observability.config import SERVICE_NAME

meter = metrics.get_meter(SERVICE_NAME)

orders_submitted_counter = meter.create_counter(
    name="orders_submitted_total",
    description="Total number of accepted orders",
    unit="1",
)

orders_rejected_counter = meter.create_counter(
    name="orders_rejected_total",
    description="Total number of rejected order submissions by reason",
    unit="1",
)

order_grand_total_histogram = meter.create_histogram(
    name="order_grand_total",
    description="Grand total of accepted orders",
    unit="1",
)

catalog_mutation_counter = meter.create_counter(
    name="catalog_mutations_total",
    description="Total number of catalog writes by operation",
    unit="1",
)


def record_order_submitted(grand_total: Decimal) -> None:
    """Record an accepted order.

    Args:
        grand_total: Grand total of the order
    """
    orders_submitted_counter.add(1)
    order_grand_total_histogram.record(float(grand_total))


def record_order_rejected(reason: str) -> None:
    """Record a rejected order submission.

    Args:
        reason: Error code the submission was rejected with
    """
    orders_rejected_counter.add(1, {"reason": reason})


def record_catalog_mutation(operation: str) -> None:
    """Record a catalog write (e.g. "create", "update", "seed")."""
    catalog_mutation_counter.add(1, {"operation": operation})
