"""Order service for validating, pricing and recording customer orders."""

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from produce_order_service.exceptions import MissingFieldError, ValidationFailure
from produce_order_service.models.order_models import (
    CartQuote,
    Order,
    OrderSubmission,
)
from produce_order_service.observability import traced
from produce_order_service.observability.metrics import (
    record_order_rejected,
    record_order_submitted,
)
from produce_order_service.repositories.order_repository import OrderRepository
from produce_order_service.services import pricing
from produce_order_service.services.catalog_service import CatalogService
from produce_order_service.services.order_export import export_orders_csv

logger = logging.getLogger(__name__)

REQUIRED_CUSTOMER_FIELDS = ("customer_name", "flat_number", "delivery_day")


class OrderService:
    """Service for order submission, listing and export.

    Client-supplied totals are advisory: every submission is re-priced on the
    server and the delivery fee always comes from configuration. With
    ``strict_catalog_pricing`` enabled, each line must also match the current
    catalog price.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        catalog_service: CatalogService,
        delivery_fee: Decimal,
        currency: str = "AED",
        total_tolerance: Decimal = Decimal("0.01"),
        strict_catalog_pricing: bool = True,
        default_list_limit: int = 100,
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for storing orders
            catalog_service: Catalog used for quotes and price checks
            delivery_fee: Flat fee added to every order
            currency: Currency label for exports
            total_tolerance: Allowed difference between client and server totals
            strict_catalog_pricing: Whether line prices must match the catalog
            default_list_limit: Cap for order listings when no limit is given
        """
        self.order_repository = order_repository
        self.catalog_service = catalog_service
        self.delivery_fee = delivery_fee
        self.currency = currency
        self.total_tolerance = total_tolerance
        self.strict_catalog_pricing = strict_catalog_pricing
        self.default_list_limit = default_list_limit

    @traced("orders.quote")
    async def quote(self, quantities: dict[str, Decimal]) -> CartQuote:
        """Price a cart against the active catalog.

        Args:
            quantities: Requested quantity per item id

        Returns:
            Lines for items with a positive quantity plus totals
        """
        catalog = await self.catalog_service.list_active()
        return pricing.quote_cart(catalog, quantities, self.delivery_fee)

    @traced("orders.submit")
    async def submit(self, submission: OrderSubmission) -> str:
        """Validate, re-price and store an order.

        Args:
            submission: Order as sent by the storefront

        Returns:
            The new order id

        Raises:
            MissingFieldError: If a customer field is blank or there are no items
            InvalidPriceError: If a line price is negative
            PriceMismatchError: If strict pricing is on and a line disagrees with the catalog
            InvalidTotalError: If the submitted totals do not match the recomputed ones
            StorageUnavailableError: If the order cannot be stored
        """
        try:
            order = await self._build_order(submission)
        except ValidationFailure as e:
            record_order_rejected(e.code)
            logger.info(f"Rejected order submission: {e.message}")
            raise

        self.order_repository.save_order(order)
        record_order_submitted(order.grand_total)

        logger.info(
            f"Accepted order {order.order_id} with {len(order.items)} lines, "
            f"grand total {pricing.format_money(order.grand_total)}"
        )
        return order.order_id

    @traced("orders.list")
    async def list_orders(self, limit: int | None = None) -> list[Order]:
        """Return the most recent orders, newest first.

        Args:
            limit: Maximum number of orders (defaults to the configured cap)
        """
        return self.order_repository.list_recent(limit or self.default_list_limit)

    @traced("orders.export")
    async def export_csv(self) -> str:
        """Return every order, newest first, as CSV text."""
        orders = self.order_repository.list_all()
        logger.info(f"Exporting {len(orders)} orders")
        return export_orders_csv(orders, self.currency)

    async def _build_order(self, submission: OrderSubmission) -> Order:
        missing = [
            name
            for name in REQUIRED_CUSTOMER_FIELDS
            if not (getattr(submission, name) or "").strip()
        ]
        if not submission.items:
            missing.append("items")
        if missing:
            raise MissingFieldError(missing)

        lines = pricing.reprice_submitted_lines(submission.items)

        if self.strict_catalog_pricing:
            catalog = await self.catalog_service.list_all()
            pricing.check_catalog_prices(lines, catalog)

        totals = pricing.compute_totals(lines, self.delivery_fee)
        pricing.check_submitted_totals(
            totals,
            submission.items_total,
            submission.grand_total,
            self.total_tolerance,
        )

        return Order(
            order_id=f"ord_{uuid.uuid4().hex}",
            created_at=datetime.now(UTC),
            customer_name=(submission.customer_name or "").strip(),
            flat_number=(submission.flat_number or "").strip(),
            delivery_day=(submission.delivery_day or "").strip(),
            phone=(submission.phone or "").strip(),
            notes=submission.notes or "",
            items=lines,
            items_total=totals.items_total,
            delivery_fee=totals.delivery_fee,
            grand_total=totals.grand_total,
        )
