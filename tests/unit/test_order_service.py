"""Unit tests for OrderService."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from produce_order_service.exceptions import (
    InvalidPriceError,
    InvalidTotalError,
    MissingFieldError,
    PriceMismatchError,
    StorageUnavailableError,
)
from produce_order_service.models.catalog_models import Item
from produce_order_service.models.order_models import Order, OrderSubmission
from produce_order_service.repositories.order_repository import OrderRepository
from produce_order_service.services.catalog_service import CatalogService
from produce_order_service.services.order_service import OrderService


def build_submission(**overrides: object) -> OrderSubmission:
    """Build the worked-example submission (Tomato x2, Apple x0.5, fee 3)."""
    data: dict[str, object] = {
        "customer_name": "Layla",
        "flat_number": "1204",
        "delivery_day": "Today",
        "phone": "0501234567",
        "notes": "Ring twice",
        "items": [
            {"item_id": "tomato", "name": "Tomato", "unit": "kg", "price": 5, "quantity": 2, "line_total": 10},
            {"item_id": "apple", "name": "Apple", "unit": "kg", "price": 8, "quantity": 0.5, "line_total": 4},
        ],
        "items_total": 14,
        "delivery_fee": 3,
        "grand_total": 17,
    }
    data.update(overrides)
    return OrderSubmission.model_validate(data)


@pytest.mark.unit
class TestOrderService:
    """Test suite for OrderService."""

    @pytest.fixture
    def mock_order_repo(self) -> MagicMock:
        """Create a mock OrderRepository."""
        return MagicMock(spec=OrderRepository)

    @pytest.fixture
    def mock_catalog_service(self, sample_catalog: list[Item]) -> MagicMock:
        """Create a mock CatalogService returning the sample catalog."""
        service = MagicMock(spec=CatalogService)
        service.list_all = AsyncMock(return_value=sample_catalog)
        service.list_active = AsyncMock(return_value=[i for i in sample_catalog if i.active])
        return service

    @pytest.fixture
    def order_service(self, mock_order_repo: MagicMock, mock_catalog_service: MagicMock) -> OrderService:
        """Create an OrderService with a delivery fee of 3."""
        return OrderService(
            order_repository=mock_order_repo,
            catalog_service=mock_catalog_service,
            delivery_fee=Decimal("3"),
        )

    @pytest.mark.asyncio
    async def test_submit_persists_recomputed_order(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that an accepted order is stored with server-side totals."""
        order_id = await order_service.submit(build_submission())

        saved: Order = mock_order_repo.save_order.call_args.args[0]
        assert order_id == saved.order_id
        assert order_id.startswith("ord_")
        assert saved.items_total == Decimal("14")
        assert saved.delivery_fee == Decimal("3")
        assert saved.grand_total == Decimal("17")
        assert [line.item_id for line in saved.items] == ["tomato", "apple"]
        assert saved.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_submit_ignores_client_delivery_fee(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that the configured fee wins over the submitted one."""
        await order_service.submit(build_submission(delivery_fee=0, grand_total=None))

        saved: Order = mock_order_repo.save_order.call_args.args[0]
        assert saved.delivery_fee == Decimal("3")
        assert saved.grand_total == Decimal("17")

    @pytest.mark.asyncio
    async def test_submit_generates_unique_ids(self, order_service: OrderService) -> None:
        """Test that each submission gets a fresh id."""
        ids = {await order_service.submit(build_submission()) for _ in range(20)}

        assert len(ids) == 20

    @pytest.mark.asyncio
    async def test_submit_empty_items(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that an order without items raises MissingFieldError."""
        with pytest.raises(MissingFieldError) as exc_info:
            await order_service.submit(build_submission(items=[]))

        assert exc_info.value.fields == ["items"]
        mock_order_repo.save_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_blank_customer_fields(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that blank customer fields are all reported together."""
        with pytest.raises(MissingFieldError) as exc_info:
            await order_service.submit(build_submission(customer_name="  ", delivery_day=None))

        assert exc_info.value.fields == ["customer_name", "delivery_day"]
        mock_order_repo.save_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_wrong_total(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that diverging client totals raise InvalidTotalError."""
        with pytest.raises(InvalidTotalError):
            await order_service.submit(build_submission(grand_total=10))

        mock_order_repo.save_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_rounding_tolerance(self, order_service: OrderService) -> None:
        """Test that float noise within a cent is accepted."""
        order_id = await order_service.submit(
            build_submission(items_total=14.000000000001, grand_total=16.999)
        )

        assert order_id

    @pytest.mark.asyncio
    async def test_submit_stale_price_rejected(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that strict pricing rejects lines not at the catalog price."""
        submission = build_submission(
            items=[{"item_id": "tomato", "name": "Tomato", "unit": "kg", "price": 4, "quantity": 2}],
            items_total=8,
            grand_total=11,
        )

        with pytest.raises(PriceMismatchError):
            await order_service.submit(submission)

        mock_order_repo.save_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_without_strict_pricing_trusts_lines(
        self, mock_order_repo: MagicMock, mock_catalog_service: MagicMock
    ) -> None:
        """Test that disabling strict pricing stores submitted line prices."""
        service = OrderService(
            order_repository=mock_order_repo,
            catalog_service=mock_catalog_service,
            delivery_fee=Decimal("0"),
            strict_catalog_pricing=False,
        )
        submission = build_submission(
            items=[{"item_id": "tomato", "name": "Tomato", "unit": "kg", "price": 4, "quantity": 2}],
            items_total=8,
            grand_total=8,
        )

        await service.submit(submission)

        saved: Order = mock_order_repo.save_order.call_args.args[0]
        assert saved.items[0].price == Decimal("4")
        mock_catalog_service.list_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_negative_line_price(self, order_service: OrderService) -> None:
        """Test that a negative line price raises InvalidPriceError."""
        submission = build_submission(
            items=[{"item_id": "tomato", "name": "Tomato", "unit": "kg", "price": -5, "quantity": 2}],
            items_total=None,
            grand_total=None,
        )

        with pytest.raises(InvalidPriceError):
            await order_service.submit(submission)

    @pytest.mark.asyncio
    async def test_submit_storage_failure_propagates(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that storage failures are not turned into validation errors."""
        mock_order_repo.save_order.side_effect = StorageUnavailableError("Failed to create order")

        with pytest.raises(StorageUnavailableError):
            await order_service.submit(build_submission())

    @pytest.mark.asyncio
    async def test_list_orders_uses_default_cap(
        self, order_service: OrderService, mock_order_repo: MagicMock, sample_order: Order
    ) -> None:
        """Test that listing without a limit uses the configured cap of 100."""
        mock_order_repo.list_recent.return_value = [sample_order]

        orders = await order_service.list_orders()

        assert orders == [sample_order]
        mock_order_repo.list_recent.assert_called_once_with(100)

    @pytest.mark.asyncio
    async def test_list_orders_with_limit(
        self, order_service: OrderService, mock_order_repo: MagicMock
    ) -> None:
        """Test that an explicit limit is passed through."""
        mock_order_repo.list_recent.return_value = []

        await order_service.list_orders(2)

        mock_order_repo.list_recent.assert_called_once_with(2)

    @pytest.mark.asyncio
    async def test_export_csv(
        self, order_service: OrderService, mock_order_repo: MagicMock, sample_order: Order
    ) -> None:
        """Test that export renders every stored order."""
        mock_order_repo.list_all.return_value = [sample_order]

        csv_text = await order_service.export_csv()

        assert csv_text.splitlines()[0].startswith("Order ID,Date,Customer Name")
        assert "ord_abc123" in csv_text
        assert "Tomato (2 kg @ 5.00 AED); Apple (0.5 kg @ 8.00 AED)" in csv_text

    @pytest.mark.asyncio
    async def test_quote_uses_active_catalog(self, order_service: OrderService) -> None:
        """Test that quotes price only active items and add the fee."""
        quote = await order_service.quote(
            {"tomato": Decimal("2"), "apple": Decimal("0.5"), "mint": Decimal("1")}
        )

        assert [line.item_id for line in quote.lines] == ["tomato", "apple"]
        assert quote.items_total == Decimal("14")
        assert quote.grand_total == Decimal("17")
