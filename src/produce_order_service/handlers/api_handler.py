"""FastAPI application for the storefront and admin endpoints."""

import logging

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from produce_order_service.auth.admin_gate import AdminGate
from produce_order_service.auth.api_dependencies import get_admin_token_from_header
from produce_order_service.config import AppSettings, PublicConfig
from produce_order_service.exceptions import (
    DuplicateIdError,
    InvalidCredentialsError,
    NotFoundError,
    OrderingError,
    StorageUnavailableError,
    UnauthorizedError,
)
from produce_order_service.models.catalog_models import Item, ItemCreate, ItemUpdate
from produce_order_service.models.order_models import (
    CartQuote,
    CartQuoteRequest,
    Order,
    OrderSubmission,
    OrderSubmitResponse,
)
from produce_order_service.services.catalog_service import CatalogService
from produce_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class LoginRequest(BaseModel):
    """Admin login request."""

    password: str = ""


class LoginResponse(BaseModel):
    """Admin login response carrying the session token."""

    success: bool
    token: str


class ItemResponse(BaseModel):
    """Response model for item create and update."""

    success: bool
    item: Item


def status_code_for(error: OrderingError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(error, StorageUnavailableError):
        return 503
    if isinstance(error, (UnauthorizedError, InvalidCredentialsError)):
        return 401
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, DuplicateIdError):
        return 409
    return 400


def create_app(
    catalog_service: CatalogService,
    order_service: OrderService,
    admin_gate: AdminGate,
    settings: AppSettings,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog_service: Service for catalog reads and mutations
        order_service: Service for order submission, listing and export
        admin_gate: Shared-secret check for admin endpoints
        settings: Process-wide configuration

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Produce Order Service API",
        description="Storefront ordering and admin catalog/order management",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store services in app state for access in route handlers
    app.state.catalog_service = catalog_service
    app.state.order_service = order_service
    app.state.admin_gate = admin_gate
    app.state.settings = settings

    @app.exception_handler(OrderingError)
    async def handle_ordering_error(request: Request, exc: OrderingError) -> JSONResponse:
        status_code = status_code_for(exc)
        if isinstance(exc, StorageUnavailableError):
            # Internal detail stays in the logs
            logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
            detail = "Service temporarily unavailable, please try again"
        else:
            detail = exc.message

        return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": detail})

    def validate_admin_token(x_admin_token: str | None = Header(None)) -> str:
        """Dependency to validate the admin token."""
        return get_admin_token_from_header(x_admin_token=x_admin_token, gate=app.state.admin_gate)

    @app.get("/api/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok")

    @app.get("/api/config", response_model=PublicConfig, tags=["Storefront"])
    async def get_config() -> PublicConfig:
        """Return the contact number and delivery fee for the storefront."""
        public_config: PublicConfig = app.state.settings.public_view()
        return public_config

    @app.get("/api/items", response_model=list[Item], tags=["Storefront"])
    async def list_active_items() -> list[Item]:
        """List items currently offered to customers, in display order."""
        items: list[Item] = await app.state.catalog_service.list_active()
        return items

    @app.post("/api/cart/quote", response_model=CartQuote, tags=["Storefront"])
    async def quote_cart(request: CartQuoteRequest) -> CartQuote:
        """Price a cart of item quantities with the server-side pricer."""
        quote: CartQuote = await app.state.order_service.quote(request.quantities)
        return quote

    @app.post("/api/orders", response_model=OrderSubmitResponse, tags=["Storefront"])
    async def submit_order(submission: OrderSubmission) -> OrderSubmitResponse:
        """Submit a customer order.

        Raises:
            MissingFieldError: If customer fields or items are missing
            InvalidTotalError: If the submitted totals do not match
        """
        order_id: str = await app.state.order_service.submit(submission)
        return OrderSubmitResponse(success=True, order_id=order_id)

    @app.post("/api/admin/login", response_model=LoginResponse, tags=["Admin"])
    async def admin_login(request: LoginRequest) -> LoginResponse:
        """Exchange the admin password for a session token."""
        token = app.state.admin_gate.login(request.password)
        return LoginResponse(success=True, token=token)

    @app.get("/api/items/all", response_model=list[Item], tags=["Admin"])
    async def list_all_items(_token: str = Depends(validate_admin_token)) -> list[Item]:
        """List every item, including inactive ones."""
        items: list[Item] = await app.state.catalog_service.list_all()
        return items

    @app.post("/api/items", response_model=ItemResponse, tags=["Admin"])
    async def create_item(
        payload: ItemCreate,
        _token: str = Depends(validate_admin_token),
    ) -> ItemResponse:
        """Create a catalog item."""
        item = await app.state.catalog_service.create(payload)
        return ItemResponse(success=True, item=item)

    @app.put("/api/items/{item_id}", response_model=ItemResponse, tags=["Admin"])
    async def update_item(
        item_id: str,
        payload: ItemUpdate,
        _token: str = Depends(validate_admin_token),
    ) -> ItemResponse:
        """Apply a partial update to a catalog item."""
        item = await app.state.catalog_service.update(item_id, payload)
        return ItemResponse(success=True, item=item)

    @app.get("/api/orders", response_model=list[Order], tags=["Admin"])
    async def list_orders(
        limit: int = Query(default=settings.order_list_limit, ge=1),
        _token: str = Depends(validate_admin_token),
    ) -> list[Order]:
        """List the most recent orders, newest first."""
        orders: list[Order] = await app.state.order_service.list_orders(limit)
        return orders

    @app.get("/api/orders/export", tags=["Admin"])
    async def export_orders(_token: str = Depends(validate_admin_token)) -> Response:
        """Download every order as a CSV attachment."""
        csv_text: str = await app.state.order_service.export_csv()
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=orders.csv"},
        )

    return app
