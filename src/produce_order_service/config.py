"""Process-wide configuration loaded once from the environment."""

import logging
import os
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from produce_order_service.models.catalog_models import MONEY_MAX_DIGITS

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_PASSWORD = "admin123"


class PublicConfig(BaseModel):
    """Storefront-visible subset of the configuration."""

    contact_phone: str
    delivery_fee: Decimal
    currency: str


class AppSettings(BaseModel):
    """Immutable application settings.

    Built at process entry with ``from_env`` and handed to the components that
    need it. Nothing reads the environment after startup.
    """

    model_config = ConfigDict(frozen=True)

    admin_password: SecretStr
    contact_phone: str = "971561510897"
    delivery_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=MONEY_MAX_DIGITS)
    currency: str = "AED"
    catalog_table: str = "produce-catalog"
    orders_table: str = "produce-orders"
    catalog_id: str = "default"
    order_list_limit: int = Field(default=100, gt=0)
    total_tolerance: Decimal = Field(default=Decimal("0.01"), ge=0)
    strict_catalog_pricing: bool = True
    catalog_seed_file: str | None = None
    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from environment variables.

        Returns:
            AppSettings populated from the environment with defaults applied

        Raises:
            ValueError: If a numeric setting cannot be parsed or is out of range
        """
        admin_password = os.getenv("ADMIN_PASSWORD")
        if not admin_password:
            logger.warning("No ADMIN_PASSWORD configured - using development password")
            admin_password = DEFAULT_ADMIN_PASSWORD

        origins_str = os.getenv("CORS_ALLOW_ORIGINS", "*")
        origins = tuple(o.strip() for o in origins_str.split(",") if o.strip())

        return cls(
            admin_password=SecretStr(admin_password),
            contact_phone=os.getenv("CONTACT_PHONE", "971561510897"),
            delivery_fee=_parse_decimal("DELIVERY_FEE", os.getenv("DELIVERY_FEE", "0")),
            currency=os.getenv("CURRENCY", "AED"),
            catalog_table=os.getenv("DYNAMODB_CATALOG_TABLE", "produce-catalog"),
            orders_table=os.getenv("DYNAMODB_ORDERS_TABLE", "produce-orders"),
            catalog_id=os.getenv("CATALOG_ID", "default"),
            order_list_limit=int(os.getenv("ORDER_LIST_LIMIT", "100")),
            total_tolerance=_parse_decimal("TOTAL_TOLERANCE", os.getenv("TOTAL_TOLERANCE", "0.01")),
            strict_catalog_pricing=os.getenv("STRICT_CATALOG_PRICING", "true").lower() == "true",
            catalog_seed_file=os.getenv("CATALOG_SEED_FILE") or None,
            cors_allow_origins=origins or ("*",),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def public_view(self) -> PublicConfig:
        """Return the configuration the storefront is allowed to see."""
        return PublicConfig(
            contact_phone=self.contact_phone,
            delivery_fee=self.delivery_fee,
            currency=self.currency,
        )


def _parse_decimal(name: str, raw: str) -> Decimal:
    try:
        return Decimal(raw.strip())
    except InvalidOperation as e:
        raise ValueError(f"{name} must be a decimal number, got {raw!r}") from e
