"""Service wiring shared by the local server and the Lambda entry point."""

import asyncio
import logging
from typing import Any

from produce_order_service.config import AppSettings
from produce_order_service.repositories.catalog_repository import CatalogRepository
from produce_order_service.repositories.order_repository import OrderRepository
from produce_order_service.services.catalog_service import CatalogService, load_seed_items
from produce_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)


def build_services(
    settings: AppSettings, dynamodb_resource: Any
) -> tuple[CatalogService, OrderService]:
    """Wire repositories and services from settings.

    Args:
        settings: Process-wide configuration
        dynamodb_resource: Boto3 DynamoDB resource

    Returns:
        Tuple of (catalog_service, order_service)
    """
    catalog_repository = CatalogRepository(
        dynamodb_resource=dynamodb_resource,
        table_name=settings.catalog_table,
        catalog_id=settings.catalog_id,
    )
    order_repository = OrderRepository(
        dynamodb_resource=dynamodb_resource, table_name=settings.orders_table
    )

    logger.info(
        f"Repositories configured - catalog: {settings.catalog_table}, "
        f"orders: {settings.orders_table}"
    )

    catalog_service = CatalogService(catalog_repository=catalog_repository)
    order_service = OrderService(
        order_repository=order_repository,
        catalog_service=catalog_service,
        delivery_fee=settings.delivery_fee,
        currency=settings.currency,
        total_tolerance=settings.total_tolerance,
        strict_catalog_pricing=settings.strict_catalog_pricing,
        default_list_limit=settings.order_list_limit,
    )
    return catalog_service, order_service


def seed_catalog(catalog_service: CatalogService, seed_file: str | None) -> int:
    """Seed an empty catalog from ``seed_file`` if one is configured.

    Must be called outside a running event loop.

    Returns:
        Number of items written
    """
    if not seed_file:
        return 0

    seed_items = load_seed_items(seed_file)
    written = asyncio.run(catalog_service.seed_if_empty(seed_items))
    if written:
        logger.info(f"Catalog seeded from {seed_file}")
    else:
        logger.info("Catalog already populated, skipping seed")
    return written
