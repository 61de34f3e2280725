"""Shared dependency factory for the Lambda handler.

This module provides cached dependency initialization to optimize Lambda cold starts.
Dependencies are created once and reused across invocations within the same Lambda container.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from produce_order_service.auth.admin_gate import AdminGate
from produce_order_service.bootstrap import build_services, seed_catalog
from produce_order_service.config import AppSettings
from produce_order_service.handlers.api_handler import create_app
from produce_order_service.observability import configure_logging
from produce_order_service.services.catalog_service import CatalogService
from produce_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_settings: AppSettings | None = None
_dynamodb_resource: Any | None = None
_catalog_service: CatalogService | None = None
_order_service: OrderService | None = None
_fastapi_app: FastAPI | None = None


def get_settings() -> AppSettings:
    """Load settings once per container."""
    global _settings

    if _settings is None:
        _settings = AppSettings.from_env()

    return _settings


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def _get_services() -> tuple[CatalogService, OrderService]:
    global _catalog_service, _order_service

    if _catalog_service is None or _order_service is None:
        _catalog_service, _order_service = build_services(get_settings(), get_dynamodb_resource())
        logger.info("Catalog and order services initialized")

    return _catalog_service, _order_service


def get_catalog_service() -> CatalogService:
    """Create or retrieve cached catalog service.

    Returns:
        Configured CatalogService instance
    """
    return _get_services()[0]


def get_order_service() -> OrderService:
    """Create or retrieve cached order service.

    Returns:
        Configured OrderService instance
    """
    return _get_services()[1]


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    settings = get_settings()
    _fastapi_app = create_app(
        catalog_service=get_catalog_service(),
        order_service=get_order_service(),
        admin_gate=AdminGate(settings.admin_password),
        settings=settings,
    )

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging and the catalog seed.

    Should be called once during Lambda cold start.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    if settings.catalog_seed_file:
        seed_catalog(get_catalog_service(), settings.catalog_seed_file)

    logger.info("Lambda environment initialized")
