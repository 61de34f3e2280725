"""Main application entry point for the produce order service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
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
from produce_order_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB accepts any credentials
        access_key = os.getenv("AWS_ACCESS_KEY_ID", "dummy")
        secret_key = os.getenv("AWS_SECRET_ACCESS_KEY", "dummy")
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Loads settings from the environment
    2. Configures logging
    3. Creates the DynamoDB resource, repositories and services
    4. Seeds the catalog when configured
    5. Creates the FastAPI app and sets up observability

    Returns:
        Configured FastAPI application instance
    """
    settings = AppSettings.from_env()
    configure_logging(settings.log_level)

    logger.info("Initializing produce order service...")

    dynamodb_resource = get_dynamodb_resource()
    catalog_service, order_service = build_services(settings, dynamodb_resource)
    seed_catalog(catalog_service, settings.catalog_seed_file)

    app = create_app(
        catalog_service=catalog_service,
        order_service=order_service,
        admin_gate=AdminGate(settings.admin_password),
        settings=settings,
    )

    if os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"):
        setup_observability(app)

    logger.info("Produce order service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "3001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
