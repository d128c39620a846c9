"""Cached dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across warm
invocations.
"""

import logging
import os
from typing import Any

from fastapi import FastAPI

from menu_builder_service.dependencies import (
    MenuServices,
    create_dynamodb_resource,
    create_services,
    expose_error_details,
    get_api_keys,
    get_cors_origins,
    tracing_enabled,
)
from menu_builder_service.handlers.api_handler import create_app
from menu_builder_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_services: MenuServices | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is None:
        _dynamodb_resource = create_dynamodb_resource()

    return _dynamodb_resource


def get_services() -> MenuServices:
    """Create or retrieve cached services.

    Returns:
        MenuServices bound to the cached DynamoDB resource
    """
    global _services

    if _services is not None:
        return _services

    _services = create_services(get_dynamodb_resource())

    logger.info("Menu services initialized")
    return _services


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    services = get_services()

    _fastapi_app = create_app(
        business_service=services.business_service,
        category_service=services.category_service,
        item_service=services.item_service,
        public_menu_service=services.public_menu_service,
        api_keys=get_api_keys(),
        cors_origins=get_cors_origins(),
        expose_error_details=expose_error_details(),
    )

    if tracing_enabled():
        setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Configure logging once during Lambda cold start."""
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
