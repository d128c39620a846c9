"""Main application entry point for the menu builder service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from menu_builder_service.dependencies import (
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


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource
    3. Initializes repositories and services
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing menu builder service...")

    services = create_services(create_dynamodb_resource())
    logger.info("Services initialized")

    app = create_app(
        business_service=services.business_service,
        category_service=services.category_service,
        item_service=services.item_service,
        public_menu_service=services.public_menu_service,
        api_keys=get_api_keys(),
        cors_origins=get_cors_origins(),
        expose_error_details=expose_error_details(),
    )

    if tracing_enabled():
        setup_observability(app)

    logger.info("Menu builder service initialized successfully")

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

    port = int(os.getenv("PORT", "8001"))
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
