"""Wiring shared by the uvicorn and Lambda entry points.

Reads environment configuration and builds the repository and service graph.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import boto3

from menu_builder_service.repositories.menu_repositories import (
    BusinessRepository,
    CategoryRepository,
    ItemRepository,
)
from menu_builder_service.services.business_service import BusinessService
from menu_builder_service.services.category_service import CategoryService
from menu_builder_service.services.item_service import ItemService
from menu_builder_service.services.ordering_maintainer import OrderingMaintainer
from menu_builder_service.services.ownership_resolver import OwnershipResolver
from menu_builder_service.services.public_menu_service import PublicMenuService

logger = logging.getLogger(__name__)

DEV_API_KEY = "dummy-key-for-development"


@dataclass
class MenuServices:
    """Services wired to a shared set of repositories."""

    business_service: BusinessService
    category_service: CategoryService
    item_service: ItemService
    public_menu_service: PublicMenuService


def create_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    # Check for local DynamoDB endpoint (for development)
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # boto3 falls back to the default credential chain
    return boto3.resource("dynamodb", region_name=region)


def create_services(dynamodb_resource: Any) -> MenuServices:
    """Create repositories and services from environment configuration.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource

    Returns:
        MenuServices sharing one set of repositories
    """
    businesses_table = os.getenv("DYNAMODB_BUSINESSES_TABLE", "menu-builder-businesses")
    categories_table = os.getenv("DYNAMODB_CATEGORIES_TABLE", "menu-builder-categories")
    items_table = os.getenv("DYNAMODB_ITEMS_TABLE", "menu-builder-items")

    item_repository = ItemRepository(dynamodb_resource=dynamodb_resource, table_name=items_table)
    category_repository = CategoryRepository(
        dynamodb_resource=dynamodb_resource,
        table_name=categories_table,
        item_repository=item_repository,
    )
    business_repository = BusinessRepository(
        dynamodb_resource=dynamodb_resource,
        table_name=businesses_table,
        category_repository=category_repository,
    )

    logger.info(
        f"Repositories configured - businesses: {businesses_table}, "
        f"categories: {categories_table}, items: {items_table}"
    )

    ownership_resolver = OwnershipResolver(
        business_repository=business_repository,
        category_repository=category_repository,
        item_repository=item_repository,
    )

    return MenuServices(
        business_service=BusinessService(
            business_repository=business_repository,
            ownership_resolver=ownership_resolver,
        ),
        category_service=CategoryService(
            category_repository=category_repository,
            ownership_resolver=ownership_resolver,
            ordering_maintainer=OrderingMaintainer(category_repository),
        ),
        item_service=ItemService(
            item_repository=item_repository,
            ownership_resolver=ownership_resolver,
            ordering_maintainer=OrderingMaintainer(item_repository),
        ),
        public_menu_service=PublicMenuService(
            business_repository=business_repository,
            category_repository=category_repository,
            item_repository=item_repository,
        ),
    )


def get_api_keys() -> list[str]:
    """Read admin API keys from ADMIN_API_KEY (comma-separated)."""
    api_keys_str = os.getenv("ADMIN_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if api_keys:
        return api_keys

    if os.getenv("ENVIRONMENT") == "development":
        logger.warning("No ADMIN_API_KEY configured, accepting the development key")
        return [DEV_API_KEY]

    logger.warning("No ADMIN_API_KEY configured, admin endpoints will reject every request")
    return []


def get_cors_origins() -> list[str]:
    """Read allowed browser origins from FRONTEND_URL (comma-separated)."""
    frontend_url = os.getenv("FRONTEND_URL", "http://localhost:5173")
    return [origin.strip() for origin in frontend_url.split(",") if origin.strip()]


def expose_error_details() -> bool:
    """Only development responses carry exception text."""
    return os.getenv("ENVIRONMENT") == "development"


def tracing_enabled() -> bool:
    """Check ENABLE_TRACING (defaults to true)."""
    return os.getenv("ENABLE_TRACING", "true").lower() == "true"
