"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

# Keep main.py and lambda_handler.py from building the app on import
os.environ.setdefault("ENVIRONMENT", "test")

from menu_builder_service.models.menu_models import (  # noqa: E402
    Business,
    BusinessType,
    Category,
    Item,
)

BASE_TIME = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def owner_id() -> str:
    """Fixture providing the principal that owns the sample business."""
    return "user_owner"


@pytest.fixture
def other_principal_id() -> str:
    """Fixture providing a principal that owns nothing."""
    return "user_intruder"


@pytest.fixture
def sample_business(owner_id: str) -> Business:
    """Fixture providing a published restaurant."""
    return Business(
        id="biz_1",
        owner_id=owner_id,
        name="Joe's Diner",
        slug="joes-diner-a1b2",
        business_type=BusinessType.RESTAURANT,
        is_active=True,
        is_published=True,
        description="Burgers and shakes",
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )


@pytest.fixture
def sample_categories() -> list[Category]:
    """Fixture providing two categories of the sample business."""
    return [
        Category(
            id="cat_1",
            business_id="biz_1",
            name="Burgers",
            sort_order=0,
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        ),
        Category(
            id="cat_2",
            business_id="biz_1",
            name="Drinks",
            sort_order=1,
            created_at=BASE_TIME + timedelta(minutes=1),
            updated_at=BASE_TIME + timedelta(minutes=1),
        ),
    ]


@pytest.fixture
def sample_item() -> Item:
    """Fixture providing an available item in cat_1."""
    return Item(
        id="item_1",
        category_id="cat_1",
        name="Cheeseburger",
        description="Classic beef cheeseburger",
        price=Decimal("12.99"),
        is_available=True,
        sort_order=0,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
