"""Menu builder data models.

Businesses own categories, categories own items. Each model converts to and
from the DynamoDB item format used by the repositories.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


class BusinessType(str, Enum):
    """Enumeration of storefront types."""

    RESTAURANT = "restaurant"
    RETAIL = "retail"
    GAMING_GEAR = "gaming_gear"
    OTHER = "other"


class ResourceKind(str, Enum):
    """Kinds of resources in the ownership chain."""

    BUSINESS = "business"
    CATEGORY = "category"
    ITEM = "item"


# Free-form JSON attributes; DynamoDB stores their numbers as Decimal
BUSINESS_MAPPING_FIELDS = ("social_links", "opening_hours")


def _decimal_to_number(value: Any) -> int | float:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Unsupported type {type(value).__name__}")


def to_dynamodb_numbers(value: Any) -> Any:
    """Replace floats anywhere in a JSON value with Decimal."""
    return json.loads(json.dumps(value, default=_decimal_to_number), parse_float=Decimal)


def from_dynamodb_numbers(value: Any) -> Any:
    """Turn Decimals read from DynamoDB back into ints and floats."""
    return json.loads(json.dumps(value, default=_decimal_to_number))


# Optional business attributes stored only when set
BUSINESS_OPTIONAL_FIELDS = (
    "description",
    "logo_url",
    "cover_image_url",
    "contact_email",
    "contact_phone",
    "address",
    "website_url",
    "social_links",
    "opening_hours",
    "primary_color",
)


class Business(BaseModel):
    """Storefront owned by a single principal.

    Stored in DynamoDB with id as partition key, plus indexes on owner_id and slug.
    """

    id: str = Field(..., description="Unique business identifier")
    owner_id: str = Field(..., description="Principal that owns the business")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="Unique URL-safe identifier")
    business_type: BusinessType = Field(default=BusinessType.RESTAURANT)
    is_active: bool = Field(default=True)
    is_published: bool = Field(default=False)
    description: str | None = None
    logo_url: str | None = None
    cover_image_url: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    website_url: str | None = None
    social_links: dict[str, Any] | None = None
    opening_hours: dict[str, Any] | None = None
    primary_color: str | None = None
    currency: str = Field(default="USD")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "slug": self.slug,
            "business_type": self.business_type.value,
            "is_active": self.is_active,
            "is_published": self.is_published,
            "currency": self.currency,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        for field_name in BUSINESS_OPTIONAL_FIELDS:
            value = getattr(self, field_name)
            if value is not None:
                if field_name in BUSINESS_MAPPING_FIELDS:
                    value = to_dynamodb_numbers(value)
                item[field_name] = value

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Business":
        """Create Business from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Business: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "owner_id": item["owner_id"],
            "name": item["name"],
            "slug": item["slug"],
            "business_type": BusinessType(item.get("business_type", "restaurant")),
            "is_active": item.get("is_active", True),
            "is_published": item.get("is_published", False),
            "currency": item.get("currency", "USD"),
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        for field_name in BUSINESS_OPTIONAL_FIELDS:
            if field_name in item:
                value = item[field_name]
                if field_name in BUSINESS_MAPPING_FIELDS:
                    value = from_dynamodb_numbers(value)
                data[field_name] = value

        return cls(**data)


class Category(BaseModel):
    """Menu category within a business."""

    id: str = Field(..., description="Unique category identifier")
    business_id: str = Field(..., description="Business this category belongs to")
    name: str = Field(..., description="Category name")
    sort_order: int = Field(default=0, description="Display order within the business")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {
            "id": self.id,
            "business_id": self.business_id,
            "name": self.name,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Category":
        """Create Category from DynamoDB item.

        DynamoDB returns numbers as Decimal, so sort_order is coerced back to int.
        """
        return cls(
            id=item["id"],
            business_id=item["business_id"],
            name=item["name"],
            sort_order=int(item.get("sort_order", 0)),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class Item(BaseModel):
    """Menu item within a category."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    id: str = Field(..., description="Unique item identifier")
    category_id: str = Field(..., description="Category this item belongs to")
    name: str = Field(..., description="Item name")
    description: str | None = Field(None, description="Item description")
    price: Decimal = Field(..., description="Item price", ge=0)
    image_url: str | None = Field(None, description="Public URL of the item image")
    is_available: bool = Field(default=True, description="Whether item is shown on the menu")
    sort_order: int = Field(default=0, description="Display order within the category")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        item: dict[str, Any] = {
            "id": self.id,
            "category_id": self.category_id,
            "name": self.name,
            "price": self.price,
            "is_available": self.is_available,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.description is not None:
            item["description"] = self.description

        if self.image_url is not None:
            item["image_url"] = self.image_url

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Item":
        """Create Item from DynamoDB item."""
        return cls(
            id=item["id"],
            category_id=item["category_id"],
            name=item["name"],
            description=item.get("description"),
            price=Decimal(str(item["price"])),
            image_url=item.get("image_url"),
            is_available=item.get("is_available", True),
            sort_order=int(item.get("sort_order", 0)),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )
