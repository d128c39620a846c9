"""Request payload models for business, category and item operations.

Update payloads are partial: only fields present in the request body are
merged into the stored record.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from menu_builder_service.models.menu_models import BusinessType, to_dynamodb_numbers


def _reject_null(value: Any, field_name: str) -> Any:
    if value is None:
        raise ValueError(f"{field_name} cannot be null")
    return value


class PatchRequest(BaseModel):
    """Base for partial updates."""

    def to_updates(self) -> dict[str, Any]:
        """Return only the fields present in the request, with enums as plain values."""
        updates = self.model_dump(exclude_unset=True)
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in updates.items()
        }


class CreateBusinessRequest(BaseModel):
    """Payload for creating a business."""

    name: str = Field(..., min_length=1, max_length=255)
    business_type: BusinessType = BusinessType.RESTAURANT
    description: str | None = Field(None, max_length=2000)
    logo_url: str | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)


class UpdateBusinessRequest(PatchRequest):
    """Partial update for a business."""

    name: str | None = Field(None, min_length=1, max_length=255)
    business_type: BusinessType | None = None
    is_active: bool | None = None
    is_published: bool | None = None
    description: str | None = Field(None, max_length=2000)
    logo_url: str | None = None
    cover_image_url: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    website_url: str | None = None
    social_links: dict[str, Any] | None = None
    opening_hours: dict[str, Any] | None = None
    primary_color: str | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)

    @field_validator("name", "business_type", "is_active", "is_published", "currency")
    @classmethod
    def validate_not_null(cls, v: Any, info: Any) -> Any:
        """Reject explicit nulls for required attributes."""
        return _reject_null(v, info.field_name)

    @field_validator("social_links", "opening_hours")
    @classmethod
    def convert_floats(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        """Store JSON numbers as Decimal so boto3 can serialize them."""
        return None if v is None else to_dynamodb_numbers(v)


class CreateCategoryRequest(BaseModel):
    """Payload for creating a category."""

    name: str = Field(..., min_length=1, max_length=255)


class UpdateCategoryRequest(PatchRequest):
    """Partial update for a category."""

    name: str | None = Field(None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Reject an explicit null name."""
        return _reject_null(v, "name")


class CreateItemRequest(BaseModel):
    """Payload for creating an item."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: str | None = None
    is_available: bool = True


class UpdateItemRequest(PatchRequest):
    """Partial update for an item."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: str | None = None
    is_available: bool | None = None

    @field_validator("name", "price", "is_available")
    @classmethod
    def validate_not_null(cls, v: Any, info: Any) -> Any:
        """Reject explicit nulls for required attributes."""
        return _reject_null(v, info.field_name)


class ReorderEntry(BaseModel):
    """Target position for a single sibling."""

    id: str = Field(..., min_length=1)
    sort_order: int


class ReorderRequest(BaseModel):
    """Batch of sibling positions, expected to share one scope."""

    items: list[ReorderEntry]
