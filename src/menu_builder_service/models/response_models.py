"""Response envelope and public menu models."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from menu_builder_service.models.menu_models import Business, BusinessType, Category, Item

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope returned by every endpoint."""

    success: bool
    data: T | None = None
    error: str | None = None
    message: str | None = None


class PublicBusiness(BaseModel):
    """Business fields that are safe to expose on the public menu."""

    name: str
    slug: str
    business_type: BusinessType
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
    currency: str = "USD"

    @classmethod
    def from_business(cls, business: Business) -> "PublicBusiness":
        """Project a stored business onto its public fields."""
        return cls.model_validate(business.model_dump(include=set(cls.model_fields)))


class MenuCategory(Category):
    """Category with its available items attached."""

    items: list[Item] = []


class PublicMenu(BaseModel):
    """Read-only menu rendered for a published business."""

    business: PublicBusiness
    categories: list[MenuCategory]
