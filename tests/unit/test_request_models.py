"""Unit tests for request payload models."""

from decimal import Decimal

import pytest
from boto3.dynamodb.types import TypeSerializer
from pydantic import ValidationError

from menu_builder_service.models.request_models import (
    CreateBusinessRequest,
    CreateItemRequest,
    ReorderRequest,
    UpdateBusinessRequest,
    UpdateCategoryRequest,
    UpdateItemRequest,
)
from menu_builder_service.repositories.menu_repositories import build_update_arguments


@pytest.mark.unit
class TestPatchRequests:
    """Test suite for partial update payloads."""

    def test_to_updates_only_contains_sent_fields(self) -> None:
        """Test that unset fields are not part of the merge."""
        request = UpdateBusinessRequest(name="New Name")

        assert request.to_updates() == {"name": "New Name"}

    def test_to_updates_empty_patch(self) -> None:
        """Test that an empty body produces an empty merge."""
        assert UpdateCategoryRequest().to_updates() == {}

    def test_to_updates_converts_enums(self) -> None:
        """Test that enum values are stored as plain strings."""
        request = UpdateBusinessRequest.model_validate({"business_type": "retail"})

        assert request.to_updates() == {"business_type": "retail"}

    def test_explicit_null_clears_optional_field(self) -> None:
        """Test that null on an optional attribute is kept so it can be removed."""
        request = UpdateItemRequest.model_validate({"description": None})

        assert request.to_updates() == {"description": None}

    @pytest.mark.parametrize("field", ["name", "price", "is_available"])
    def test_explicit_null_rejected_for_required_item_fields(self, field: str) -> None:
        """Test that required item attributes cannot be nulled."""
        with pytest.raises(ValidationError):
            UpdateItemRequest.model_validate({field: None})

    def test_mapping_floats_become_decimal(self) -> None:
        """Test that JSON floats in mapping fields are stored as Decimal."""
        request = UpdateBusinessRequest.model_validate(
            {"opening_hours": {"mon": {"open": 9.5, "close": 22}}, "social_links": {"x": ""}}
        )

        updates = request.to_updates()

        assert updates["opening_hours"] == {"mon": {"open": Decimal("9.5"), "close": 22}}
        assert isinstance(updates["opening_hours"]["mon"]["open"], Decimal)
        serializer = TypeSerializer()
        for value in build_update_arguments(updates)["ExpressionAttributeValues"].values():
            serializer.serialize(value)

    def test_explicit_null_rejected_for_business_name(self) -> None:
        """Test that a business name cannot be nulled."""
        with pytest.raises(ValidationError):
            UpdateBusinessRequest.model_validate({"name": None})

    def test_explicit_null_rejected_for_category_name(self) -> None:
        """Test that a category name cannot be nulled."""
        with pytest.raises(ValidationError):
            UpdateCategoryRequest.model_validate({"name": None})


@pytest.mark.unit
class TestCreateRequests:
    """Test suite for creation payloads."""

    def test_business_defaults(self) -> None:
        """Test business creation defaults."""
        request = CreateBusinessRequest(name="Joe's Diner")

        assert request.business_type.value == "restaurant"
        assert request.currency == "USD"

    def test_business_rejects_blank_name(self) -> None:
        """Test that an empty name fails validation."""
        with pytest.raises(ValidationError):
            CreateBusinessRequest(name="")

    def test_item_price_precision(self) -> None:
        """Test that prices are limited to two decimal places."""
        with pytest.raises(ValidationError):
            CreateItemRequest(name="Fries", price=Decimal("1.999"))

    def test_item_rejects_negative_price(self) -> None:
        """Test that negative prices fail validation."""
        with pytest.raises(ValidationError):
            CreateItemRequest(name="Fries", price=Decimal("-0.01"))

    def test_item_accepts_zero_price(self) -> None:
        """Test that free items are allowed."""
        request = CreateItemRequest(name="Water", price=Decimal("0"))

        assert request.price == Decimal("0")
        assert request.is_available is True


@pytest.mark.unit
class TestReorderRequest:
    """Test suite for reorder payloads."""

    def test_parses_entries(self) -> None:
        """Test that a reorder body parses into entries."""
        request = ReorderRequest.model_validate(
            {"items": [{"id": "cat_1", "sort_order": 5}, {"id": "cat_2", "sort_order": 1}]}
        )

        assert [(e.id, e.sort_order) for e in request.items] == [("cat_1", 5), ("cat_2", 1)]

    def test_empty_batch_is_accepted_by_model(self) -> None:
        """Test that an empty batch parses so the service can reject it."""
        assert ReorderRequest(items=[]).items == []
