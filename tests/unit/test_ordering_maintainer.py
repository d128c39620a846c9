"""Unit tests for OrderingMaintainer."""

from unittest.mock import MagicMock, patch

import pytest

from menu_builder_service.exceptions.menu_exceptions import InvalidRequestError
from menu_builder_service.models.request_models import ReorderEntry
from menu_builder_service.repositories.menu_repositories import CategoryRepository
from menu_builder_service.services.ordering_maintainer import (
    OrderingMaintainer,
    validate_reorder_entries,
)


@pytest.mark.unit
class TestOrderingMaintainer:
    """Test suite for OrderingMaintainer."""

    @pytest.fixture
    def mock_repo(self) -> MagicMock:
        """Create a mock sibling repository."""
        repo = MagicMock(spec=CategoryRepository)
        repo.resource_name = "category"
        return repo

    @pytest.fixture
    def maintainer(self, mock_repo: MagicMock) -> OrderingMaintainer:
        """Create an OrderingMaintainer with a mocked repository."""
        return OrderingMaintainer(mock_repo)

    @pytest.mark.asyncio
    async def test_next_sort_order_empty_scope(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that the first sibling gets position 0."""
        mock_repo.get_max_sort_order.return_value = None

        assert await maintainer.next_sort_order("biz_1") == 0
        mock_repo.get_max_sort_order.assert_called_once_with("biz_1")

    @pytest.mark.asyncio
    async def test_next_sort_order_appends(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that new siblings go after the current maximum."""
        mock_repo.get_max_sort_order.return_value = 4

        assert await maintainer.next_sort_order("biz_1") == 5

    @pytest.mark.asyncio
    async def test_next_sort_order_after_gaps(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that gaps are not filled."""
        mock_repo.get_max_sort_order.return_value = 10

        assert await maintainer.next_sort_order("biz_1") == 11

    @pytest.mark.asyncio
    async def test_apply_reorder_writes_batch(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that a valid batch is persisted in scope."""
        mock_repo.update_sort_orders.return_value = True
        entries = [ReorderEntry(id="cat_1", sort_order=5), ReorderEntry(id="cat_2", sort_order=1)]

        with patch("menu_builder_service.services.ordering_maintainer.record_reorder") as record:
            result = await maintainer.apply_reorder(entries, "biz_1")

        assert result is True
        mock_repo.update_sort_orders.assert_called_once_with(entries, "biz_1")
        record.assert_called_once_with("category", 2, True)

    @pytest.mark.asyncio
    async def test_apply_reorder_reports_rejected_batch(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that a scope mismatch is reported as False."""
        mock_repo.update_sort_orders.return_value = False

        result = await maintainer.apply_reorder([ReorderEntry(id="cat_x", sort_order=0)], "biz_1")

        assert result is False

    @pytest.mark.asyncio
    async def test_apply_reorder_empty_batch(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that an empty batch fails before persistence."""
        with pytest.raises(InvalidRequestError):
            await maintainer.apply_reorder([], "biz_1")

        mock_repo.update_sort_orders.assert_not_called()

    @pytest.mark.asyncio
    async def test_apply_reorder_accepts_duplicate_sort_orders(
        self, maintainer: OrderingMaintainer, mock_repo: MagicMock
    ) -> None:
        """Test that colliding positions are written as given."""
        mock_repo.update_sort_orders.return_value = True
        entries = [ReorderEntry(id="cat_1", sort_order=1), ReorderEntry(id="cat_2", sort_order=1)]

        assert await maintainer.apply_reorder(entries, "biz_1") is True


@pytest.mark.unit
class TestValidateReorderEntries:
    """Test suite for validate_reorder_entries."""

    def test_empty_batch(self) -> None:
        """Test that an empty batch is rejected."""
        with pytest.raises(InvalidRequestError, match="at least one entry"):
            validate_reorder_entries([])

    def test_duplicate_ids(self) -> None:
        """Test that repeating an id is rejected."""
        with pytest.raises(InvalidRequestError, match="duplicate"):
            validate_reorder_entries(
                [ReorderEntry(id="cat_1", sort_order=0), ReorderEntry(id="cat_1", sort_order=1)]
            )

    def test_valid_batch(self) -> None:
        """Test that a valid batch passes."""
        validate_reorder_entries([ReorderEntry(id="cat_1", sort_order=0)])
