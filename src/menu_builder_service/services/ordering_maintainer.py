"""Sort order maintenance for sibling collections."""

import logging

from menu_builder_service.exceptions.menu_exceptions import InvalidRequestError
from menu_builder_service.models.request_models import ReorderEntry
from menu_builder_service.observability.metrics import record_reorder
from menu_builder_service.repositories.menu_repositories import SiblingRepository

logger = logging.getLogger(__name__)


class OrderingMaintainer:
    """Assigns and rewrites sort_order values within one kind of scope.

    One maintainer exists per sibling repository: categories are scoped by
    business, items by category.

    next_sort_order reads the current maximum and adds one. Two creations
    racing in the same scope can both receive the same value; listings then
    fall back to insertion order for the tie.
    """

    def __init__(self, repository: SiblingRepository) -> None:
        """Initialize the maintainer.

        Args:
            repository: Category or item repository
        """
        self.repository = repository

    async def next_sort_order(self, scope_id: str) -> int:
        """Return the sort_order for a new sibling appended to the scope.

        Args:
            scope_id: Parent identifier

        Returns:
            max(sort_order) + 1, or 0 for an empty scope
        """
        current_max = self.repository.get_max_sort_order(scope_id)
        return 0 if current_max is None else current_max + 1

    async def apply_reorder(self, entries: list[ReorderEntry], scope_id: str) -> bool:
        """Persist caller-supplied sort_order values.

        Ownership is the caller's responsibility. Writes are conditioned on every
        record living in scope_id.

        Args:
            entries: Target (id, sort_order) pairs
            scope_id: Parent the batch belongs to

        Returns:
            True if every entry was written, False if a record was missing or
            outside scope_id

        Raises:
            InvalidRequestError: If the batch is empty or names an id twice
        """
        validate_reorder_entries(entries)

        success = self.repository.update_sort_orders(entries, scope_id)
        record_reorder(self.repository.resource_name, len(entries), success)

        if success:
            logger.info(
                f"Reordered {len(entries)} {self.repository.resource_name} records in {scope_id}"
            )
        return success


def validate_reorder_entries(entries: list[ReorderEntry]) -> None:
    """Reject empty batches and batches that repeat an id.

    Raises:
        InvalidRequestError: If the batch cannot be applied
    """
    if not entries:
        raise InvalidRequestError("Reorder batch must contain at least one entry")

    ids = [entry.id for entry in entries]
    if len(set(ids)) != len(ids):
        raise InvalidRequestError("Reorder batch contains duplicate ids")
