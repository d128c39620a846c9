"""Ownership checks along the item -> category -> business chain."""

import logging

from menu_builder_service.models.menu_models import ResourceKind
from menu_builder_service.observability.metrics import record_ownership_denied
from menu_builder_service.repositories.menu_repositories import (
    BusinessRepository,
    CategoryRepository,
    ItemRepository,
)

logger = logging.getLogger(__name__)


class OwnershipResolver:
    """Resolves whether a principal owns the business at the root of a resource.

    A missing resource, a dangling parent reference and a foreign owner all
    produce the same result (False/None). Callers report that outcome as
    "not found or not authorized" without saying which case applied.
    """

    def __init__(
        self,
        business_repository: BusinessRepository,
        category_repository: CategoryRepository,
        item_repository: ItemRepository,
    ) -> None:
        """Initialize the resolver.

        Args:
            business_repository: Repository for businesses
            category_repository: Repository for categories
            item_repository: Repository for items
        """
        self.business_repository = business_repository
        self.category_repository = category_repository
        self.item_repository = item_repository

    async def verify_ownership(self, business_id: str, principal_id: str) -> bool:
        """Check that a principal owns a business.

        Args:
            business_id: Business identifier
            principal_id: Acting principal

        Returns:
            True if the business exists and is owned by principal_id
        """
        business = self.business_repository.get_business_for_owner(business_id, principal_id)
        return business is not None

    async def resolve_owner_business(
        self,
        resource_id: str,
        principal_id: str,
        resource_kind: ResourceKind,
    ) -> str | None:
        """Walk a resource's parent chain and return its business if owned.

        Args:
            resource_id: Identifier of the business, category or item
            principal_id: Acting principal
            resource_kind: Which kind of resource resource_id refers to

        Returns:
            The owning business id, or None if any link is missing or the
            principal does not own the business
        """
        business_id = self._find_business_id(resource_id, resource_kind)

        if business_id is not None and await self.verify_ownership(business_id, principal_id):
            return business_id

        logger.info(
            f"Ownership check failed for {resource_kind.value} {resource_id} "
            f"and principal {principal_id}"
        )
        record_ownership_denied(resource_kind.value)
        return None

    async def resource_exists(self, resource_id: str, resource_kind: ResourceKind) -> bool:
        """Check that a resource is stored, regardless of who owns it."""
        if resource_kind == ResourceKind.BUSINESS:
            return self.business_repository.get_business(resource_id) is not None
        if resource_kind == ResourceKind.CATEGORY:
            return self.category_repository.get_category(resource_id) is not None
        return self.item_repository.get_item(resource_id) is not None

    def _find_business_id(self, resource_id: str, resource_kind: ResourceKind) -> str | None:
        if resource_kind == ResourceKind.BUSINESS:
            return resource_id

        if resource_kind == ResourceKind.ITEM:
            item = self.item_repository.get_item(resource_id)
            if item is None:
                return None
            resource_id = item.category_id

        category = self.category_repository.get_category(resource_id)
        if category is None:
            return None

        return category.business_id
