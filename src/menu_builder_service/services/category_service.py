"""Category service: ownership-checked CRUD and ordering for categories."""

import logging
import uuid

from menu_builder_service.models.menu_models import Category, ResourceKind
from menu_builder_service.models.request_models import (
    CreateCategoryRequest,
    ReorderEntry,
    UpdateCategoryRequest,
)
from menu_builder_service.observability import traced
from menu_builder_service.observability.metrics import record_resource_created
from menu_builder_service.repositories.menu_repositories import CategoryRepository
from menu_builder_service.services.ordering_maintainer import (
    OrderingMaintainer,
    validate_reorder_entries,
)
from menu_builder_service.services.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for categories within a business.

    Owner-facing methods return None (or False) when the business or category
    is missing or belongs to another principal. The *_admin variants skip the
    ownership check.
    """

    def __init__(
        self,
        category_repository: CategoryRepository,
        ownership_resolver: OwnershipResolver,
        ordering_maintainer: OrderingMaintainer,
    ) -> None:
        """Initialize the CategoryService.

        Args:
            category_repository: Repository for categories
            ownership_resolver: Resolver used for owner checks
            ordering_maintainer: Maintainer scoped to categories per business
        """
        self.category_repository = category_repository
        self.ownership_resolver = ownership_resolver
        self.ordering_maintainer = ordering_maintainer

    @traced("category.create")
    async def create(
        self,
        business_id: str,
        principal_id: str,
        request: CreateCategoryRequest,
    ) -> Category | None:
        """Append a category to an owned business.

        Args:
            business_id: Parent business
            principal_id: Acting principal
            request: Category creation data

        Returns:
            The created category, or None if the business is missing or not owned
        """
        if not await self.ownership_resolver.verify_ownership(business_id, principal_id):
            return None

        return await self._append(business_id, request)

    @traced("category.get_all")
    async def get_all(self, business_id: str, principal_id: str) -> list[Category] | None:
        """List an owned business's categories ascending by sort_order.

        Returns:
            Categories, or None if the business is missing or not owned
        """
        if not await self.ownership_resolver.verify_ownership(business_id, principal_id):
            return None

        return self.category_repository.list_categories_for_business(business_id)

    @traced("category.update")
    async def update(
        self,
        category_id: str,
        principal_id: str,
        request: UpdateCategoryRequest,
    ) -> Category | None:
        """Apply a partial update to a category the principal owns.

        Returns:
            Updated category, or None if missing or not owned
        """
        business_id = await self.ownership_resolver.resolve_owner_business(
            category_id, principal_id, ResourceKind.CATEGORY
        )
        if business_id is None:
            return None

        return self.category_repository.update_category(category_id, request.to_updates())

    @traced("category.delete")
    async def delete(self, category_id: str, principal_id: str) -> bool:
        """Delete a category the principal owns, together with its items.

        Returns:
            True if deleted, False if missing or not owned
        """
        business_id = await self.ownership_resolver.resolve_owner_business(
            category_id, principal_id, ResourceKind.CATEGORY
        )
        if business_id is None:
            return False

        return self.category_repository.delete_category(category_id)

    @traced("category.reorder")
    async def reorder(self, entries: list[ReorderEntry], principal_id: str) -> bool:
        """Rewrite sort_order for categories of one business.

        Ownership is checked against the first entry. Every other entry must
        belong to the same business or the batch is rejected.

        Returns:
            True if applied, False if the first category is missing or not owned,
            or another entry is outside its business

        Raises:
            InvalidRequestError: If the batch is empty or repeats an id
        """
        validate_reorder_entries(entries)

        business_id = await self.ownership_resolver.resolve_owner_business(
            entries[0].id, principal_id, ResourceKind.CATEGORY
        )
        if business_id is None:
            return False

        return await self.ordering_maintainer.apply_reorder(entries, business_id)

    @traced("category.create_admin")
    async def create_admin(
        self, business_id: str, request: CreateCategoryRequest
    ) -> Category | None:
        """Append a category without an ownership check.

        Returns:
            The created category, or None if the business does not exist
        """
        if not await self.ownership_resolver.resource_exists(business_id, ResourceKind.BUSINESS):
            return None

        return await self._append(business_id, request)

    async def _append(self, business_id: str, request: CreateCategoryRequest) -> Category:
        category = Category(
            id=str(uuid.uuid4()),
            business_id=business_id,
            name=request.name,
            sort_order=await self.ordering_maintainer.next_sort_order(business_id),
        )

        created = self.category_repository.create_category(category)
        record_resource_created(ResourceKind.CATEGORY.value)
        logger.info(
            f"Category created: {created.id} in business {business_id} "
            f"at position {created.sort_order}"
        )
        return created

    @traced("category.get_all_admin")
    async def get_all_admin(self, business_id: str) -> list[Category]:
        """List a business's categories without an ownership check."""
        return self.category_repository.list_categories_for_business(business_id)

    @traced("category.update_admin")
    async def update_admin(
        self, category_id: str, request: UpdateCategoryRequest
    ) -> Category | None:
        """Apply a partial update without an ownership check."""
        return self.category_repository.update_category(category_id, request.to_updates())

    @traced("category.delete_admin")
    async def delete_admin(self, category_id: str) -> bool:
        """Delete a category and its items without an ownership check."""
        if self.category_repository.get_category(category_id) is None:
            return False
        return self.category_repository.delete_category(category_id)

    @traced("category.reorder_admin")
    async def reorder_admin(self, entries: list[ReorderEntry]) -> bool:
        """Rewrite sort_order without an ownership check.

        The scope is taken from the first entry's business.
        """
        validate_reorder_entries(entries)

        first = self.category_repository.get_category(entries[0].id)
        if first is None:
            return False

        return await self.ordering_maintainer.apply_reorder(entries, first.business_id)
