"""Item service: ownership-checked CRUD and ordering for menu items."""

import logging
import uuid

from menu_builder_service.models.menu_models import Item, ResourceKind
from menu_builder_service.models.request_models import (
    CreateItemRequest,
    ReorderEntry,
    UpdateItemRequest,
)
from menu_builder_service.observability import traced
from menu_builder_service.observability.metrics import record_resource_created
from menu_builder_service.repositories.menu_repositories import ItemRepository
from menu_builder_service.services.ordering_maintainer import (
    OrderingMaintainer,
    validate_reorder_entries,
)
from menu_builder_service.services.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class ItemService:
    """Service for items within a category.

    Ownership is resolved through the item's category up to its business.
    """

    def __init__(
        self,
        item_repository: ItemRepository,
        ownership_resolver: OwnershipResolver,
        ordering_maintainer: OrderingMaintainer,
    ) -> None:
        """Initialize the ItemService.

        Args:
            item_repository: Repository for items
            ownership_resolver: Resolver used for owner checks
            ordering_maintainer: Maintainer scoped to items per category
        """
        self.item_repository = item_repository
        self.ownership_resolver = ownership_resolver
        self.ordering_maintainer = ordering_maintainer

    async def _owns_category(self, category_id: str, principal_id: str) -> bool:
        business_id = await self.ownership_resolver.resolve_owner_business(
            category_id, principal_id, ResourceKind.CATEGORY
        )
        return business_id is not None

    @traced("item.create")
    async def create(
        self,
        category_id: str,
        principal_id: str,
        request: CreateItemRequest,
    ) -> Item | None:
        """Append an item to a category the principal owns.

        Args:
            category_id: Parent category
            principal_id: Acting principal
            request: Item creation data

        Returns:
            The created item, or None if the category is missing or not owned
        """
        if not await self._owns_category(category_id, principal_id):
            return None

        return await self._append(category_id, request)

    @traced("item.get_all")
    async def get_all(self, category_id: str, principal_id: str) -> list[Item] | None:
        """List a category's items ascending by sort_order.

        Returns:
            Items, or None if the category is missing or not owned
        """
        if not await self._owns_category(category_id, principal_id):
            return None

        return self.item_repository.list_items_for_category(category_id)

    @traced("item.update")
    async def update(
        self,
        item_id: str,
        principal_id: str,
        request: UpdateItemRequest,
    ) -> Item | None:
        """Apply a partial update to an item the principal owns.

        Returns:
            Updated item, or None if missing or not owned
        """
        business_id = await self.ownership_resolver.resolve_owner_business(
            item_id, principal_id, ResourceKind.ITEM
        )
        if business_id is None:
            return None

        return self.item_repository.update_item(item_id, request.to_updates())

    @traced("item.delete")
    async def delete(self, item_id: str, principal_id: str) -> bool:
        """Delete an item the principal owns.

        Returns:
            True if deleted, False if missing or not owned
        """
        business_id = await self.ownership_resolver.resolve_owner_business(
            item_id, principal_id, ResourceKind.ITEM
        )
        if business_id is None:
            return False

        return self.item_repository.delete_item(item_id)

    @traced("item.reorder")
    async def reorder(self, entries: list[ReorderEntry], principal_id: str) -> bool:
        """Rewrite sort_order for items of one category.

        Ownership is checked against the first entry's category. Every other
        entry must be in that same category or the batch is rejected.

        Returns:
            True if applied, False if the first item is missing or not owned,
            or another entry is outside its category

        Raises:
            InvalidRequestError: If the batch is empty or repeats an id
        """
        validate_reorder_entries(entries)

        first = self.item_repository.get_item(entries[0].id)
        if first is None or not await self._owns_category(first.category_id, principal_id):
            return False

        return await self.ordering_maintainer.apply_reorder(entries, first.category_id)

    @traced("item.create_admin")
    async def create_admin(self, category_id: str, request: CreateItemRequest) -> Item | None:
        """Append an item without an ownership check.

        Returns:
            The created item, or None if the category does not exist
        """
        if not await self.ownership_resolver.resource_exists(category_id, ResourceKind.CATEGORY):
            return None

        return await self._append(category_id, request)

    async def _append(self, category_id: str, request: CreateItemRequest) -> Item:
        item = Item(
            id=str(uuid.uuid4()),
            category_id=category_id,
            name=request.name,
            description=request.description,
            price=request.price,
            image_url=request.image_url,
            is_available=request.is_available,
            sort_order=await self.ordering_maintainer.next_sort_order(category_id),
        )

        created = self.item_repository.create_item(item)
        record_resource_created(ResourceKind.ITEM.value)
        logger.info(
            f"Item created: {created.id} in category {category_id} "
            f"at position {created.sort_order}"
        )
        return created

    @traced("item.get_all_admin")
    async def get_all_admin(self, category_id: str) -> list[Item]:
        """List a category's items without an ownership check."""
        return self.item_repository.list_items_for_category(category_id)

    @traced("item.update_admin")
    async def update_admin(self, item_id: str, request: UpdateItemRequest) -> Item | None:
        """Apply a partial update without an ownership check."""
        return self.item_repository.update_item(item_id, request.to_updates())

    @traced("item.delete_admin")
    async def delete_admin(self, item_id: str) -> bool:
        """Delete an item without an ownership check."""
        if self.item_repository.get_item(item_id) is None:
            return False
        return self.item_repository.delete_item(item_id)

    @traced("item.reorder_admin")
    async def reorder_admin(self, entries: list[ReorderEntry]) -> bool:
        """Rewrite sort_order without an ownership check.

        The scope is taken from the first entry's category.
        """
        validate_reorder_entries(entries)

        first = self.item_repository.get_item(entries[0].id)
        if first is None:
            return False

        return await self.ordering_maintainer.apply_reorder(entries, first.category_id)
