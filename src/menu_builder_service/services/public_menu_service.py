"""Public menu read path, keyed by business slug."""

import logging
from collections import defaultdict

from menu_builder_service.models.menu_models import Item
from menu_builder_service.models.response_models import MenuCategory, PublicBusiness, PublicMenu
from menu_builder_service.observability import traced
from menu_builder_service.observability.metrics import record_public_menu_view
from menu_builder_service.repositories.menu_repositories import (
    BusinessRepository,
    CategoryRepository,
    ItemRepository,
)

logger = logging.getLogger(__name__)


class PublicMenuService:
    """Builds the unauthenticated menu view of a published business."""

    def __init__(
        self,
        business_repository: BusinessRepository,
        category_repository: CategoryRepository,
        item_repository: ItemRepository,
    ) -> None:
        self.business_repository = business_repository
        self.category_repository = category_repository
        self.item_repository = item_repository

    @traced("public_menu.get_by_slug")
    async def get_menu_by_slug(self, slug: str) -> PublicMenu | None:
        """Assemble the menu for an active, published business.

        Categories are ordered by sort_order and keep their position even when
        they have no available items. Unavailable items are left out.

        Args:
            slug: Business slug

        Returns:
            PublicMenu, or None if no active published business has this slug
        """
        business = self.business_repository.get_business_by_slug(slug, published_only=True)
        if business is None:
            record_public_menu_view(found=False)
            logger.info(f"No published menu for slug {slug}")
            return None

        categories = self.category_repository.list_categories_for_business(business.id)
        items = self.item_repository.list_available_items_for_categories(
            [category.id for category in categories]
        )

        items_by_category: dict[str, list[Item]] = defaultdict(list)
        for item in items:
            items_by_category[item.category_id].append(item)

        menu = PublicMenu(
            business=PublicBusiness.from_business(business),
            categories=[
                MenuCategory(**category.model_dump(), items=items_by_category[category.id])
                for category in categories
            ],
        )

        record_public_menu_view(found=True)
        return menu
