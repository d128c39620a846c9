"""Business service for storefront profiles."""

import logging
import uuid

from menu_builder_service.exceptions.menu_exceptions import InvalidRequestError
from menu_builder_service.models.menu_models import Business, ResourceKind
from menu_builder_service.models.request_models import (
    CreateBusinessRequest,
    UpdateBusinessRequest,
)
from menu_builder_service.observability import traced
from menu_builder_service.observability.metrics import record_resource_created
from menu_builder_service.repositories.menu_repositories import BusinessRepository
from menu_builder_service.services.ownership_resolver import OwnershipResolver
from menu_builder_service.utils.slug import generate_unique_slug

logger = logging.getLogger(__name__)


class BusinessService:
    """Service for creating and managing businesses.

    Any principal may create a business and becomes its owner. Every other
    operation requires ownership, except the *_admin variants which must only be
    reachable through the admin boundary.
    """

    def __init__(
        self,
        business_repository: BusinessRepository,
        ownership_resolver: OwnershipResolver,
        max_slug_attempts: int = 5,
    ) -> None:
        """Initialize the BusinessService.

        Args:
            business_repository: Repository for businesses
            ownership_resolver: Resolver used for owner checks
            max_slug_attempts: How many random slugs to try before giving up
        """
        self.business_repository = business_repository
        self.ownership_resolver = ownership_resolver
        self.max_slug_attempts = max_slug_attempts

    @traced("business.create")
    async def create(self, principal_id: str, request: CreateBusinessRequest) -> Business:
        """Create a business owned by the principal.

        Args:
            principal_id: Acting principal, becomes the owner
            request: Business creation data

        Returns:
            The created business

        Raises:
            InvalidRequestError: If no free slug could be generated
        """
        business = Business(
            id=str(uuid.uuid4()),
            owner_id=principal_id,
            name=request.name,
            slug=self._allocate_slug(request.name),
            business_type=request.business_type,
            description=request.description,
            logo_url=request.logo_url,
            currency=request.currency.upper(),
        )

        created = self.business_repository.create_business(business)
        record_resource_created(ResourceKind.BUSINESS.value)
        logger.info(f"Business created: {created.id} ({created.slug}) for {principal_id}")
        return created

    @traced("business.get_all")
    async def get_all(self, principal_id: str) -> list[Business]:
        """List the principal's businesses."""
        return self.business_repository.list_businesses_for_owner(principal_id)

    @traced("business.get")
    async def get(self, business_id: str, principal_id: str) -> Business | None:
        """Get a business if the principal owns it.

        Returns:
            Business, or None if missing or not owned
        """
        return self.business_repository.get_business_for_owner(business_id, principal_id)

    @traced("business.update")
    async def update(
        self,
        business_id: str,
        principal_id: str,
        request: UpdateBusinessRequest,
    ) -> Business | None:
        """Apply a partial update to an owned business.

        Args:
            business_id: Business identifier
            principal_id: Acting principal
            request: Fields to change

        Returns:
            Updated business, or None if missing or not owned
        """
        owned = await self.ownership_resolver.resolve_owner_business(
            business_id, principal_id, ResourceKind.BUSINESS
        )
        if owned is None:
            return None

        return self.business_repository.update_business(business_id, request.to_updates())

    @traced("business.delete")
    async def delete(self, business_id: str, principal_id: str) -> bool:
        """Delete an owned business with its categories and items.

        Returns:
            True if deleted, False if missing or not owned
        """
        owned = await self.ownership_resolver.resolve_owner_business(
            business_id, principal_id, ResourceKind.BUSINESS
        )
        if owned is None:
            return False

        deleted = self.business_repository.delete_business(business_id)
        logger.info(f"Business deleted: {business_id}")
        return deleted

    @traced("business.get_all_admin")
    async def get_all_admin(self) -> list[Business]:
        """List every business without an ownership check."""
        return self.business_repository.list_businesses()

    @traced("business.update_admin")
    async def update_admin(
        self, business_id: str, request: UpdateBusinessRequest
    ) -> Business | None:
        """Apply a partial update without an ownership check."""
        return self.business_repository.update_business(business_id, request.to_updates())

    @traced("business.delete_admin")
    async def delete_admin(self, business_id: str) -> bool:
        """Delete a business without an ownership check."""
        if self.business_repository.get_business(business_id) is None:
            return False
        return self.business_repository.delete_business(business_id)

    def _allocate_slug(self, name: str) -> str:
        for _ in range(self.max_slug_attempts):
            slug = generate_unique_slug(name)
            if not self.business_repository.slug_exists(slug):
                return slug

        raise InvalidRequestError(f"Could not allocate a unique slug for '{name}'")
