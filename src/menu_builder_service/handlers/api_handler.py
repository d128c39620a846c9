"""FastAPI application for the menu builder REST API.

Owner routes act on behalf of the principal in X-Principal-Id. Admin routes
skip ownership and require X-API-Key. Every response, including errors, is
wrapped in the ApiResponse envelope.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from menu_builder_service.auth.api_dependencies import (
    get_api_key_from_header,
    get_principal_id_from_header,
)
from menu_builder_service.auth.api_key_validator import APIKeyValidator
from menu_builder_service.exceptions.menu_exceptions import (
    InvalidRequestError,
    PersistenceError,
)
from menu_builder_service.models.menu_models import Business, Category, Item
from menu_builder_service.models.request_models import (
    CreateBusinessRequest,
    CreateCategoryRequest,
    CreateItemRequest,
    ReorderRequest,
    UpdateBusinessRequest,
    UpdateCategoryRequest,
    UpdateItemRequest,
)
from menu_builder_service.models.response_models import ApiResponse, PublicMenu
from menu_builder_service.services.business_service import BusinessService
from menu_builder_service.services.category_service import CategoryService
from menu_builder_service.services.item_service import ItemService
from menu_builder_service.services.public_menu_service import PublicMenuService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

BUSINESS_NOT_FOUND = "Business not found or not authorized"
CATEGORY_NOT_FOUND = "Category not found or not authorized"
ITEM_NOT_FOUND = "Item not found or not authorized"


class EnvelopeRoute(APIRoute):
    """Route that leaves null fields out of serialized responses."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["response_model_exclude_none"] = True
        super().__init__(*args, **kwargs)


def error_response(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    """Build a failed envelope response."""
    body = ApiResponse[None](success=False, error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI, expose_error_details: bool = False) -> None:
    """Map exceptions raised by routes and services onto envelope responses.

    Args:
        app: Application to register handlers on
        expose_error_details: Include exception text in 500 responses
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return error_response(400, "Validation failed", details)

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
        return error_response(400, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error(f"Persistence failure during {exc.operation} on {request.url.path}")
        message = str(exc) if expose_error_details else None
        return error_response(500, "Database operation failed", message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        message = str(exc) if expose_error_details else None
        return error_response(500, "Internal server error", message)


def create_app(
    business_service: BusinessService,
    category_service: CategoryService,
    item_service: ItemService,
    public_menu_service: PublicMenuService,
    api_keys: list[str],
    cors_origins: list[str] | None = None,
    expose_error_details: bool = False,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        business_service: Service for businesses
        category_service: Service for categories
        item_service: Service for items
        public_menu_service: Service for the public menu
        api_keys: Valid API keys for the admin routes, empty to reject all admin calls
        cors_origins: Origins allowed to call the API from a browser
        expose_error_details: Include exception text in 500 responses

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Menu Builder API",
        description="Ownership-scoped CRUD and ordering for business menus",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.business_service = business_service
    app.state.category_service = category_service
    app.state.item_service = item_service
    app.state.public_menu_service = public_menu_service
    # Without configured keys every admin request is rejected
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys) if api_keys else None

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app, expose_error_details)

    def validate_api_key(x_api_key: str | None = Header(None)) -> str:
        """Dependency to validate the admin API key."""
        return get_api_key_from_header(x_api_key=x_api_key, validator=app.state.api_key_validator)

    router = APIRouter(prefix=API_PREFIX, route_class=EnvelopeRoute)
    admin = APIRouter(
        prefix=f"{API_PREFIX}/admin",
        dependencies=[Depends(validate_api_key)],
        route_class=EnvelopeRoute,
    )

    @router.get("/health", tags=["Health"])
    async def health_check() -> ApiResponse[dict[str, str]]:
        """Health check endpoint."""
        return ApiResponse(success=True, data={"status": "healthy"})

    # Businesses

    @router.post("/business", status_code=201, tags=["Business"])
    async def create_business(
        body: CreateBusinessRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Business]:
        business = await app.state.business_service.create(principal_id, body)
        return ApiResponse(success=True, data=business, message="Business created successfully")

    @router.get("/business", tags=["Business"])
    async def list_businesses(
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[list[Business]]:
        businesses = await app.state.business_service.get_all(principal_id)
        return ApiResponse(success=True, data=businesses)

    @router.get("/business/{business_id}", tags=["Business"])
    async def get_business(
        business_id: str,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Business]:
        business = await app.state.business_service.get(business_id, principal_id)
        if business is None:
            raise HTTPException(status_code=404, detail=BUSINESS_NOT_FOUND)
        return ApiResponse(success=True, data=business)

    @router.put("/business/{business_id}", tags=["Business"])
    async def update_business(
        business_id: str,
        body: UpdateBusinessRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Business]:
        business = await app.state.business_service.update(business_id, principal_id, body)
        if business is None:
            raise HTTPException(status_code=404, detail=BUSINESS_NOT_FOUND)
        return ApiResponse(success=True, data=business, message="Business updated successfully")

    @router.delete("/business/{business_id}", tags=["Business"])
    async def delete_business(
        business_id: str,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[None]:
        if not await app.state.business_service.delete(business_id, principal_id):
            raise HTTPException(status_code=404, detail=BUSINESS_NOT_FOUND)
        return ApiResponse(success=True, message="Business deleted successfully")

    # Categories

    @router.post("/business/{business_id}/categories", status_code=201, tags=["Categories"])
    async def create_category(
        business_id: str,
        body: CreateCategoryRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Category]:
        category = await app.state.category_service.create(business_id, principal_id, body)
        if category is None:
            raise HTTPException(status_code=403, detail="Not authorized to modify this business")
        return ApiResponse(success=True, data=category, message="Category created successfully")

    @router.get("/business/{business_id}/categories", tags=["Categories"])
    async def list_categories(
        business_id: str,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[list[Category]]:
        categories = await app.state.category_service.get_all(business_id, principal_id)
        if categories is None:
            raise HTTPException(status_code=403, detail="Not authorized to view this business")
        return ApiResponse(success=True, data=categories)

    # Declared before /categories/{category_id} so "reorder" is not taken as an id
    @router.put("/categories/reorder", tags=["Categories"])
    async def reorder_categories(
        body: ReorderRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[None]:
        if not await app.state.category_service.reorder(body.items, principal_id):
            raise HTTPException(status_code=404, detail=CATEGORY_NOT_FOUND)
        return ApiResponse(success=True, message="Categories reordered successfully")

    @router.put("/categories/{category_id}", tags=["Categories"])
    async def update_category(
        category_id: str,
        body: UpdateCategoryRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Category]:
        category = await app.state.category_service.update(category_id, principal_id, body)
        if category is None:
            raise HTTPException(status_code=404, detail=CATEGORY_NOT_FOUND)
        return ApiResponse(success=True, data=category, message="Category updated successfully")

    @router.delete("/categories/{category_id}", tags=["Categories"])
    async def delete_category(
        category_id: str,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[None]:
        if not await app.state.category_service.delete(category_id, principal_id):
            raise HTTPException(status_code=404, detail=CATEGORY_NOT_FOUND)
        return ApiResponse(success=True, message="Category deleted successfully")

    # Items

    @router.post("/categories/{category_id}/items", status_code=201, tags=["Items"])
    async def create_item(
        category_id: str,
        body: CreateItemRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Item]:
        item = await app.state.item_service.create(category_id, principal_id, body)
        if item is None:
            raise HTTPException(status_code=403, detail="Not authorized to modify this category")
        return ApiResponse(success=True, data=item, message="Item created successfully")

    @router.get("/categories/{category_id}/items", tags=["Items"])
    async def list_items(
        category_id: str,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[list[Item]]:
        items = await app.state.item_service.get_all(category_id, principal_id)
        if items is None:
            raise HTTPException(status_code=403, detail="Not authorized to view this category")
        return ApiResponse(success=True, data=items)

    @router.put("/items/reorder", tags=["Items"])
    async def reorder_items(
        body: ReorderRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[None]:
        if not await app.state.item_service.reorder(body.items, principal_id):
            raise HTTPException(status_code=404, detail=ITEM_NOT_FOUND)
        return ApiResponse(success=True, message="Items reordered successfully")

    @router.put("/items/{item_id}", tags=["Items"])
    async def update_item(
        item_id: str,
        body: UpdateItemRequest,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[Item]:
        item = await app.state.item_service.update(item_id, principal_id, body)
        if item is None:
            raise HTTPException(status_code=404, detail=ITEM_NOT_FOUND)
        return ApiResponse(success=True, data=item, message="Item updated successfully")

    @router.delete("/items/{item_id}", tags=["Items"])
    async def delete_item(
        item_id: str,
        principal_id: str = Depends(get_principal_id_from_header),
    ) -> ApiResponse[None]:
        if not await app.state.item_service.delete(item_id, principal_id):
            raise HTTPException(status_code=404, detail=ITEM_NOT_FOUND)
        return ApiResponse(success=True, message="Item deleted successfully")

    # Public menu

    @router.get("/menu/{slug}", tags=["Public Menu"])
    async def get_public_menu(slug: str) -> ApiResponse[PublicMenu]:
        menu = await app.state.public_menu_service.get_menu_by_slug(slug)
        if menu is None:
            raise HTTPException(status_code=404, detail="Menu not found")
        return ApiResponse(success=True, data=menu)

    # Admin

    @admin.get("/businesses", tags=["Admin"])
    async def admin_list_businesses() -> ApiResponse[list[Business]]:
        businesses = await app.state.business_service.get_all_admin()
        return ApiResponse(success=True, data=businesses)

    @admin.put("/business/{business_id}", tags=["Admin"])
    async def admin_update_business(
        business_id: str, body: UpdateBusinessRequest
    ) -> ApiResponse[Business]:
        business = await app.state.business_service.update_admin(business_id, body)
        if business is None:
            raise HTTPException(status_code=404, detail="Business not found")
        return ApiResponse(success=True, data=business, message="Business updated successfully")

    @admin.delete("/business/{business_id}", tags=["Admin"])
    async def admin_delete_business(business_id: str) -> ApiResponse[None]:
        if not await app.state.business_service.delete_admin(business_id):
            raise HTTPException(status_code=404, detail="Business not found")
        return ApiResponse(success=True, message="Business deleted successfully")

    @admin.post("/business/{business_id}/categories", status_code=201, tags=["Admin"])
    async def admin_create_category(
        business_id: str, body: CreateCategoryRequest
    ) -> ApiResponse[Category]:
        category = await app.state.category_service.create_admin(business_id, body)
        if category is None:
            raise HTTPException(status_code=404, detail="Business not found")
        return ApiResponse(success=True, data=category, message="Category created successfully")

    @admin.get("/business/{business_id}/categories", tags=["Admin"])
    async def admin_list_categories(business_id: str) -> ApiResponse[list[Category]]:
        categories = await app.state.category_service.get_all_admin(business_id)
        return ApiResponse(success=True, data=categories)

    @admin.put("/categories/reorder", tags=["Admin"])
    async def admin_reorder_categories(body: ReorderRequest) -> ApiResponse[None]:
        if not await app.state.category_service.reorder_admin(body.items):
            raise HTTPException(status_code=404, detail="Category not found")
        return ApiResponse(success=True, message="Categories reordered successfully")

    @admin.put("/categories/{category_id}", tags=["Admin"])
    async def admin_update_category(
        category_id: str, body: UpdateCategoryRequest
    ) -> ApiResponse[Category]:
        category = await app.state.category_service.update_admin(category_id, body)
        if category is None:
            raise HTTPException(status_code=404, detail="Category not found")
        return ApiResponse(success=True, data=category, message="Category updated successfully")

    @admin.delete("/categories/{category_id}", tags=["Admin"])
    async def admin_delete_category(category_id: str) -> ApiResponse[None]:
        if not await app.state.category_service.delete_admin(category_id):
            raise HTTPException(status_code=404, detail="Category not found")
        return ApiResponse(success=True, message="Category deleted successfully")

    @admin.post("/categories/{category_id}/items", status_code=201, tags=["Admin"])
    async def admin_create_item(category_id: str, body: CreateItemRequest) -> ApiResponse[Item]:
        item = await app.state.item_service.create_admin(category_id, body)
        if item is None:
            raise HTTPException(status_code=404, detail="Category not found")
        return ApiResponse(success=True, data=item, message="Item created successfully")

    @admin.get("/categories/{category_id}/items", tags=["Admin"])
    async def admin_list_items(category_id: str) -> ApiResponse[list[Item]]:
        items = await app.state.item_service.get_all_admin(category_id)
        return ApiResponse(success=True, data=items)

    @admin.put("/items/reorder", tags=["Admin"])
    async def admin_reorder_items(body: ReorderRequest) -> ApiResponse[None]:
        if not await app.state.item_service.reorder_admin(body.items):
            raise HTTPException(status_code=404, detail="Item not found")
        return ApiResponse(success=True, message="Items reordered successfully")

    @admin.put("/items/{item_id}", tags=["Admin"])
    async def admin_update_item(item_id: str, body: UpdateItemRequest) -> ApiResponse[Item]:
        item = await app.state.item_service.update_admin(item_id, body)
        if item is None:
            raise HTTPException(status_code=404, detail="Item not found")
        return ApiResponse(success=True, data=item, message="Item updated successfully")

    @admin.delete("/items/{item_id}", tags=["Admin"])
    async def admin_delete_item(item_id: str) -> ApiResponse[None]:
        if not await app.state.item_service.delete_admin(item_id):
            raise HTTPException(status_code=404, detail="Item not found")
        return ApiResponse(success=True, message="Item deleted successfully")

    app.include_router(router)
    app.include_router(admin)

    return app
