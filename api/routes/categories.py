"""
api/routes/categories.py -- Category CRUD routes.

Routes:
  GET    /categories        -- list every category
  POST   /categories        -- create a category
  PUT    /categories/{id}   -- replace title and description
  DELETE /categories/{id}   -- delete; products referencing it are left as-is
"""

from fastapi import APIRouter, Request

from api.models import CategoryIn, CategoryResponse, MessageResponse
from auth.dependencies import AuthenticatedRoute
from core.errors import NotFoundError
from inventory.store import InventoryStore

CATEGORY_NOT_FOUND = "Category not found"

router = APIRouter(route_class=AuthenticatedRoute)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(request: Request) -> list[CategoryResponse]:
    store: InventoryStore = request.app.state.inventory
    return [CategoryResponse.from_domain(c) for c in await store.list_categories()]


@router.post("/categories", response_model=CategoryResponse, status_code=201)
async def create_category(request: Request, body: CategoryIn) -> CategoryResponse:
    store: InventoryStore = request.app.state.inventory
    created = await store.create_category(body.to_domain())
    return CategoryResponse.from_domain(created)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(request: Request, category_id: str, body: CategoryIn) -> CategoryResponse:
    store: InventoryStore = request.app.state.inventory
    updated = await store.update_category(category_id, body.to_domain())
    if updated is None:
        raise NotFoundError(CATEGORY_NOT_FOUND)
    return CategoryResponse.from_domain(updated)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(request: Request, category_id: str) -> MessageResponse:
    store: InventoryStore = request.app.state.inventory
    if not await store.delete_category(category_id):
        raise NotFoundError(CATEGORY_NOT_FOUND)
    return MessageResponse(message="Category deleted successfully")
