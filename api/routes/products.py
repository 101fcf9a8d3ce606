"""
api/routes/products.py -- Product CRUD routes.

Routes:
  GET    /products        -- list products, category resolved to {id, title}
  POST   /products        -- create a product (categoryId returned raw)
  PUT    /products/{id}   -- replace editable fields, category resolved
  DELETE /products/{id}   -- delete a product

Category resolution:
  Products store only categoryId. After the primary fetch, the handler
  collects the distinct category ids and loads their titles with one
  InventoryStore.get_category_titles() call. A product whose category was
  deleted still reports its stale id, with title null.
"""

from fastapi import APIRouter, Request

from api.models import MessageResponse, ProductIn, ProductRecord, ProductResponse
from auth.dependencies import AuthenticatedRoute
from core.errors import NotFoundError
from inventory.store import InventoryStore

PRODUCT_NOT_FOUND = "Product not found"

router = APIRouter(route_class=AuthenticatedRoute)


@router.get("/products", response_model=list[ProductResponse])
async def list_products(request: Request) -> list[ProductResponse]:
    store: InventoryStore = request.app.state.inventory
    products = await store.list_products()
    titles = await store.get_category_titles({p.category_id for p in products})
    return [ProductResponse.from_domain(p, titles) for p in products]


@router.post("/products", response_model=ProductRecord, status_code=201)
async def create_product(request: Request, body: ProductIn) -> ProductRecord:
    """Create a product. categoryId is not checked against existing categories."""
    store: InventoryStore = request.app.state.inventory
    created = await store.create_product(body.to_domain())
    return ProductRecord.from_domain(created)


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(request: Request, product_id: str, body: ProductIn) -> ProductResponse:
    store: InventoryStore = request.app.state.inventory
    updated = await store.update_product(product_id, body.to_domain())
    if updated is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    titles = await store.get_category_titles([updated.category_id])
    return ProductResponse.from_domain(updated, titles)


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(request: Request, product_id: str) -> MessageResponse:
    store: InventoryStore = request.app.state.inventory
    if not await store.delete_product(product_id):
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return MessageResponse(message="Product deleted successfully")
