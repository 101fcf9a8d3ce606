"""
inventory/store.py -- MongoDB persistence layer for categories and products.

Pattern: Repository + Data Mapper (same as auth/store.py).
InventoryStore is the repository; _doc_to_category / _doc_to_product are the
mappers. Route code never touches collections directly.

Collections:
  categories  {_id, title, description}
  products    {_id, name, description, categoryId: ObjectId, price}

Ids cross the API boundary as 24-char hex strings. A string that is not a
valid ObjectId cannot name an existing document, so lookups by such ids
behave exactly like a miss (None / False) instead of raising.

Referential integrity between products and categories is not enforced: no
existence check on write, no cascade or block on delete.

Every PyMongoError is re-raised as core.errors.StorageError.

Layer rule: no imports from api/ or auth/.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from core.errors import StorageError
from inventory.models import Category, Product


def _to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class InventoryStore:
    """Repository for Category and Product documents.

    Usage:
        store = InventoryStore(db)
        category = await store.create_category(Category(title="Tools", description="Hand tools"))
        product = await store.create_product(Product(name="Hammer", description="16oz",
                                                     category_id=category.id, price=12.5))
        titles = await store.get_category_titles([product.category_id])
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._categories = db["categories"]
        self._products = db["products"]

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> list[Category]:
        try:
            docs = await self._categories.find().to_list(length=None)
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return [_doc_to_category(d) for d in docs]

    async def create_category(self, category: Category) -> Category:
        try:
            result = await self._categories.insert_one(
                {"title": category.title, "description": category.description}
            )
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return Category(id=str(result.inserted_id), title=category.title, description=category.description)

    async def update_category(self, category_id: str, category: Category) -> Optional[Category]:
        """Overwrite title and description. Returns the updated record, or None if not found."""
        oid = _to_object_id(category_id)
        if oid is None:
            return None
        try:
            doc = await self._categories.find_one_and_update(
                {"_id": oid},
                {"$set": {"title": category.title, "description": category.description}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return _doc_to_category(doc) if doc is not None else None

    async def delete_category(self, category_id: str) -> bool:
        """Delete a category. Returns False if not found. Products are left untouched."""
        oid = _to_object_id(category_id)
        if oid is None:
            return False
        try:
            result = await self._categories.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return result.deleted_count > 0

    async def get_category_titles(self, category_ids: Iterable[str]) -> dict[str, str]:
        """Map each existing category id in category_ids to its title.

        Ids of deleted (or never-existing) categories are simply absent from
        the result. One $in query regardless of how many ids are passed.
        """
        oids = {oid for oid in (_to_object_id(c) for c in category_ids) if oid is not None}
        if not oids:
            return {}
        try:
            docs = await self._categories.find({"_id": {"$in": list(oids)}}, {"title": 1}).to_list(length=None)
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return {str(d["_id"]): d.get("title", "") for d in docs}

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        try:
            docs = await self._products.find().to_list(length=None)
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return [_doc_to_product(d) for d in docs]

    async def get_product(self, product_id: str) -> Optional[Product]:
        oid = _to_object_id(product_id)
        if oid is None:
            return None
        try:
            doc = await self._products.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return _doc_to_product(doc) if doc is not None else None

    async def create_product(self, product: Product) -> Product:
        """Insert a product. category_id must be a valid ObjectId string (checked by the API model)."""
        try:
            result = await self._products.insert_one(_product_fields(product))
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return Product(
            id=str(result.inserted_id),
            name=product.name,
            description=product.description,
            category_id=product.category_id,
            price=product.price,
        )

    async def update_product(self, product_id: str, product: Product) -> Optional[Product]:
        """Overwrite the editable fields. Returns the updated record, or None if not found."""
        oid = _to_object_id(product_id)
        if oid is None:
            return None
        try:
            doc = await self._products.find_one_and_update(
                {"_id": oid},
                {"$set": _product_fields(product)},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return _doc_to_product(doc) if doc is not None else None

    async def delete_product(self, product_id: str) -> bool:
        oid = _to_object_id(product_id)
        if oid is None:
            return False
        try:
            result = await self._products.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return result.deleted_count > 0


# ---------------------------------------------------------------------------
# Document mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _product_fields(product: Product) -> dict:
    return {
        "name": product.name,
        "description": product.description,
        "categoryId": ObjectId(product.category_id),
        "price": product.price,
    }


def _doc_to_category(doc: dict) -> Category:
    return Category(
        id=str(doc["_id"]),
        title=doc.get("title", ""),
        description=doc.get("description", ""),
    )


def _doc_to_product(doc: dict) -> Product:
    return Product(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        description=doc.get("description", ""),
        category_id=str(doc.get("categoryId", "")),
        price=doc.get("price", 0),
    )
