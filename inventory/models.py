"""
inventory/models.py -- Domain dataclasses for categories and products.

These are pure data containers with zero logic. Persistence lives in
inventory/store.py; the category lookup for product listings lives in the
product routes.

id is None before the record is written to the database.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    title: str
    description: str
    id: Optional[str] = None


@dataclass
class Product:
    """A stocked item.

    category_id references a Category id but is never checked on write, and
    deleting the category leaves it dangling.
    """

    name: str
    description: str
    category_id: str
    price: float
    id: Optional[str] = None
