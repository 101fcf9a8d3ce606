"""
API request and response models for the Inventory REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
inventory/models.py, which own the internal domain representation. Route
handlers map between the two.

JSON field names follow the public contract (camelCase "firstName",
"categoryId"); Python attribute names are snake_case with aliases.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from inventory.models import Category, Product

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

_BCRYPT_MAX_BYTES = 72

_NonEmpty = Annotated[str, Field(min_length=1, max_length=255)]
_Text = Annotated[str, Field(min_length=1, max_length=2000)]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/users/register."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: _NonEmpty
    first_name: _NonEmpty = Field(alias="firstName")
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=8)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """bcrypt rejects input longer than 72 bytes; count bytes, not characters."""
        if len(value.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {_BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /api/users/login.

    No format rules beyond presence: a malformed email simply fails to match.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    email: _NonEmpty
    password: str = Field(min_length=1, max_length=1024)


class UserSummary(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    first_name: str = Field(alias="firstName")
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, name=user.name, first_name=user.first_name, email=user.email)


class AuthResponse(BaseModel):
    """Response for register (201) and login (200)."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str
    user: UserSummary


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class CategoryIn(BaseModel):
    """Request body for POST /api/categories and PUT /api/categories/{id}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: _NonEmpty
    description: _Text

    def to_domain(self) -> Category:
        return Category(title=self.title, description=self.description)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str

    @classmethod
    def from_domain(cls, category: Category) -> "CategoryResponse":
        return cls(id=category.id, title=category.title, description=category.description)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class ProductIn(BaseModel):
    """Request body for POST /api/products and PUT /api/products/{id}.

    category_id must be shaped like an id; whether that category exists is
    not checked.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: _NonEmpty
    description: _Text
    category_id: str = Field(alias="categoryId", pattern=OBJECT_ID_PATTERN)
    price: float = Field(allow_inf_nan=False)

    def to_domain(self) -> Product:
        return Product(
            name=self.name,
            description=self.description,
            category_id=self.category_id,
            price=self.price,
        )


class ProductRecord(BaseModel):
    """A product as stored: categoryId is the raw reference."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str
    category_id: str = Field(alias="categoryId")
    price: float

    @classmethod
    def from_domain(cls, product: Product) -> "ProductRecord":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category_id=product.category_id,
            price=product.price,
        )


class CategoryRef(BaseModel):
    """Resolved category reference. title is None when the category is gone."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None


class ProductResponse(BaseModel):
    """A product with its category resolved to {id, title}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str
    category: CategoryRef = Field(alias="categoryId")
    price: float

    @classmethod
    def from_domain(cls, product: Product, titles: dict[str, str]) -> "ProductResponse":
        """Build a response, resolving the category title from a prefetched id->title map."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category=CategoryRef(id=product.category_id, title=titles.get(product.category_id)),
            price=product.price,
        )


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Confirmation body for deletes."""

    model_config = ConfigDict(frozen=True)

    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str
