"""
auth/store.py -- MongoDB persistence layer for users.

Pattern: Repository + Data Mapper (same as inventory/store.py).
UserStore is the repository; _doc_to_user is the mapper. Route and
dependency code never touches collections directly.

Uniqueness: a unique index on "email" is created by ensure_indexes() at
startup. create_user() turns the resulting DuplicateKeyError into
ValidationError, so two racing registrations for one email still leave a
single record even though both passed the get_by_email() pre-check.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from auth.models import User
from core.errors import StorageError, ValidationError

logger = logging.getLogger("inventory.store")

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists."


class UserStore:
    """Repository for User documents.

    Usage:
        store = UserStore(db)
        await store.ensure_indexes()
        user_id = await store.create_user(User(name=..., first_name=..., email=..., hashed_password=...))
        user = await store.get_by_email("ada@example.com")
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._users = db["users"]

    async def ensure_indexes(self) -> None:
        try:
            await self._users.create_index("email", unique=True)
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        logger.info("users: unique email index ensured")

    async def create_user(self, user: User) -> str:
        """Insert a new user and return its assigned id.

        Raises ValidationError if the email is already registered.
        """
        try:
            result = await self._users.insert_one(
                {
                    "name": user.name,
                    "firstName": user.first_name,
                    "email": user.email,
                    "password": user.hashed_password,
                }
            )
        except DuplicateKeyError as exc:
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE) from exc
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return str(result.inserted_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        try:
            doc = await self._users.find_one({"email": email})
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc
        return _doc_to_user(doc) if doc is not None else None


# ---------------------------------------------------------------------------
# Document mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _doc_to_user(doc: dict) -> User:
    return User(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        first_name=doc.get("firstName", ""),
        email=doc["email"],
        hashed_password=doc.get("password", ""),
    )
