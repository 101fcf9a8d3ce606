"""
core/errors.py -- Error taxonomy for the Inventory API.

Every failure a handler can surface is one of these. Each class carries the
HTTP status it maps to; api/main.py registers a single exception handler for
InventoryError that renders {"error": message} with that status.

  ValidationError  400  duplicate email, bad credentials, missing/invalid field
  AuthError        401  no bearer token (MissingTokenError)
                   403  bad/expired token (InvalidTokenError)
  NotFoundError    404  unknown id on update/delete
  StorageError     500  the document store failed

Layer rule: core/ is the kernel. No imports from api/, auth/, or inventory/.
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    status_code = 400


class AuthError(InventoryError):
    status_code = 401


class MissingTokenError(AuthError):
    status_code = 401

    def __init__(self, message: str = "no token") -> None:
        super().__init__(message)


class InvalidTokenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "invalid token") -> None:
        super().__init__(message)


class NotFoundError(InventoryError):
    status_code = 404


class StorageError(InventoryError):
    status_code = 500
