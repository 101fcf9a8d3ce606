"""
auth/models.py -- Domain dataclass for the authentication entity.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in inventory/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """A registered identity.

    email is the login key and is unique across the users collection.
    hashed_password is a bcrypt hash; the plaintext is never stored.
    first_name maps to the "firstName" document field.

    id is None before the record is written to the database.
    """

    name: str
    first_name: str
    email: str
    hashed_password: str
    id: Optional[str] = None
