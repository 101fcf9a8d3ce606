"""
auth/tokens.py -- JWT issuing/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the user id ("id") plus "iat"
       and "exp" claims, expiring one hour after issue by default. verify()
       returns None on any failure -- the auth gate turns that into a 403.
       There is no refresh: an expired token means logging in again.

  Signing key: TokenIssuer is built once at startup from Settings and kept on
       app.state. Nothing in this module reads configuration at import time.

  Passwords: bcrypt directly (no passlib wrapper). Every hash uses a fresh
       random salt. The _DUMMY_HASH constant enables timing equalization in
       authenticate_user() so response time does not reveal whether an email
       is registered.

  bcrypt is CPU-bound. The async helpers run it in Starlette's threadpool so
       a login does not stall every other request on the event loop.

Layer rule: no imports from api/ or inventory/. Import from core/ is allowed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

import bcrypt
from jose import JWTError, jwt
from starlette.concurrency import run_in_threadpool

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore
    from core.config import Settings

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt only accepts 72 bytes of input; api/models.py rejects longer
    passwords before they reach this function.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


async def hash_password_async(plain: str) -> str:
    return await run_in_threadpool(hash_password, plain)


async def verify_password_async(plain: str, hashed: str) -> bool:
    return await run_in_threadpool(verify_password, plain, hashed)


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("inventory_timing_dummy")


# ---------------------------------------------------------------------------
# JWT issue / verify
# ---------------------------------------------------------------------------


class TokenIssuer:
    """Signs and verifies bearer tokens with a process-wide secret.

    Usage:
        tokens = TokenIssuer.from_settings(settings)
        token = tokens.issue(user_id)
        tokens.verify(token)  # -> user_id or None

    `now` may be passed to both methods; it defaults to the current UTC time.
    """

    def __init__(self, secret: str, expire_seconds: int = 3600) -> None:
        self._secret = secret
        self.expire_seconds = expire_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(settings.jwt_secret, settings.token_expire_seconds)

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Encode a signed JWT for user_id, valid for expire_seconds."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + timedelta(seconds=self.expire_seconds)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str, now: Optional[datetime] = None) -> Optional[str]:
        """Return the user id carried by token, or None if it is not valid at `now`.

        Expiry is checked here rather than by jose so that `now` is honoured.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            return None
        user_id = payload.get("id")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not user_id or not isinstance(exp, (int, float)):
            return None
        current = now or datetime.now(timezone.utc)
        if current.timestamp() >= exp:
            return None
        return user_id


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


async def authenticate_user(store: UserStore, email: str, password: str) -> Optional[User]:
    """Authenticate an email/password login with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = await store.get_by_email(email)
    if user is None:
        await verify_password_async(password, _DUMMY_HASH)
        return None
    if not await verify_password_async(password, user.hashed_password):
        return None
    return user
