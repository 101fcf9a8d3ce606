"""
api/routes/users.py -- Registration and login endpoints.

Routes:
  POST /users/register  -- create an account; 201 with a fresh token
  POST /users/login     -- email/password login; 200 with a fresh token

Both routes are public (no bearer token) and rate-limited per client IP.

Security:
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Unknown email and wrong password return the identical 400 body so the
  response does not reveal which emails are registered.
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from api.limiter import limiter
from api.models import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from auth.models import User
from auth.store import DUPLICATE_EMAIL_MESSAGE, UserStore
from auth.tokens import TokenIssuer, authenticate_user, hash_password_async
from core.errors import ValidationError

logger = logging.getLogger("inventory.api")

BAD_CREDENTIALS_MESSAGE = "Invalid email or password."

router = APIRouter()


@router.post("/users/register", response_model=AuthResponse, status_code=201)
@limiter.limit("10/minute")
async def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Create a user, then issue a token so the client is logged in immediately.

    The pre-check gives the common case a clean 400; the unique index on
    email catches the race where two requests pass the pre-check together.
    """
    user_store: UserStore = request.app.state.user_store
    tokens: TokenIssuer = request.app.state.tokens

    if await user_store.get_by_email(body.email) is not None:
        raise ValidationError(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        name=body.name,
        first_name=body.first_name,
        email=body.email,
        hashed_password=await hash_password_async(body.password),
    )
    user.id = await user_store.create_user(user)
    logger.info("Registered user %s", user.id)

    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(
        message="User created successfully",
        token=tokens.issue(user.id),
        user=UserSummary.from_user(user),
    )


@router.post("/users/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password; return a fresh token."""
    user_store: UserStore = request.app.state.user_store
    tokens: TokenIssuer = request.app.state.tokens

    user = await authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.warning("Failed login attempt")
        raise ValidationError(BAD_CREDENTIALS_MESSAGE)

    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(
        message="Login successful",
        token=tokens.issue(user.id),
        user=UserSummary.from_user(user),
    )
