"""
auth/dependencies.py -- Authentication gate for FastAPI routes.

One auth method: the Authorization: Bearer <token> header.

  header missing / not "Bearer <token>"  -> MissingTokenError (401, "no token")
  token fails TokenIssuer.verify()       -> InvalidTokenError (403, "invalid token")
  token valid                            -> user id returned to the handler and
                                            stored on request.state.user_id

The gate checks the token only; it does not re-read the user record.

Layer rule: may import from fastapi (Request, APIRoute) because this module
plugs into FastAPI routing. No imports from api/ or inventory/.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Optional

from fastapi import Request, Response
from fastapi.routing import APIRoute

from auth.tokens import TokenIssuer
from core.errors import InvalidTokenError, MissingTokenError

_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header value, or None if malformed."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != _SCHEME:
        return None
    return parts[1]


def require_user_id(request: Request) -> str:
    """Require a valid bearer token; return the authenticated user id.

    Whole resources are gated through AuthenticatedRoute. For a single
    handler it also works as a dependency:
        async def route(user_id: str = Depends(require_user_id)): ...
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise MissingTokenError()

    tokens: TokenIssuer = request.app.state.tokens
    user_id = tokens.verify(token)
    if user_id is None:
        raise InvalidTokenError()

    request.state.user_id = user_id
    return user_id


class AuthenticatedRoute(APIRoute):
    """APIRoute that runs require_user_id() before the request body is read.

    A router-level Depends() is solved only after FastAPI has parsed and
    validated the body, so a request with no token and a broken body would
    get a 400 instead of a 401. Gating in the route handler keeps the auth
    outcome independent of the body:

        router = APIRouter(route_class=AuthenticatedRoute)
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def gated_handler(request: Request) -> Response:
            require_user_id(request)
            return await handler(request)

        return gated_handler
