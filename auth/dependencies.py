"""
auth/dependencies.py -- Turn an inbound request's credentials into a caller identity.

extract_identity() is the whole gate: a pure function from a header mapping to
the verified token subject, or an AuthenticationError. get_caller_identity()
adapts it to FastAPI's Depends() so any route that declares it runs the gate
before its own logic.

Only one transport is accepted: "Authorization: Bearer <token>". The prefix
match is exact and case-sensitive. Whatever goes wrong inside token
verification, the caller sees the same "Invalid token" message.

Layer rule: no imports from api/ or posts/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import Request

from auth.tokens import TokenService
from core.errors import AuthenticationError

_BEARER_PREFIX = "Bearer "


def _is_visible_ascii(value: str) -> bool:
    # Header values outside visible ASCII (plus tab) are not valid credentials.
    return all(c == "\t" or " " <= c <= "~" for c in value)


def extract_identity(headers: Mapping[str, str], tokens: TokenService) -> str:
    """Return the caller identity carried by the Authorization header.

    Raises AuthenticationError when the header is absent, is not a visible-ASCII
    "Bearer <token>" value, or the token fails verification.
    """
    auth_header = headers.get("Authorization")
    if auth_header is None:
        raise AuthenticationError("Missing authorization header")
    if not _is_visible_ascii(auth_header) or not auth_header.startswith(_BEARER_PREFIX):
        raise AuthenticationError("Invalid authorization header")

    token = auth_header[len(_BEARER_PREFIX) :]
    try:
        return tokens.verify(token)
    except AuthenticationError:
        raise AuthenticationError("Invalid token") from None


def get_caller_identity(request: Request) -> str:
    """Require a valid bearer token. Raises AuthenticationError (401) otherwise.

    Use as a FastAPI dependency:
        @router.post("/posts")
        def route(caller: str = Depends(get_caller_identity)): ...
    """
    return extract_identity(request.headers, request.app.state.token_service)
