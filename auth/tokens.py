"""
auth/tokens.py -- Signed, time-bounded identity tokens.

JWT via python-jose, HS256. Claims are exactly {"sub": <user id>, "exp": <unix
seconds>}. The signing key comes from the Settings object handed to
TokenService at startup -- there is no module-level secret.

Expiry is checked here against the service's own clock rather than by jose, so
tests can inject a fake clock and "exp at or before now" is rejected with no
leeway. Every verification failure raises the same AuthenticationError; the
cause is only logged at DEBUG.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from jose import jwt
from jose.exceptions import JOSEError

from core.config import Settings
from core.errors import AuthenticationError

logger = logging.getLogger("postgate.auth")

_ALGORITHM = "HS256"

_INVALID_TOKEN = "Invalid token"


class TokenService:
    """Issue and verify identity tokens.

    Usage:
        tokens = TokenService(get_settings())
        token = tokens.issue(user.id)
        subject = tokens.verify(token)   # raises AuthenticationError
    """

    def __init__(self, settings: Settings, clock: Callable[[], float] = time.time) -> None:
        self._secret = settings.jwt_secret
        self._expire_seconds = settings.token_expire_seconds
        self._clock = clock

    def issue(self, subject: str) -> str:
        """Return a token asserting subject, valid for token_expire_seconds."""
        claims = {
            "sub": subject,
            "exp": int(self._clock()) + self._expire_seconds,
        }
        try:
            return jwt.encode(claims, self._secret, algorithm=_ALGORITHM)
        except JOSEError as exc:
            raise AuthenticationError("Failed to create token") from exc

    def verify(self, token: str) -> str:
        """Return the token's subject, or raise AuthenticationError."""
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False},
            )
        except JOSEError as exc:
            logger.debug("Token rejected: %s", exc)
            raise AuthenticationError(_INVALID_TOKEN) from exc

        subject = claims.get("sub")
        exp = claims.get("exp")
        if not isinstance(subject, str) or not isinstance(exp, int) or isinstance(exp, bool):
            logger.debug("Token rejected: missing or malformed claims")
            raise AuthenticationError(_INVALID_TOKEN)
        if exp <= self._clock():
            logger.debug("Token rejected: expired at %d", exp)
            raise AuthenticationError(_INVALID_TOKEN)
        return subject
