"""Unit tests for auth/dependencies.extract_identity -- the bearer-token gate.

extract_identity() takes any header mapping, so these tests use plain dicts
and never start the app.
"""

from __future__ import annotations

import pytest

from auth.dependencies import extract_identity
from auth.tokens import TokenService
from core.errors import AuthenticationError


class TestExtractIdentity:
    def test_valid_bearer_token(self, tokens: TokenService) -> None:
        headers = {"Authorization": f"Bearer {tokens.issue('user-1')}"}
        assert extract_identity(headers, tokens) == "user-1"

    def test_missing_header(self, tokens: TokenService) -> None:
        with pytest.raises(AuthenticationError, match="Missing authorization header"):
            extract_identity({}, tokens)

    @pytest.mark.parametrize(
        "value",
        [
            "Token abc",
            "bearer abc",  # prefix match is case-sensitive
            "Bearer",  # no space, no token
            "Basic dXNlcjpwdw==",
        ],
    )
    def test_wrong_scheme(self, tokens: TokenService, value: str) -> None:
        with pytest.raises(AuthenticationError, match="Invalid authorization header"):
            extract_identity({"Authorization": value}, tokens)

    def test_raw_token_without_prefix(self, tokens: TokenService) -> None:
        with pytest.raises(AuthenticationError, match="Invalid authorization header"):
            extract_identity({"Authorization": tokens.issue("user-1")}, tokens)

    def test_non_ascii_header(self, tokens: TokenService) -> None:
        with pytest.raises(AuthenticationError, match="Invalid authorization header"):
            extract_identity({"Authorization": "Bearer töken"}, tokens)

    def test_bad_token_is_generic(self, tokens: TokenService) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            extract_identity({"Authorization": "Bearer not.a.jwt"}, tokens)
        assert exc_info.value.message == "Invalid token"
        assert exc_info.value.status_code == 401
