"""Unit tests for core/config.py -- Settings validation.

_env_file=None keeps a developer's local .env out of these tests.
"""

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_missing_secret_is_fatal(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError, match="JWT_SECRET is required"):
        Settings(_env_file=None)


def test_secret_read_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s" * 40)
    settings = Settings(_env_file=None)
    assert settings.jwt_secret == "s" * 40
    assert settings.token_expire_seconds == 3600


def test_short_secret_is_accepted_with_warning(monkeypatch, caplog):
    monkeypatch.setenv("JWT_SECRET", "short")
    with caplog.at_level("WARNING", logger="postgate.config"):
        settings = Settings(_env_file=None)
    assert settings.jwt_secret == "short"
    assert "shorter than 32 characters" in caplog.text


def test_non_positive_expiry_rejected(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s" * 40)
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
