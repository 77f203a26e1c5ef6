"""
auth/passwords.py -- One-way password hashing and verification.

bcrypt is used directly (no passlib wrapper): salted, with a fixed cost factor.
Both operations raise HashingError (a 400-class error) when bcrypt itself
fails, e.g. on a corrupt stored hash. The user directory folds that into the
same "invalid credentials" error as a wrong password, so a caller cannot tell
the two apart.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import bcrypt

from core.errors import BadRequestError

_BCRYPT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of its input.
_BCRYPT_MAX_BYTES = 72


class HashingError(BadRequestError):
    """bcrypt could not hash the input or parse the stored hash."""


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of the plaintext password.

    Passwords longer than 72 bytes raise HashingError. bcrypt 4.x would
    truncate them silently and 5.x rejects them, so the limit is checked here.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise HashingError("Failed to hash password")
    try:
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise HashingError("Failed to hash password") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if the plaintext matches the hash (constant-time compare).

    Inputs over 72 bytes raise HashingError, matching hash_password().
    """
    encoded = password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise HashingError("Failed to verify password")
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise HashingError("Failed to verify password") from exc


# Timing equalization: login runs one bcrypt check against this hash when the
# email is unknown, so response time does not reveal whether an account exists.
DUMMY_HASH: str = hash_password("postgate_timing_dummy")
