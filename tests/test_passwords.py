"""Unit tests for auth/passwords.py -- bcrypt hashing and verification.

Covers:
- hash_password() never returns the plaintext and salts every hash
- verify_password() accepts the right password and rejects a wrong one
- a corrupt stored hash raises HashingError (a 400-class error)
"""

import pytest

from auth.passwords import DUMMY_HASH, HashingError, hash_password, verify_password
from core.errors import BadRequestError


def test_hash_is_not_plaintext():
    hashed = hash_password("pw")
    assert hashed != "pw"
    assert hashed.startswith("$2")


def test_same_password_hashes_differently():
    """Each hash carries its own random salt."""
    assert hash_password("pw") != hash_password("pw")


def test_verify_round_trip():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong horse", hashed) is False


def test_dummy_hash_is_a_valid_bcrypt_hash():
    assert verify_password("anything", DUMMY_HASH) is False


def test_corrupt_hash_raises_hashing_error():
    with pytest.raises(HashingError):
        verify_password("pw", "not-a-bcrypt-hash")


def test_hashing_error_is_bad_request():
    assert issubclass(HashingError, BadRequestError)
    assert HashingError("x").status_code == 400


def test_password_at_72_bytes_is_accepted():
    hashed = hash_password("a" * 72)
    assert verify_password("a" * 72, hashed) is True


def test_password_over_72_bytes_is_rejected():
    """Rejected outright, never truncated to a prefix that would also verify."""
    with pytest.raises(HashingError, match="Failed to hash password"):
        hash_password("a" * 73)


def test_multibyte_password_counts_bytes_not_characters():
    # 25 characters, 75 bytes in UTF-8
    with pytest.raises(HashingError):
        hash_password("€" * 25)


def test_verify_rejects_over_72_bytes():
    hashed = hash_password("a" * 72)
    with pytest.raises(HashingError, match="Failed to verify password"):
        verify_password("a" * 73, hashed)
