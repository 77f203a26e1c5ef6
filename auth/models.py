"""
auth/models.py -- Domain dataclass for user accounts.

Pattern: Data class (pure data container, zero logic). Mirrors posts/models.py
-- dataclasses own domain shape; stores and services do the work.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    password_hash is the bcrypt digest; the plaintext password never reaches
    this object. email is unique across all users (unique index on users.email).

    id is None before the record is written to the database.
    """

    username: str
    email: str
    password_hash: str
    phonenumber: str
    id: str | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
