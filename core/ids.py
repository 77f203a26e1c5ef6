"""
core/ids.py -- Opaque record identifiers.

Ids are uuid4 hex strings (32 lowercase hex chars) assigned by the stores on
insert. Path parameters and token subjects are parsed back through parse_id()
so a malformed value is a 400, never a query against the database.
"""

import re
import uuid

from core.errors import BadRequestError

_ID_RE = re.compile(r"[0-9a-fA-F]{32}")


def new_id() -> str:
    return uuid.uuid4().hex


def parse_id(raw: str, message: str = "Invalid ID") -> str:
    """Return the normalized id, or raise BadRequestError(message)."""
    if not isinstance(raw, str) or not _ID_RE.fullmatch(raw):
        raise BadRequestError(message)
    return raw.lower()
