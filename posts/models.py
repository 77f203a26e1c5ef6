"""
posts/models.py -- Domain dataclass for blog posts.

Pure data container with zero logic. Ownership rules live in posts/service.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Post:
    """A text post owned by one user.

    author_id is the id of the user who created the post. It is written once on
    insert and no store method updates it, so ownership never changes.

    id is None before the record is written to the database.
    """

    title: str
    content: str
    author_id: str
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
