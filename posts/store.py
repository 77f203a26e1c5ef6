"""
posts/store.py -- SQLAlchemy-backed persistence layer for blog posts.

Uses SQLAlchemy Core (not ORM) so the Post dataclass in posts/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. PostStore is the repository; _row_to_post is
the mapper. The service layer never touches SQL directly.

The store has no notion of ownership: update_post() and delete_post() act on
whatever id they are given. ContentStore checks ownership before calling them.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = PostStore("sqlite:///postgate.db")
    post_id = store.create_post(Post(title="Hi", content="World", author_id=uid))
    post = store.get_post(post_id)
    store.update_post(post_id, title="Hi again", content="World")
    store.delete_post(post_id)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.db import make_engine
from core.ids import new_id
from posts.models import Post

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_posts = Table(
    "posts",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("title", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("author_id", String(32), nullable=False),  # users.id, not a managed FK
    Column("created_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PostStore:
    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    def create_post(self, post: Post) -> str:
        """Insert a post and return its assigned id."""
        post_id = new_id()
        with self.engine.connect() as conn:
            conn.execute(
                _posts.insert().values(
                    id=post_id,
                    title=post.title,
                    content=post.content,
                    author_id=post.author_id,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return post_id

    def get_post(self, post_id: str) -> Optional[Post]:
        """Return the post with this id, or None."""
        with self.engine.connect() as conn:
            row = conn.execute(_posts.select().where(_posts.c.id == post_id)).fetchone()
        return _row_to_post(row) if row is not None else None

    def list_posts(self) -> list[Post]:
        """Return every post. No ordering, no pagination."""
        with self.engine.connect() as conn:
            result = conn.execute(_posts.select())
            return [_row_to_post(row) for row in result]

    def update_post(self, post_id: str, title: str, content: str) -> bool:
        """Overwrite title and content. Returns True if a row was updated.

        author_id is never written here; ownership is fixed at insert.
        """
        with self.engine.connect() as conn:
            result = conn.execute(_posts.update().where(_posts.c.id == post_id).values(title=title, content=content))
            conn.commit()
        return result.rowcount > 0

    def delete_post(self, post_id: str) -> bool:
        """Permanently delete a post. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_posts.delete().where(_posts.c.id == post_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_post(row) -> Post:
    return Post(
        id=row.id,
        title=row.title,
        content=row.content,
        author_id=row.author_id,
        created_at=row.created_at,
    )
