"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as posts/store.py).
UserStore is the repository; _row_to_user is the mapper.
Service and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Email uniqueness:
  The unique index on users.email is created by ensure_email_index(), not by
  create_all(). The lifespan runs it as a background task at startup. The
  index is the authoritative guard: UserDirectory's existence check and the
  insert are two separate statements, so two concurrent registrations can both
  pass the check. The second insert then fails with IntegrityError, which
  UserDirectory translates to "Email already in use".

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, text
from sqlalchemy.engine import Engine

from auth.models import User
from core.db import make_engine
from core.ids import new_id

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("username", String(255), nullable=False),
    Column("password_hash", Text, nullable=False),
    Column("email", String(255), nullable=False),
    Column("phonenumber", String(64), nullable=False),
    Column("created_at", String(32), nullable=False),
    # Note: UNIQUE(email) is created by ensure_email_index(), not here.
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///postgate.db")
        store.ensure_email_index()
        user_id = store.create_user(User(username="alice", email="a@x.com", ...))
        user = store.get_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    def ensure_email_index(self) -> None:
        """Create the unique index on users.email if it does not exist.

        Idempotent. Fails with IntegrityError if duplicate emails are already
        stored; the caller logs that and keeps serving.
        """
        with self.engine.connect() as conn:
            conn.execute(text("CREATE UNIQUE INDEX IF NOT EXISTS uq_users_email ON users (email)"))
            conn.commit()

    def create_user(self, user: User) -> str:
        """Insert a new user and return its assigned id.

        Raises sqlalchemy.exc.IntegrityError if the email is already taken and
        the unique index exists.
        """
        user_id = new_id()
        with self.engine.connect() as conn:
            conn.execute(
                _users.insert().values(
                    id=user_id,
                    username=user.username,
                    password_hash=user.password_hash,
                    email=user.email,
                    phonenumber=user.phonenumber,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return user_id

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def ping(self) -> bool:
        """Return True if the database answers a trivial query. Used by /health."""
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        phonenumber=row.phonenumber,
        created_at=row.created_at,
    )
