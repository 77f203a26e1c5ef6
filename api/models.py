"""
API request and response models for postgate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
posts/models.py, which own the internal domain representation. Route handlers
map between the two.

Validation stops at types and presence (plus non-empty credentials). Content is
stored as submitted.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from posts.models import Post

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    username: str
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    phonenumber: str


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str
    password: str


class PostCreate(BaseModel):
    """Request body for POST /posts."""

    title: str
    content: str


class PostUpdate(BaseModel):
    """Request body for PUT /posts/{post_id}. Omitted fields keep their stored value."""

    title: Optional[str] = None
    content: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a User. The password hash is never serialized."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str
    phonenumber: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            phonenumber=user.phonenumber,
        )


class PostResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str
    author_id: str

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
        )


class ErrorDetail(BaseModel):
    """Error payload: a status-class code plus a short human-readable message."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
