"""
api/routes/posts.py -- Blog post CRUD routes.

Routes:
  POST   /posts             -- create a post as the caller (bearer token)
  GET    /posts             -- list all posts (public)
  GET    /posts/{post_id}   -- one post (public)
  PUT    /posts/{post_id}   -- partial update, owner only (bearer token)
  DELETE /posts/{post_id}   -- delete, owner only (bearer token); 204

Write routes declare Depends(get_caller_identity), so the token is checked
before the handler body runs. The ownership check itself lives in
posts.service.ContentStore, not here.
"""

from fastapi import APIRouter, Depends, Request, Response

from api.models import PostCreate, PostResponse, PostUpdate
from auth.dependencies import get_caller_identity
from posts.service import ContentStore

# Auth policy:
# - GET    /posts, /posts/{id}: public
# - POST   /posts:              requires bearer token
# - PUT    /posts/{id}:         requires bearer token + ownership check in ContentStore
# - DELETE /posts/{id}:         requires bearer token + ownership check in ContentStore
router = APIRouter()


@router.post("/posts", response_model=PostResponse)
def create_post(
    request: Request,
    body: PostCreate,
    caller: str = Depends(get_caller_identity),
) -> PostResponse:
    """Create a post authored by the authenticated caller."""
    content: ContentStore = request.app.state.content
    post = content.create(caller, body.title, body.content)
    return PostResponse.from_post(post)


@router.get("/posts", response_model=list[PostResponse])
def list_posts(request: Request) -> list[PostResponse]:
    """Return every post. Unpaginated; order is not guaranteed."""
    content: ContentStore = request.app.state.content
    return [PostResponse.from_post(p) for p in content.list()]


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(request: Request, post_id: str) -> PostResponse:
    content: ContentStore = request.app.state.content
    return PostResponse.from_post(content.get(post_id))


@router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(
    request: Request,
    post_id: str,
    body: PostUpdate,
    caller: str = Depends(get_caller_identity),
) -> PostResponse:
    """Update title and/or content. Only the post's author may do this."""
    content: ContentStore = request.app.state.content
    post = content.update(caller, post_id, title=body.title, content=body.content)
    return PostResponse.from_post(post)


@router.delete("/posts/{post_id}", status_code=204)
def delete_post(
    request: Request,
    post_id: str,
    caller: str = Depends(get_caller_identity),
) -> Response:
    """Delete a post. Only the post's author may do this."""
    content: ContentStore = request.app.state.content
    content.delete(caller, post_id)
    return Response(status_code=204)
