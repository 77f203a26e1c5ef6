"""
posts/service.py -- Ownership-enforced CRUD over PostStore.

Reads are public. Writes take the caller identity produced by
auth.dependencies.get_caller_identity and compare it against the stored
author_id before touching anything.

Update and delete are load -> check owner -> write (-> re-read) sequences with
no transaction around them. Concurrent requests from the owner on the same post
interleave with last-write-wins. If a delete lands between an update's write
and its re-read, the update reports "Post not found after update" instead of
retrying.
"""

import logging
from typing import Optional

from core.errors import AuthorizationError, BadRequestError, NotFoundError
from core.ids import parse_id
from posts.models import Post
from posts.store import PostStore

logger = logging.getLogger("postgate.posts")


class ContentStore:
    def __init__(self, store: PostStore) -> None:
        self._store = store

    def create(self, caller_identity: str, title: str, content: str) -> Post:
        """Create a post authored by the caller and return it with its id."""
        try:
            author_id = parse_id(caller_identity, "Invalid user ID")
        except BadRequestError:
            # Token subjects are user ids minted at login; reaching here means
            # a token was signed for something that is not a user id.
            logger.error("Caller identity %r is not a valid user id", caller_identity)
            raise

        post = Post(title=title, content=content, author_id=author_id)
        post.id = self._store.create_post(post)
        logger.info("Post %s created by %s", post.id, author_id)
        return post

    def list(self) -> list[Post]:
        return self._store.list_posts()

    def get(self, post_id: str) -> Post:
        """Return the post, or raise BadRequestError / NotFoundError."""
        post = self._store.get_post(parse_id(post_id))
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def update(
        self,
        caller_identity: str,
        post_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Post:
        """Apply a partial update as the post's owner and return the stored result.

        Fields left as None keep their current value.
        """
        post = self.get(post_id)
        self._require_owner(post, caller_identity, "update")

        self._store.update_post(
            post.id,
            title=title if title is not None else post.title,
            content=content if content is not None else post.content,
        )

        updated = self._store.get_post(post.id)
        if updated is None:
            raise NotFoundError("Post not found after update")
        logger.info("Post %s updated by %s", post.id, caller_identity)
        return updated

    def delete(self, caller_identity: str, post_id: str) -> None:
        """Delete the post as its owner."""
        post = self.get(post_id)
        self._require_owner(post, caller_identity, "delete")
        self._store.delete_post(post.id)
        logger.info("Post %s deleted by %s", post.id, caller_identity)

    @staticmethod
    def _require_owner(post: Post, caller_identity: str, action: str) -> None:
        if post.author_id != caller_identity:
            logger.warning("Denied %s of post %s to %s", action, post.id, caller_identity)
            raise AuthorizationError(f"Not authorized to {action} this post")
