"""Post service layer.

Posts are created lazily: the first request that references a post ID checks
Ghost and caches the post; later requests are served from Cassandra.
"""

import re
from typing import TYPE_CHECKING

import structlog

from kaede.core.errors import InvalidPostIdError, NoSuchPostError

from .models import Post


if TYPE_CHECKING:
    from kaede.comments.store import ThreadStore

    from .ghost import GhostClient


logger = structlog.get_logger(__name__)

# Ghost content IDs are 24 lowercase hex characters
POST_ID_PATTERN = re.compile(r"^[a-f0-9]{0,24}$")


def validate_post_id(post_id: object) -> str:
    """Check that a post ID looks like a Ghost content ID.

    Raises:
        InvalidPostIdError: If it does not.
    """
    if not isinstance(post_id, str) or not POST_ID_PATTERN.fullmatch(post_id):
        raise InvalidPostIdError
    return post_id


class PostService:
    """Service for posts and their likes."""

    def __init__(self, store: "ThreadStore", ghost: "GhostClient"):
        """Initialize with thread store and Ghost client."""
        self.store = store
        self.ghost = ghost

    async def get_post(self, post_id: str) -> Post:
        """Get a post, caching it from Ghost on first reference.

        Raises:
            InvalidPostIdError: Malformed post ID.
            NoSuchPostError: Ghost does not know the post.
            GhostApiError: Ghost could not be reached.
        """
        validate_post_id(post_id)

        post = await self.store.find_post(post_id)
        if post is not None:
            return post

        ghost_post = await self.ghost.fetch_post(post_id)
        if not ghost_post or ghost_post.get("id") != post_id:
            raise NoSuchPostError

        return await self.store.insert_post(post_id)

    async def get_likes(self, post_id: str) -> int:
        """Get the like count of a post."""
        post = await self.get_post(post_id)
        return post.likes

    async def increment_likes(self, post_id: str) -> int:
        """Add a like to a post and return the new count."""
        await self.get_post(post_id)
        likes = await self.store.increment_likes(post_id)
        logger.info("post_liked", post_id=post_id, likes=likes)
        return likes
