"""Post module.

Posts are Ghost posts cached on first reference, with an anonymous like
counter.

Note: Router is not exported here to avoid circular imports.
Import directly from kaede.posts.router when needed.
"""

from .models import POSTS_TABLES_CQL, Post
from .service import PostService, validate_post_id


__all__ = [
    "POSTS_TABLES_CQL",
    "Post",
    "PostService",
    "validate_post_id",
]
