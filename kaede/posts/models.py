"""Database models for posts.

A post row is a local cache entry for a Ghost post: it only records that the
post exists. Likes live in a separate counter table because Cassandra does not
mix counter and regular columns.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    post_id TEXT PRIMARY KEY,
    created_at TIMESTAMP
)
"""

POST_LIKES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.post_likes (
    post_id TEXT PRIMARY KEY,
    likes COUNTER
)
"""

POSTS_TABLES_CQL = [
    POST_TABLE_CQL,
    POST_LIKES_TABLE_CQL,
]


@dataclass
class Post:
    """Post entity."""

    post_id: str
    created_at: datetime
    likes: int = 0

    @classmethod
    def from_row(cls, row: Any, likes: int = 0) -> "Post":
        """Create Post from Cassandra row."""
        return cls(post_id=row.post_id, created_at=row.created_at, likes=likes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"post_id": self.post_id, "likes": self.likes}
