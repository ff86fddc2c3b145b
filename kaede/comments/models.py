"""Database models for threaded comments.

Cassandra table definitions for:
- comments_by_post: one partition per post, clustered by (thread_id,
  sub_thread_id) so a partition scan returns threads in listing order and a
  thread is a contiguous slice.
- comments_by_id: O(1) lookup for deletion requests.

Both tables carry the full row and are written together in logged batches.

Threading model: two levels only. A root has sub_thread_id = 0 and its own
thread_id; replies share the root's thread_id and get a generated
sub_thread_id.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4


ROOT_SUB_THREAD_ID = 0


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENTS_BY_POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_post (
    post_id TEXT,
    thread_id BIGINT,
    sub_thread_id BIGINT,
    comment_id UUID,
    author TEXT,
    content TEXT,
    password TEXT,
    deleted BOOLEAN,
    created_at TIMESTAMP,
    PRIMARY KEY ((post_id), thread_id, sub_thread_id)
) WITH CLUSTERING ORDER BY (thread_id ASC, sub_thread_id ASC)
"""

COMMENTS_BY_ID_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_id (
    comment_id UUID PRIMARY KEY,
    post_id TEXT,
    thread_id BIGINT,
    sub_thread_id BIGINT,
    author TEXT,
    content TEXT,
    password TEXT,
    deleted BOOLEAN,
    created_at TIMESTAMP
)
"""

COMMENTS_TABLES_CQL = [
    COMMENTS_BY_POST_TABLE_CQL,
    COMMENTS_BY_ID_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Comment:
    """Comment entity.

    ``password`` holds the salted credential and must never be serialized;
    ``to_dict`` leaves it out.
    """

    comment_id: UUID
    post_id: str
    thread_id: int
    sub_thread_id: int
    author: str
    content: str
    password: str
    created_at: datetime
    deleted: bool = False

    @property
    def is_root(self) -> bool:
        """Check if this comment opens its thread."""
        return self.sub_thread_id == ROOT_SUB_THREAD_ID

    @property
    def date(self) -> int:
        """Creation time in epoch milliseconds."""
        created_at = self.created_at
        if created_at.tzinfo is None:
            # Cassandra returns naive UTC datetimes
            created_at = created_at.replace(tzinfo=UTC)
        return int(created_at.timestamp() * 1000)

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from Cassandra row."""
        return cls(
            comment_id=row.comment_id,
            post_id=row.post_id,
            thread_id=row.thread_id,
            sub_thread_id=row.sub_thread_id,
            author=row.author or "",
            content=row.content or "",
            password=row.password or "",
            created_at=row.created_at,
            deleted=row.deleted or False,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (without the password)."""
        return {
            "id": str(self.comment_id),
            "post_id": self.post_id,
            "thread_id": self.thread_id,
            "sub_thread_id": self.sub_thread_id,
            "author": self.author,
            "content": self.content,
            "date": self.date,
            "deleted": self.deleted,
        }


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_comment(
    post_id: str,
    thread_id: int,
    sub_thread_id: int,
    author: str,
    content: str,
    password: str,
) -> Comment:
    """Create a new live comment with a fresh ID."""
    return Comment(
        comment_id=uuid4(),
        post_id=post_id,
        thread_id=thread_id,
        sub_thread_id=sub_thread_id,
        author=author,
        content=content,
        password=password,
        created_at=datetime.now(UTC),
        deleted=False,
    )
