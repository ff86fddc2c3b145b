"""Cassandra persistence for posts and comment threads.

All statements are prepared once and executed with ``aexecute``
(cassandra-asyncio-driver). Comment rows live in two tables; every write that
touches a comment goes through a logged batch so both tables change together
and a deletion request is a single store mutation.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from cassandra.query import BatchStatement, BatchType

from kaede.posts.models import Post

from .models import ROOT_SUB_THREAD_ID, Comment


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)


class ThreadStore:
    """Store for posts, likes and threaded comments."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session and keyspace."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        # Posts
        self._get_post = self.session.prepare(f"""
            SELECT post_id, created_at FROM {self.keyspace}.posts
            WHERE post_id = ?
        """)

        self._insert_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts (post_id, created_at)
            VALUES (?, ?)
            IF NOT EXISTS
        """)

        self._get_likes = self.session.prepare(f"""
            SELECT likes FROM {self.keyspace}.post_likes
            WHERE post_id = ?
        """)

        self._incr_likes = self.session.prepare(f"""
            UPDATE {self.keyspace}.post_likes
            SET likes = likes + 1
            WHERE post_id = ?
        """)

        # Comment writes
        self._insert_comment_by_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments_by_post
            (post_id, thread_id, sub_thread_id, comment_id, author, content,
             password, deleted, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_comment_by_id = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments_by_id
            (comment_id, post_id, thread_id, sub_thread_id, author, content,
             password, deleted, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._tombstone_comment_by_post = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments_by_post
            SET author = '', content = '', password = '', deleted = true
            WHERE post_id = ? AND thread_id = ? AND sub_thread_id = ?
        """)

        self._tombstone_comment_by_id = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments_by_id
            SET author = '', content = '', password = '', deleted = true
            WHERE comment_id = ?
        """)

        self._delete_comment_by_post = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments_by_post
            WHERE post_id = ? AND thread_id = ? AND sub_thread_id = ?
        """)

        self._delete_comment_by_id = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments_by_id
            WHERE comment_id = ?
        """)

        # Comment reads
        self._get_comment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_id
            WHERE comment_id = ?
        """)

        self._get_comments_by_post = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_post
            WHERE post_id = ?
            LIMIT ?
        """)

        self._count_comments = self.session.prepare(f"""
            SELECT COUNT(*) FROM {self.keyspace}.comments_by_post
            WHERE post_id = ?
        """)

        self._count_live_comments = self.session.prepare(f"""
            SELECT COUNT(*) FROM {self.keyspace}.comments_by_post
            WHERE post_id = ? AND deleted = false
            ALLOW FILTERING
        """)

        self._get_thread_head = self.session.prepare(f"""
            SELECT sub_thread_id FROM {self.keyspace}.comments_by_post
            WHERE post_id = ? AND thread_id = ?
            LIMIT ?
        """)

        self._get_thread_comment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_post
            WHERE post_id = ? AND thread_id = ? AND sub_thread_id = ?
        """)

    # ==========================================================================
    # Posts
    # ==========================================================================

    async def find_post(self, post_id: str) -> Post | None:
        """Find a cached post with its like count."""
        result = await self.session.aexecute(self._get_post, [post_id])
        row = result.one()
        if row is None:
            return None

        likes = await self.get_likes(post_id)
        return Post.from_row(row, likes=likes)

    async def insert_post(self, post_id: str) -> Post:
        """Cache a post known to exist in Ghost."""
        now = datetime.now(UTC)
        await self.session.aexecute(self._insert_post, [post_id, now])
        logger.info("post_cached", post_id=post_id)
        return Post(post_id=post_id, created_at=now, likes=await self.get_likes(post_id))

    async def get_likes(self, post_id: str) -> int:
        """Get the like count of a post (0 if never liked)."""
        result = await self.session.aexecute(self._get_likes, [post_id])
        row = result.one()
        return row.likes if row and row.likes else 0

    async def increment_likes(self, post_id: str) -> int:
        """Add one like and return the new count."""
        await self.session.aexecute(self._incr_likes, [post_id])
        return await self.get_likes(post_id)

    # ==========================================================================
    # Comments
    # ==========================================================================

    async def count_comments(self, post_id: str, live_only: bool = False) -> int:
        """Count stored comments of a post.

        Args:
            post_id: Post ID
            live_only: Exclude tombstoned roots

        Returns:
            Number of comments
        """
        statement = self._count_live_comments if live_only else self._count_comments
        result = await self.session.aexecute(statement, [post_id])
        row = result.one()
        return row.count if row else 0

    async def list_comments(self, post_id: str, skip: int, limit: int) -> list[Comment]:
        """List comments of a post in (thread_id, sub_thread_id) order.

        Cassandra has no OFFSET; the partition is read up to ``skip + limit``
        rows and the window is sliced client-side.
        """
        rows = await self.session.aexecute(
            self._get_comments_by_post,
            [post_id, skip + limit],
        )
        comments = [Comment.from_row(row) for row in rows]
        return comments[skip : skip + limit]

    async def find_comment(self, comment_id: UUID) -> Comment | None:
        """Find a comment by ID."""
        result = await self.session.aexecute(self._get_comment, [comment_id])
        row = result.one()
        return Comment.from_row(row) if row else None

    async def find_root(self, post_id: str, thread_id: int) -> Comment | None:
        """Find the root comment of a thread."""
        result = await self.session.aexecute(
            self._get_thread_comment,
            [post_id, thread_id, ROOT_SUB_THREAD_ID],
        )
        row = result.one()
        return Comment.from_row(row) if row else None

    async def thread_exists(self, post_id: str, thread_id: int) -> bool:
        """Check if any comment of the post references this thread."""
        result = await self.session.aexecute(
            self._get_thread_head,
            [post_id, thread_id, 1],
        )
        return result.one() is not None

    async def has_other_replies(
        self, post_id: str, thread_id: int, sub_thread_id: int
    ) -> bool:
        """Check if the thread has a reply other than ``sub_thread_id``.

        Rows come back ordered by sub_thread_id, so at most two of the first
        three can be excluded (the root and the comment itself).
        """
        excluded = {ROOT_SUB_THREAD_ID, sub_thread_id}
        rows = await self.session.aexecute(
            self._get_thread_head,
            [post_id, thread_id, len(excluded) + 1],
        )
        return any(row.sub_thread_id not in excluded for row in rows)

    async def insert_comment(self, comment: Comment) -> Comment:
        """Insert a comment into both tables."""
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(
            self._insert_comment_by_post,
            [
                comment.post_id,
                comment.thread_id,
                comment.sub_thread_id,
                comment.comment_id,
                comment.author,
                comment.content,
                comment.password,
                comment.deleted,
                comment.created_at,
            ],
        )
        batch.add(
            self._insert_comment_by_id,
            [
                comment.comment_id,
                comment.post_id,
                comment.thread_id,
                comment.sub_thread_id,
                comment.author,
                comment.content,
                comment.password,
                comment.deleted,
                comment.created_at,
            ],
        )
        await self.session.aexecute(batch)
        return comment

    async def tombstone_comment(self, comment: Comment) -> None:
        """Clear author, content and password and flag the comment deleted."""
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(
            self._tombstone_comment_by_post,
            [comment.post_id, comment.thread_id, comment.sub_thread_id],
        )
        batch.add(self._tombstone_comment_by_id, [comment.comment_id])
        await self.session.aexecute(batch)

    async def delete_comments(self, comments: Sequence[Comment]) -> None:
        """Remove comments from both tables in one logged batch."""
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        for comment in comments:
            batch.add(
                self._delete_comment_by_post,
                [comment.post_id, comment.thread_id, comment.sub_thread_id],
            )
            batch.add(self._delete_comment_by_id, [comment.comment_id])
        await self.session.aexecute(batch)
