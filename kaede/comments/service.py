"""Comment system service layer.

Business logic for:
- Comment creation with thread/reply identity assignment
- Paginated listing with a first-page cache
- Password-checked deletion with the tombstone/cascade policy

Deletion state machine (two-level threads):

    reply                          -> removed
    reply, last one, root tombstoned -> reply and root removed
    root without other replies     -> removed
    root with other replies        -> tombstoned (content cleared, kept)

The read-check-write sequence of a deletion is not transactional; two
concurrent deletions in the same thread can leave a tombstoned root behind.
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from redis.exceptions import RedisError

from kaede.core.errors import (
    InvalidAuthorError,
    InvalidCommentIdError,
    InvalidContentError,
    InvalidPasswordError,
    NoSuchCommentError,
    TooManyCommentsError,
)
from kaede.core.redis import comments_first_page_key
from kaede.posts.service import validate_post_id

from .ids import generate_id
from .models import ROOT_SUB_THREAD_ID, Comment, create_comment
from .pagination import calculate_page, parse_int
from .schemas import CommentListResponse, CommentResponse, PaginationResponse
from .security import hash_password, is_admin_password, verify_password


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from kaede.posts.service import PostService

    from .store import ThreadStore


logger = structlog.get_logger(__name__)


class CommentService:
    """Service for comment threads."""

    def __init__(
        self,
        store: "ThreadStore",
        post_service: "PostService",
        redis: "Redis | None" = None,
        *,
        max_count: int = 10000,
        max_author: int = 32,
        max_content: int = 1500,
        per_page: int = 30,
        cache_ttl: int = 3600,
        admin_digest: str | None = None,
        admin_credential: str | None = None,
    ):
        """Initialize with thread store, post service and optional Redis.

        Args:
            store: Thread store
            post_service: Post service (lazy post creation)
            redis: Redis client for the listing cache
            max_count: Per-post comment cap (0 or negative for unlimited)
            max_author: Author names are truncated to this length
            max_content: Contents are truncated to this length
            per_page: Comments per page
            cache_ttl: First page cache TTL in seconds
            admin_digest: SHA-256 hex digest of the admin password
            admin_credential: Salted admin credential
        """
        self.store = store
        self.post_service = post_service
        self.redis = redis
        self.max_count = max_count
        self.max_author = max_author
        self.max_content = max_content
        self.per_page = per_page
        self.cache_ttl = cache_ttl
        self.admin_digest = admin_digest
        self.admin_credential = admin_credential

    # ==========================================================================
    # Listing
    # ==========================================================================

    async def list_comments(
        self, post_id: str, page: object = None
    ) -> CommentListResponse:
        """Get one page of a post's comments, threads in creation order.

        Tombstoned roots are listed (with empty author and content) so their
        replies keep their place. The post itself is not looked up; a post
        without comments lists empty.
        """
        validate_post_id(post_id)

        total = await self.store.count_comments(post_id)
        window = calculate_page(page, total, self.per_page, self.max_count)

        if window.page == 1:
            cached = await self._get_cached_comments(post_id)
            if cached:
                return cached

        comments = await self.store.list_comments(post_id, window.skip, window.limit)

        response = CommentListResponse(
            pagination=PaginationResponse(current=window.page, max=window.max_page),
            comments=[CommentResponse.from_comment(c) for c in comments],
        )

        if window.page == 1:
            await self._cache_comments(post_id, response)

        return response

    # ==========================================================================
    # Creation
    # ==========================================================================

    async def create_comment(
        self,
        post_id: str,
        content: object,
        author: object,
        password: object,
        reply_to: object = None,
    ) -> Comment:
        """Create a root comment or a reply.

        A reply is created when ``reply_to`` parses as a positive integer
        naming an existing thread of this post; anything else opens a new
        thread.

        Raises:
            TooManyCommentsError: Post reached its comment cap.
            InvalidContentError / InvalidAuthorError: Field is not text.
            InvalidPasswordError: Password missing or empty.
        """
        await self.post_service.get_post(post_id)

        if self.max_count > 0:
            live_count = await self.store.count_comments(post_id, live_only=True)
            if live_count >= self.max_count:
                raise TooManyCommentsError

        if not isinstance(content, str):
            raise InvalidContentError
        if not isinstance(author, str):
            raise InvalidAuthorError
        if not isinstance(password, str) or not password:
            raise InvalidPasswordError

        thread_id = await self._resolve_reply_thread(post_id, reply_to)
        if thread_id is not None:
            sub_thread_id = generate_id()
        else:
            thread_id = generate_id()
            sub_thread_id = ROOT_SUB_THREAD_ID

        comment = create_comment(
            post_id=post_id,
            thread_id=thread_id,
            sub_thread_id=sub_thread_id,
            author=author[: self.max_author],
            content=content[: self.max_content],
            password=hash_password(password),
        )

        await self.store.insert_comment(comment)
        await self._invalidate_cache(post_id)

        logger.info(
            "comment_created",
            post_id=post_id,
            comment_id=str(comment.comment_id),
            thread_id=comment.thread_id,
            sub_thread_id=comment.sub_thread_id,
        )

        return comment

    async def _resolve_reply_thread(self, post_id: str, reply_to: object) -> int | None:
        """Get the thread a new comment replies to, if any."""
        if isinstance(reply_to, bool) or not isinstance(reply_to, int | float | str):
            return None

        thread_id = parse_int(reply_to)
        if thread_id is None or thread_id <= 0:
            return None

        if not await self.store.thread_exists(post_id, thread_id):
            return None

        return thread_id

    # ==========================================================================
    # Deletion
    # ==========================================================================

    async def delete_comment(
        self, post_id: str, comment_id: str, password: object
    ) -> list[str]:
        """Delete a comment if the password matches.

        Args:
            post_id: Post the comment belongs to
            comment_id: Comment ID (UUID string)
            password: Candidate client secret

        Returns:
            IDs of the comments removed from storage; empty when the comment
            was tombstoned.

        Raises:
            InvalidCommentIdError: Malformed comment ID.
            NoSuchCommentError: Comment absent, tombstoned or on another post.
            InvalidPasswordError: Password missing or mismatched.
        """
        try:
            comment_uuid = UUID(comment_id)
        except (TypeError, ValueError) as e:
            raise InvalidCommentIdError from e

        comment = await self.store.find_comment(comment_uuid)
        if comment is None or comment.deleted or comment.post_id != post_id:
            raise NoSuchCommentError

        if not isinstance(password, str):
            raise InvalidPasswordError

        self._authorize(comment, password)

        has_other_replies = await self.store.has_other_replies(
            comment.post_id, comment.thread_id, comment.sub_thread_id
        )

        if comment.is_root:
            if has_other_replies:
                await self.store.tombstone_comment(comment)
                await self._invalidate_cache(post_id)
                logger.info(
                    "comment_tombstoned",
                    post_id=post_id,
                    comment_id=str(comment.comment_id),
                    thread_id=comment.thread_id,
                )
                return []
            removed = [comment]
        else:
            removed = [comment]
            if not has_other_replies:
                root = await self.store.find_root(comment.post_id, comment.thread_id)
                if root is not None and root.deleted:
                    removed.append(root)

        await self.store.delete_comments(removed)
        await self._invalidate_cache(post_id)

        deleted = [str(c.comment_id) for c in removed]
        logger.info(
            "comments_removed",
            post_id=post_id,
            thread_id=comment.thread_id,
            deleted=deleted,
        )
        return deleted

    def _authorize(self, comment: Comment, password: str) -> None:
        """Check the candidate against the admin secrets, then the comment's own."""
        if is_admin_password(password, self.admin_digest, self.admin_credential):
            logger.info(
                "comment_admin_delete",
                post_id=comment.post_id,
                comment_id=str(comment.comment_id),
            )
            return

        if not verify_password(comment.password, password):
            raise InvalidPasswordError

    # ==========================================================================
    # Cache (Redis)
    # ==========================================================================

    async def _get_cached_comments(self, post_id: str) -> CommentListResponse | None:
        """Get the cached first page, if any.

        An unreachable cache or an unreadable entry is a miss.
        """
        if not self.redis:
            return None

        key = comments_first_page_key(post_id)
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning("comments_cache_unavailable", op="get", error=str(e))
            return None

        if not raw:
            return None

        try:
            return CommentListResponse.from_cache(raw)
        except ValueError:
            logger.warning("comments_cache_invalid", key=key)
            return None

    async def _cache_comments(self, post_id: str, response: CommentListResponse) -> None:
        """Cache the first page."""
        if not self.redis:
            return

        try:
            await self.redis.setex(
                comments_first_page_key(post_id),
                self.cache_ttl,
                response.to_cache(),
            )
        except RedisError as e:
            logger.warning("comments_cache_unavailable", op="set", error=str(e))

    async def _invalidate_cache(self, post_id: str) -> None:
        """Drop the cached first page after a write.

        The write is already stored, so a cache failure is only logged.
        """
        if not self.redis:
            return

        try:
            await self.redis.delete(comments_first_page_key(post_id))
        except RedisError as e:
            logger.warning(
                "comments_cache_unavailable",
                op="delete",
                post_id=post_id,
                error=str(e),
            )
