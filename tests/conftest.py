"""Shared fixtures.

Services run against ``FakeThreadStore``, an in-memory stand-in for the
Cassandra-backed ``ThreadStore`` with the same async interface, and a mocked
Ghost client that knows a fixed set of posts.
"""

import hashlib
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kaede.comments.models import ROOT_SUB_THREAD_ID, Comment
from kaede.comments.service import CommentService
from kaede.main import create_app
from kaede.posts.models import Post
from kaede.posts.service import PostService


POST_ID = "5f1e2d3c4b5a69788796a5b4"
OTHER_POST_ID = "60aa11bb22cc33dd44ee55ff"
UNKNOWN_POST_ID = "0123456789abcdef01234567"

# Browsers send the SHA-256 hex digest of what the user typed
SECRET = hashlib.sha256(b"hunter2").hexdigest()
OTHER_SECRET = hashlib.sha256(b"correct horse").hexdigest()
ADMIN_PASSWORD = "admin-password"


class FakeThreadStore:
    """In-memory thread store.

    Rows are copied on the way in and out so callers never share state with
    the store, as with a real database.
    """

    def __init__(self) -> None:
        self.posts: dict[str, Post] = {}
        self.likes: dict[str, int] = {}
        self.comments: dict[UUID, Comment] = {}
        self.mutations: list[tuple[str, list[UUID]]] = []

    async def find_post(self, post_id: str) -> Post | None:
        post = self.posts.get(post_id)
        if post is None:
            return None
        return replace(post, likes=self.likes.get(post_id, 0))

    async def insert_post(self, post_id: str) -> Post:
        self.posts.setdefault(
            post_id, Post(post_id=post_id, created_at=datetime.now(UTC))
        )
        return await self.find_post(post_id)

    async def get_likes(self, post_id: str) -> int:
        return self.likes.get(post_id, 0)

    async def increment_likes(self, post_id: str) -> int:
        self.likes[post_id] = self.likes.get(post_id, 0) + 1
        return self.likes[post_id]

    def _post_comments(self, post_id: str) -> list[Comment]:
        return sorted(
            (c for c in self.comments.values() if c.post_id == post_id),
            key=lambda c: (c.thread_id, c.sub_thread_id),
        )

    async def count_comments(self, post_id: str, live_only: bool = False) -> int:
        return sum(
            1
            for c in self._post_comments(post_id)
            if not (live_only and c.deleted)
        )

    async def list_comments(self, post_id: str, skip: int, limit: int) -> list[Comment]:
        return [replace(c) for c in self._post_comments(post_id)[skip : skip + limit]]

    async def find_comment(self, comment_id: UUID) -> Comment | None:
        comment = self.comments.get(comment_id)
        return replace(comment) if comment else None

    async def find_root(self, post_id: str, thread_id: int) -> Comment | None:
        for comment in self._post_comments(post_id):
            if comment.thread_id == thread_id and comment.is_root:
                return replace(comment)
        return None

    async def thread_exists(self, post_id: str, thread_id: int) -> bool:
        return any(c.thread_id == thread_id for c in self._post_comments(post_id))

    async def has_other_replies(
        self, post_id: str, thread_id: int, sub_thread_id: int
    ) -> bool:
        excluded = {ROOT_SUB_THREAD_ID, sub_thread_id}
        return any(
            c.thread_id == thread_id and c.sub_thread_id not in excluded
            for c in self._post_comments(post_id)
        )

    async def insert_comment(self, comment: Comment) -> Comment:
        self.comments[comment.comment_id] = replace(comment)
        self.mutations.append(("insert", [comment.comment_id]))
        return comment

    async def tombstone_comment(self, comment: Comment) -> None:
        stored = self.comments[comment.comment_id]
        stored.author = ""
        stored.content = ""
        stored.password = ""
        stored.deleted = True
        self.mutations.append(("tombstone", [comment.comment_id]))

    async def delete_comments(self, comments: Sequence[Comment]) -> None:
        for comment in comments:
            self.comments.pop(comment.comment_id, None)
        self.mutations.append(("delete", [c.comment_id for c in comments]))


def _fetch_known_post(post_id: str) -> dict | None:
    if post_id in (POST_ID, OTHER_POST_ID):
        return {"id": post_id, "title": "A post"}
    return None


@pytest.fixture
def store() -> FakeThreadStore:
    """In-memory thread store."""
    return FakeThreadStore()


@pytest.fixture
def ghost() -> AsyncMock:
    """Mock Ghost client knowing POST_ID and OTHER_POST_ID."""
    ghost_mock = AsyncMock()
    ghost_mock.fetch_post = AsyncMock(side_effect=_fetch_known_post)
    return ghost_mock


@pytest.fixture
def post_service(store: FakeThreadStore, ghost: AsyncMock) -> PostService:
    """Post service over the in-memory store."""
    return PostService(store=store, ghost=ghost)


@pytest.fixture
def comment_service(
    store: FakeThreadStore, post_service: PostService
) -> CommentService:
    """Comment service without cache or admin secrets."""
    return CommentService(store=store, post_service=post_service)


@pytest.fixture
def app(post_service: PostService, comment_service: CommentService) -> FastAPI:
    """Application with services wired onto its state (no lifespan)."""
    application = create_app()
    application.state.post_service = post_service
    application.state.comment_service = comment_service
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client; server errors come back as responses."""
    return TestClient(app, raise_server_exceptions=False)
