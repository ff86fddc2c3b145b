"""Tests for the post service."""

from unittest.mock import AsyncMock

import pytest

from kaede.core.errors import InvalidPostIdError, NoSuchPostError
from kaede.posts.ghost import GhostApiError
from kaede.posts.service import PostService, validate_post_id
from tests.conftest import POST_ID, UNKNOWN_POST_ID, FakeThreadStore


class TestValidatePostId:
    """Tests for validate_post_id."""

    @pytest.mark.parametrize("post_id", [POST_ID, "abc123", "0" * 24])
    def test_valid(self, post_id: str) -> None:
        assert validate_post_id(post_id) == post_id

    @pytest.mark.parametrize(
        "post_id",
        [
            "5F1E2D3C4B5A69788796A5B4",
            "0" * 25,
            "not-a-post",
            "5f1e2d3c4b5a69788796a5b4\n",
            None,
            123,
        ],
    )
    def test_invalid(self, post_id: object) -> None:
        with pytest.raises(InvalidPostIdError):
            validate_post_id(post_id)


class TestGetPost:
    """Tests for lazy post creation."""

    @pytest.mark.asyncio
    async def test_first_reference_caches_post(
        self, post_service: PostService, store: FakeThreadStore, ghost: AsyncMock
    ) -> None:
        post = await post_service.get_post(POST_ID)

        assert post.post_id == POST_ID
        assert post.likes == 0
        assert POST_ID in store.posts
        ghost.fetch_post.assert_awaited_once_with(POST_ID)

    @pytest.mark.asyncio
    async def test_cached_post_skips_ghost(
        self, post_service: PostService, ghost: AsyncMock
    ) -> None:
        await post_service.get_post(POST_ID)
        await post_service.get_post(POST_ID)

        assert ghost.fetch_post.await_count == 1

    @pytest.mark.asyncio
    async def test_unknown_post(
        self, post_service: PostService, store: FakeThreadStore
    ) -> None:
        with pytest.raises(NoSuchPostError):
            await post_service.get_post(UNKNOWN_POST_ID)

        assert store.posts == {}

    @pytest.mark.asyncio
    async def test_ghost_returns_other_post(
        self, store: FakeThreadStore
    ) -> None:
        ghost = AsyncMock()
        ghost.fetch_post = AsyncMock(return_value={"id": UNKNOWN_POST_ID})
        service = PostService(store=store, ghost=ghost)

        with pytest.raises(NoSuchPostError):
            await service.get_post(POST_ID)

    @pytest.mark.asyncio
    async def test_invalid_post_id_skips_lookup(
        self, post_service: PostService, ghost: AsyncMock
    ) -> None:
        with pytest.raises(InvalidPostIdError):
            await post_service.get_post("../admin")

        ghost.fetch_post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ghost_failure_propagates(self, store: FakeThreadStore) -> None:
        ghost = AsyncMock()
        ghost.fetch_post = AsyncMock(side_effect=GhostApiError("Ghost API timeout"))
        service = PostService(store=store, ghost=ghost)

        with pytest.raises(GhostApiError):
            await service.get_post(POST_ID)


class TestLikes:
    """Tests for likes."""

    @pytest.mark.asyncio
    async def test_increment_likes(self, post_service: PostService) -> None:
        assert await post_service.increment_likes(POST_ID) == 1
        assert await post_service.increment_likes(POST_ID) == 2
        assert await post_service.get_likes(POST_ID) == 2

    @pytest.mark.asyncio
    async def test_like_unknown_post(
        self, post_service: PostService, store: FakeThreadStore
    ) -> None:
        with pytest.raises(NoSuchPostError):
            await post_service.increment_likes(UNKNOWN_POST_ID)

        assert store.likes == {}
