"""Post API endpoints: lookup and likes."""

from fastapi import APIRouter

from .dependencies import PostIdDep, PostServiceDep
from .schemas import LikesResponse, PostResponse


router = APIRouter(tags=["posts"])


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get post",
)
async def get_post(
    post_id: PostIdDep,
    post_service: PostServiceDep,
) -> PostResponse:
    """Get a post, caching it from Ghost on first reference."""
    post = await post_service.get_post(post_id)
    return PostResponse.from_post(post)


@router.get(
    "/{post_id}/likes",
    response_model=LikesResponse,
    summary="Get post likes",
)
async def get_likes(
    post_id: PostIdDep,
    post_service: PostServiceDep,
) -> LikesResponse:
    """Get the like count of a post."""
    return LikesResponse(likes=await post_service.get_likes(post_id))


@router.post(
    "/{post_id}/likes",
    response_model=LikesResponse,
    summary="Like post",
)
async def like_post(
    post_id: PostIdDep,
    post_service: PostServiceDep,
) -> LikesResponse:
    """Add one like to a post.

    Anonymous and unthrottled: every call counts.
    """
    return LikesResponse(likes=await post_service.increment_likes(post_id))
