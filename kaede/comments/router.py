"""Comment system API endpoints.

Provides routes for:
- Listing a post's comments page by page
- Creating root comments and replies
- Deleting a comment with its password
"""

from fastapi import APIRouter, Query

from kaede.posts.dependencies import PostIdDep

from .dependencies import CommentServiceDep, JsonBody, OptionalJsonBody
from .schemas import (
    CommentListResponse,
    CommentResponse,
    CreateCommentResponse,
    DeleteCommentResponse,
)


router = APIRouter(tags=["comments"])


@router.get(
    "/{post_id}/comments",
    response_model=CommentListResponse,
    summary="List post comments",
)
async def list_comments(
    post_id: PostIdDep,
    comment_service: CommentServiceDep,
    page: str | None = Query(default=None),
) -> CommentListResponse:
    """Get one page of comments, ordered by thread then reply.

    Invalid or out-of-range pages fall back to the first page.
    """
    return await comment_service.list_comments(post_id, page)


@router.post(
    "/{post_id}/comments",
    response_model=CreateCommentResponse,
    summary="Create comment",
)
async def create_comment(
    post_id: PostIdDep,
    body: JsonBody,
    comment_service: CommentServiceDep,
) -> CreateCommentResponse:
    """Create a comment, or a reply when ``replyTo`` names an existing thread.

    The password is expected to be hashed client-side and is never returned.
    """
    comment = await comment_service.create_comment(
        post_id=post_id,
        content=body.get("content"),
        author=body.get("author"),
        password=body.get("password"),
        reply_to=body.get("replyTo"),
    )
    return CreateCommentResponse(comment=CommentResponse.from_comment(comment))


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response_model=DeleteCommentResponse,
    summary="Delete comment",
)
async def delete_comment(
    post_id: PostIdDep,
    comment_id: str,
    body: OptionalJsonBody,
    comment_service: CommentServiceDep,
) -> DeleteCommentResponse:
    """Delete a comment with its password (or the admin password).

    A root that still has replies is tombstoned instead and ``deleted`` is
    empty.
    """
    deleted = await comment_service.delete_comment(
        post_id=post_id,
        comment_id=comment_id,
        password=body.get("password"),
    )
    return DeleteCommentResponse(deleted=deleted)
