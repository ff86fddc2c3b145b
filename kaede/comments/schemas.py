"""Pydantic schemas for the comment API.

Request bodies are read as raw JSON objects (see ``dependencies.JsonBody``)
because each malformed field maps to its own error reason; only responses are
modelled here.
"""

import json

from pydantic import BaseModel, Field

from .models import Comment


class CommentResponse(BaseModel):
    """A single comment, without its credential."""

    id: str
    post_id: str
    thread_id: int
    sub_thread_id: int
    author: str
    content: str
    date: int = Field(..., description="Creation time (epoch milliseconds)")
    deleted: bool = False

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        """Create response from Comment entity."""
        return cls(**comment.to_dict())


class PaginationResponse(BaseModel):
    """Current page and last page."""

    current: int
    max: int


class CommentListResponse(BaseModel):
    """One page of a post's comments."""

    ok: bool = True
    pagination: PaginationResponse
    comments: list[CommentResponse]

    def to_cache(self) -> str:
        """Serialize for the listing cache."""
        return json.dumps(self.model_dump())

    @classmethod
    def from_cache(cls, raw: str) -> "CommentListResponse":
        """Deserialize a cached listing."""
        return cls.model_validate(json.loads(raw))


class CreateCommentResponse(BaseModel):
    """Response for a created comment."""

    ok: bool = True
    comment: CommentResponse


class DeleteCommentResponse(BaseModel):
    """IDs of the comments removed from storage.

    Empty when the comment was tombstoned instead of removed.
    """

    ok: bool = True
    deleted: list[str] = Field(default_factory=list)
