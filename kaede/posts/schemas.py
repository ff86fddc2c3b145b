"""Pydantic schemas for posts."""

from pydantic import BaseModel, Field

from .models import Post


class PostResponse(BaseModel):
    """Cached post with its like count."""

    ok: bool = True
    post_id: str
    likes: int = Field(default=0, ge=0)

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        """Create response from Post entity."""
        return cls(**post.to_dict())


class LikesResponse(BaseModel):
    """Like count of a post."""

    ok: bool = True
    likes: int = Field(default=0, ge=0)
