"""FastAPI dependencies for posts."""

from typing import Annotated

from fastapi import Depends, HTTPException, Path, Request, status

from .service import PostService, validate_post_id


async def get_post_service(request: Request) -> PostService:
    """Get post service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "post_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Post service not available",
        )
    return app_state.post_service


async def get_post_id(post_id: Annotated[str, Path()]) -> str:
    """Validate the post ID path parameter before any lookup."""
    return validate_post_id(post_id)


# Type aliases for dependency injection
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
PostIdDep = Annotated[str, Depends(get_post_id)]
