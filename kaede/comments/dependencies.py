"""FastAPI dependencies for the comment system.

Provides dependency injection for:
- Comment service
- Raw JSON request bodies
"""

import json
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status

from kaede.core.errors import InvalidBodyError

from .service import CommentService


async def get_comment_service(request: Request) -> CommentService:
    """Get comment service from app state.

    Args:
        request: FastAPI request

    Returns:
        CommentService instance
    """
    app_state = request.app.state
    if not getattr(app_state, "comment_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Comment service not available",
        )
    return app_state.comment_service


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidBodyError from e


async def get_json_body(request: Request) -> dict[str, Any]:
    """Read the request body as a JSON object.

    Raises:
        InvalidBodyError: Body is missing, malformed or not an object.
    """
    body = await _read_json(request)
    if not isinstance(body, dict):
        raise InvalidBodyError
    return body


async def get_optional_json_body(request: Request) -> dict[str, Any]:
    """Read an optional JSON object body; a missing body reads as ``{}``."""
    body = await _read_json(request)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidBodyError
    return body


# Type aliases for dependency injection
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
JsonBody = Annotated[dict[str, Any], Depends(get_json_body)]
OptionalJsonBody = Annotated[dict[str, Any], Depends(get_optional_json_body)]
