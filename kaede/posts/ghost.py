"""Ghost Content API client.

Only used to confirm that a post exists before it is cached locally. The
Content API key is read-only and public by Ghost's design, but it is still
kept out of logs.
"""

from typing import Any

import httpx
import structlog

from kaede.config.settings import Settings


logger = structlog.get_logger(__name__)


class GhostApiError(Exception):
    """Raised when the Ghost Content API request fails."""


class GhostClient:
    """Async client for the Ghost Content API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Ghost client with settings.

        Args:
            settings: Application settings containing Ghost configuration.
            transport: Optional httpx transport (mock transport in tests).
        """
        self._base_url = settings.ghost_url.rstrip("/")
        self._key = settings.ghost_key
        self._version = settings.ghost_api_version
        self._timeout = settings.ghost_timeout
        self._transport = transport

    def post_url(self, post_id: str) -> str:
        """Build the Content API URL for a single post."""
        return f"{self._base_url}/ghost/api/{self._version}/content/posts/{post_id}/"

    async def fetch_post(self, post_id: str) -> dict[str, Any] | None:
        """Fetch a post by ID.

        Args:
            post_id: Ghost post ID.

        Returns:
            The post object, or None if Ghost does not know the ID.

        Raises:
            GhostApiError: On transport errors or unexpected responses.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    self.post_url(post_id), params={"key": self._key}
                )
        except httpx.TimeoutException as e:
            logger.error("ghost_api_timeout", post_id=post_id, error=str(e))
            raise GhostApiError("Ghost API timeout") from e
        except httpx.RequestError as e:
            logger.error("ghost_api_request_error", post_id=post_id, error=str(e))
            raise GhostApiError(f"Ghost API request error: {e}") from e

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("ghost_post_not_found", post_id=post_id)
            return None

        if response.status_code != httpx.codes.OK:
            logger.error(
                "ghost_api_request_failed",
                post_id=post_id,
                status_code=response.status_code,
                response_text=response.text[:500],
            )
            raise GhostApiError(f"Ghost API error: {response.status_code}")

        posts = response.json().get("posts") or []
        return posts[0] if posts else None
