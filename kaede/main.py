"""Kaede API - comments and likes for Ghost blogs.

Run with ``kaede-api`` (or ``uvicorn kaede.main:app``).
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from kaede.comments.router import router as comments_router
from kaede.comments.security import hash_admin_password
from kaede.comments.service import CommentService
from kaede.comments.store import ThreadStore
from kaede.config import Settings, get_settings
from kaede.core.database import init_async_cassandra, shutdown_async_cassandra
from kaede.core.handlers import register_exception_handlers
from kaede.core.logging import configure_structlog, get_logger
from kaede.core.middleware import RequestContextMiddleware
from kaede.core.redis import RedisConnection
from kaede.health import router as health_router
from kaede.posts.ghost import GhostClient
from kaede.posts.router import router as posts_router
from kaede.posts.service import PostService


# Configure logging early (before creating logger)
configure_structlog(get_settings())

logger = get_logger(__name__)

BANNER = {
    "ok": True,
    "server": "Kaede API Server",
    "kaede": "A neat Ghost theme",
}


def build_services(app: FastAPI, session, redis_client, settings: Settings) -> None:
    """Wire store and services onto ``app.state`` for dependency injection."""
    store = ThreadStore(session=session, keyspace=settings.cassandra_keyspace)
    post_service = PostService(store=store, ghost=GhostClient(settings))

    admin_digest = None
    if settings.admin_password:
        admin_digest = hash_admin_password(settings.admin_password)

    app.state.post_service = post_service
    app.state.comment_service = CommentService(
        store=store,
        post_service=post_service,
        redis=redis_client,
        max_count=settings.comments_max_count,
        max_author=settings.comments_max_author,
        max_content=settings.comments_max_content,
        per_page=settings.comments_per_page,
        cache_ttl=settings.comments_cache_ttl,
        admin_digest=admin_digest,
        admin_credential=settings.admin_credential,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect storage on startup, disconnect on shutdown.

    Redis only backs the listing cache, so the API starts without it. Without
    Cassandra the services are not wired and their routes answer 503.
    """
    settings = get_settings()
    logger.info(
        "starting_application",
        version=settings.app_version,
        environment=settings.environment,
        comments_max_count=settings.comments_max_count,
        admin_enabled=bool(settings.admin_password or settings.admin_credential),
    )
    if not settings.ghost_configured:
        logger.warning("ghost_not_configured", ghost_url=settings.ghost_url)

    redis_client = None
    try:
        redis_client = await RedisConnection.connect(settings)
    except Exception as e:
        logger.warning("redis_unavailable", error=str(e), cache_enabled=False)

    try:
        session = await init_async_cassandra(settings)
        build_services(app, session, redis_client, settings)
    except Exception as e:
        logger.error("services_unavailable", error=str(e))

    yield

    logger.info("shutting_down_application")
    await RedisConnection.disconnect()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Comments and likes for Ghost posts",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )
    # Readers post from the blog's pages; no cookies are involved
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=settings.cors_max_age,
    )

    register_exception_handlers(app)

    @app.get("/", include_in_schema=False, status_code=status.HTTP_418_IM_A_TEAPOT)
    async def root() -> dict[str, str | bool]:
        """Server banner."""
        return {**BANNER, "version": settings.app_version}

    # /health must be registered before the /{post_id} routes
    app.include_router(health_router)
    app.include_router(comments_router)
    app.include_router(posts_router)

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "kaede.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.api_reload,
        log_config=None,
    )
