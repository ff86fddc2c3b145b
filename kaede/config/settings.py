"""Application settings using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (or ``.env``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="kaede", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment name"
    )

    # Server (uvicorn)
    api_host: str = Field(default="0.0.0.0", description="Bind address")
    api_port: int = Field(default=11005, description="Listen port")
    api_workers: int = Field(default=1, description="Worker processes")
    api_reload: bool = Field(default=False, description="Reload on code changes")

    # Ghost Content API
    ghost_url: str = Field(
        default="http://localhost:2368", description="Ghost blog base URL"
    )
    ghost_key: str | None = Field(default=None, description="Content API key")
    ghost_api_version: str = Field(default="v3", description="Content API version")
    ghost_timeout: float = Field(default=10.0, description="Request timeout (seconds)")

    # Comments
    comments_max_count: int = Field(
        default=10000,
        description="Live comments allowed per post (0 or negative: unlimited)",
    )
    comments_max_author: int = Field(
        default=32, description="Author names are truncated to this length"
    )
    comments_max_content: int = Field(
        default=1500, description="Comment contents are truncated to this length"
    )
    comments_per_page: int = Field(default=30, gt=0, description="Comments per page")
    comments_cache_ttl: int = Field(
        default=3600, description="First page cache TTL (seconds)"
    )

    # Moderation
    admin_password: str | None = Field(
        default=None, description="Admin password; deletes any comment"
    )
    admin_credential: str | None = Field(
        default=None, description="Salted admin credential (scripts/genpassword.py)"
    )

    # Redis (listing cache, optional)
    redis_url: str = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    redis_max_connections: int = Field(default=10, description="Pool size")
    redis_socket_timeout: float = Field(default=2.0, description="Socket timeout")

    # Cassandra
    cassandra_hosts: list[str] = Field(
        default=["localhost"], description="Contact points"
    )
    cassandra_port: int = Field(default=9042, description="Native protocol port")
    cassandra_keyspace: str = Field(default="kaede", description="Keyspace")
    cassandra_username: str | None = Field(default=None, description="Username")
    cassandra_password: str | None = Field(default=None, description="Password")
    cassandra_protocol_version: int = Field(default=4, description="Protocol version")
    cassandra_replication_factor: int = Field(
        default=1, description="Replication factor for a newly created keyspace"
    )
    cassandra_connect_timeout: float = Field(
        default=10.0, description="Connect timeout (seconds)"
    )
    cassandra_request_timeout: float = Field(
        default=10.0, description="Default statement timeout (seconds)"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Console log format"
    )
    log_include_caller_info: bool = Field(
        default=False, description="Add file, line and function to events"
    )
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Rotate log files at this size"
    )
    log_file_backup_count: int = Field(default=5, description="Rotated files kept")
    log_requests: bool = Field(default=True, description="Write the access log")
    log_exclude_paths: list[str] = Field(
        default=["/health"], description="Path prefixes left out of the access log"
    )

    # CORS (the blog's own origin when unset)
    cors_origins: list[str] | None = Field(default=None, description="Allowed origins")
    cors_max_age: int = Field(default=600, description="Preflight cache (seconds)")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def ghost_configured(self) -> bool:
        """Check if the Ghost Content API key is set."""
        return bool(self.ghost_url and self.ghost_key)

    @property
    def allowed_origins(self) -> list[str]:
        """Origins allowed to call the API from a browser."""
        return self.cors_origins or [self.ghost_url.rstrip("/")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
