"""Health check module."""

from kaede.health.router import router


__all__ = ["router"]
