"""HTTP routes."""

from sitekit.api.router import api_router


__all__ = [
    "api_router",
]
