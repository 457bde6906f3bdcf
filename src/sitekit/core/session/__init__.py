"""Session storage backed by the cache."""

from sitekit.core.session.storage import (
    CacheSessionIdStrategy,
    CookieOptions,
    Session,
    SessionStorage,
    expiry_seconds,
)


__all__ = [
    "CacheSessionIdStrategy",
    "CookieOptions",
    "Session",
    "SessionStorage",
    "expiry_seconds",
]
