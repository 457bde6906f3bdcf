"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from sitekit.config import Settings
from sitekit.core.cache import CacheClient
from sitekit.core.errors import ServiceUnavailableError
from sitekit.core.metrics import Metrics
from sitekit.core.session import Session, SessionStorage


def get_app_settings(request: Request) -> Settings:
    """Return the settings the app was created with."""
    return request.app.state.settings


def get_metrics(request: Request) -> Metrics:
    """Return the metrics collector created with the app."""
    return request.app.state.metrics


def get_cache(request: Request) -> CacheClient:
    """Return the cache client created at startup.

    Raises:
        ServiceUnavailableError: If startup has not created a cache
    """
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        raise ServiceUnavailableError("Cache is not initialized")
    return cache


def get_session_storage(request: Request) -> SessionStorage:
    """Return the session storage created at startup."""
    storage = getattr(request.app.state, "session_storage", None)
    if storage is None:
        raise ServiceUnavailableError("Session storage is not initialized")
    return storage


async def get_session(
    request: Request,
    storage: Annotated[SessionStorage, Depends(get_session_storage)],
) -> Session:
    """Load the current request's session."""
    return await storage.get_session(request)


AppSettings = Annotated[Settings, Depends(get_app_settings)]
AppMetrics = Annotated[Metrics, Depends(get_metrics)]
Cache = Annotated[CacheClient, Depends(get_cache)]
Sessions = Annotated[SessionStorage, Depends(get_session_storage)]
CurrentSession = Annotated[Session, Depends(get_session)]
