"""Cache-backed HTTP session storage.

Session payloads live in the cache under ``session:<id>``; the browser only
holds the id in a cookie. Cookie expiry is translated into a cache TTL so
both expire together.
"""

import json
import math
import secrets
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import structlog
from pydantic import BaseModel
from starlette.requests import HTTPConnection
from starlette.responses import Response

from sitekit.core.cache.base import CacheClient
from sitekit.core.constants import (
    SESSION_COOKIE_MAX_AGE_SECONDS,
    SESSION_COOKIE_NAME,
    SESSION_ID_BYTES,
    SESSION_KEY_PREFIX,
)


logger = structlog.get_logger()


def expiry_seconds(expires: datetime | None) -> int | None:
    """Seconds from now until ``expires``, rounded up; None without a date."""
    if expires is None:
        return None
    return math.ceil(expires.timestamp() - time.time())


def session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


class CacheSessionIdStrategy:
    """Stores session payloads in a ``CacheClient``.

    A non-positive TTL (the expiry is already in the past) is passed to the
    cache as-is, which stores the payload without an expiry.
    """

    def __init__(self, cache: CacheClient) -> None:
        self.cache = cache

    async def create_data(
        self, data: dict[str, Any], expires: datetime | None = None
    ) -> str:
        """Store a new payload and return its random hex id."""
        session_id = secrets.token_hex(SESSION_ID_BYTES)
        await self.cache.set(
            session_key(session_id), json.dumps(data), expiry_seconds(expires)
        )
        return session_id

    async def read_data(self, session_id: str) -> dict[str, Any] | None:
        data = await self.cache.get(session_key(session_id))
        return json.loads(data) if data else None

    async def update_data(
        self, session_id: str, data: dict[str, Any], expires: datetime | None = None
    ) -> None:
        await self.cache.set(
            session_key(session_id), json.dumps(data), expiry_seconds(expires)
        )

    async def delete_data(self, session_id: str) -> None:
        await self.cache.delete(session_key(session_id))


class CookieOptions(BaseModel):
    """Session cookie attributes."""

    name: str = SESSION_COOKIE_NAME
    http_only: bool = True
    max_age: int | None = SESSION_COOKIE_MAX_AGE_SECONDS
    path: str = "/"
    same_site: Literal["lax", "strict", "none"] = "lax"
    secure: bool = True
    domain: str | None = None


@dataclass
class Session:
    """A session's id and payload. An empty id means not yet stored."""

    id: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def unset(self, key: str) -> None:
        self.data.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self.data


class SessionStorage:
    """Bind cache-stored sessions to a cookie.

    Usage:
        storage = SessionStorage(cache)

        session = await storage.get_session(request)
        session.set("user_id", 42)
        await storage.commit_session(response, session)
    """

    def __init__(self, cache: CacheClient, cookie: CookieOptions | None = None) -> None:
        self.strategy = CacheSessionIdStrategy(cache)
        self.cookie = cookie or CookieOptions()

    def _expires(self) -> datetime | None:
        if self.cookie.max_age is None:
            return None
        return datetime.now(UTC) + timedelta(seconds=self.cookie.max_age)

    async def get_session(self, connection: HTTPConnection) -> Session:
        """Load the session named by the request cookie, or a new empty one."""
        session_id = connection.cookies.get(self.cookie.name)
        if not session_id:
            return Session()

        data = await self.strategy.read_data(session_id)
        if data is None:
            logger.debug("session_not_found", session_id=session_id[:8] + "...")
            return Session()

        return Session(id=session_id, data=data)

    async def commit_session(self, response: Response, session: Session) -> None:
        """Persist ``session`` and set its cookie on ``response``."""
        expires = self._expires()

        if session.id:
            await self.strategy.update_data(session.id, session.data, expires)
        else:
            session.id = await self.strategy.create_data(session.data, expires)

        response.set_cookie(
            key=self.cookie.name,
            value=session.id,
            max_age=self.cookie.max_age,
            expires=expires,
            path=self.cookie.path,
            domain=self.cookie.domain,
            secure=self.cookie.secure,
            httponly=self.cookie.http_only,
            samesite=self.cookie.same_site,
        )

    async def destroy_session(self, response: Response, session: Session) -> None:
        """Delete ``session`` from the cache and expire its cookie."""
        if session.id:
            await self.strategy.delete_data(session.id)
            session.id = ""
        session.data.clear()

        response.delete_cookie(
            key=self.cookie.name,
            path=self.cookie.path,
            domain=self.cookie.domain,
            secure=self.cookie.secure,
            httponly=self.cookie.http_only,
            samesite=self.cookie.same_site,
        )
