"""Tests for cache-backed session storage."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import Response

from sitekit.core.cache import CacheClient, create_file_cache_client
from sitekit.core.session import (
    CacheSessionIdStrategy,
    CookieOptions,
    Session,
    SessionStorage,
    expiry_seconds,
)


def make_request(cookie: str | None = None) -> Request:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def cache() -> AsyncMock:
    return AsyncMock(spec=CacheClient)


@pytest.fixture
def strategy(cache: AsyncMock) -> CacheSessionIdStrategy:
    return CacheSessionIdStrategy(cache)


class TestExpirySeconds:
    """Tests for cookie expiry to TTL conversion."""

    def test_none_without_expiry(self):
        assert expiry_seconds(None) is None

    def test_rounds_up(self):
        expires = datetime.now(UTC) + timedelta(seconds=120)

        assert expiry_seconds(expires) == 120

    def test_partial_second_rounds_up(self):
        expires = datetime.now(UTC) + timedelta(seconds=9, milliseconds=500)

        assert expiry_seconds(expires) == 10


class TestCacheSessionIdStrategy:
    """Tests for the session id strategy against a mocked cache."""

    @pytest.mark.asyncio
    async def test_create_data(self, strategy: CacheSessionIdStrategy, cache: AsyncMock):
        data = {"one": 1}

        session_id = await strategy.create_data(data)

        assert len(session_id) == 16
        int(session_id, 16)
        cache.set.assert_awaited_once_with(
            f"session:{session_id}", json.dumps(data), None
        )

    @pytest.mark.asyncio
    async def test_create_data_ids_are_random(self, strategy: CacheSessionIdStrategy):
        first = await strategy.create_data({})
        second = await strategy.create_data({})

        assert first != second

    @pytest.mark.asyncio
    async def test_create_data_with_expiry(
        self, strategy: CacheSessionIdStrategy, cache: AsyncMock
    ):
        expires = datetime.now(UTC) + timedelta(seconds=60)

        session_id = await strategy.create_data({"one": 1}, expires)

        cache.set.assert_awaited_once_with(
            f"session:{session_id}", json.dumps({"one": 1}), 60
        )

    @pytest.mark.asyncio
    async def test_delete_data(self, strategy: CacheSessionIdStrategy, cache: AsyncMock):
        await strategy.delete_data("123")

        cache.delete.assert_awaited_once_with("session:123")

    @pytest.mark.asyncio
    async def test_read_data(self, strategy: CacheSessionIdStrategy, cache: AsyncMock):
        data = {"key": "value"}
        cache.get.return_value = json.dumps(data)

        assert await strategy.read_data("321") == data
        cache.get.assert_awaited_once_with("session:321")

    @pytest.mark.asyncio
    async def test_read_missing_data(
        self, strategy: CacheSessionIdStrategy, cache: AsyncMock
    ):
        cache.get.return_value = None

        assert await strategy.read_data("456") is None

    @pytest.mark.asyncio
    async def test_update_data(self, strategy: CacheSessionIdStrategy, cache: AsyncMock):
        data = {"key": "new"}
        expires = datetime.now(UTC) + timedelta(seconds=120)

        await strategy.update_data("654", data, expires)

        cache.set.assert_awaited_once_with("session:654", json.dumps(data), 120)


class TestSessionLifecycle:
    """Tests for the strategy against a real file cache."""

    @pytest.mark.asyncio
    async def test_create_read_update_delete(self, cache_file: Path):
        strategy = CacheSessionIdStrategy(await create_file_cache_client(cache_file))

        session_id = await strategy.create_data({"a": 1})
        assert await strategy.read_data(session_id) == {"a": 1}

        future = datetime.now(UTC) + timedelta(hours=1)
        await strategy.update_data(session_id, {"a": 2}, future)
        assert await strategy.read_data(session_id) == {"a": 2}

        await strategy.delete_data(session_id)
        assert await strategy.read_data(session_id) is None


class TestSessionStorage:
    """Tests for cookie-bound session handling."""

    @pytest.fixture
    async def storage(self, cache_file: Path) -> SessionStorage:
        return SessionStorage(await create_file_cache_client(cache_file))

    @pytest.mark.asyncio
    async def test_new_session_without_cookie(self, storage: SessionStorage):
        session = await storage.get_session(make_request())

        assert session == Session()

    @pytest.mark.asyncio
    async def test_unknown_session_id_gives_new_session(self, storage: SessionStorage):
        session = await storage.get_session(make_request("__session=deadbeef"))

        assert session.id == ""
        assert session.data == {}

    @pytest.mark.asyncio
    async def test_commit_sets_cookie(self, storage: SessionStorage):
        """Test that committing a new session stores it and sets the cookie."""
        session = Session()
        session.set("user_id", 42)
        response = Response()

        await storage.commit_session(response, session)

        cookie = response.headers["set-cookie"]
        assert session.id
        assert cookie.startswith(f"__session={session.id};")
        assert "HttpOnly" in cookie
        assert "Max-Age=28800" in cookie
        assert "Path=/" in cookie
        assert "SameSite=lax" in cookie
        assert "Secure" in cookie

    @pytest.mark.asyncio
    async def test_commit_then_get_round_trip(self, storage: SessionStorage):
        session = Session()
        session.set("user_id", 42)
        await storage.commit_session(Response(), session)

        loaded = await storage.get_session(make_request(f"__session={session.id}"))

        assert loaded.id == session.id
        assert loaded.get("user_id") == 42

    @pytest.mark.asyncio
    async def test_commit_existing_session_keeps_id(self, storage: SessionStorage):
        session = Session()
        await storage.commit_session(Response(), session)
        session_id = session.id

        session.set("theme", "dark")
        await storage.commit_session(Response(), session)

        loaded = await storage.get_session(make_request(f"__session={session_id}"))
        assert session.id == session_id
        assert loaded.data == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_commit_uses_max_age_as_ttl(self):
        cache = AsyncMock(spec=CacheClient)
        storage = SessionStorage(cache, CookieOptions(max_age=300))

        await storage.commit_session(Response(), Session())

        assert cache.set.await_args.args[2] in (299, 300)

    @pytest.mark.asyncio
    async def test_commit_without_max_age_has_no_ttl(self):
        cache = AsyncMock(spec=CacheClient)
        storage = SessionStorage(cache, CookieOptions(max_age=None))

        await storage.commit_session(Response(), Session())

        assert cache.set.await_args.args[2] is None

    @pytest.mark.asyncio
    async def test_destroy_session(self, storage: SessionStorage):
        session = Session()
        session.set("user_id", 42)
        await storage.commit_session(Response(), session)
        session_id = session.id
        response = Response()

        await storage.destroy_session(response, session)

        assert session == Session()
        assert await storage.strategy.read_data(session_id) is None
        assert response.headers["set-cookie"].startswith('__session="";')

    @pytest.mark.asyncio
    async def test_custom_cookie_name(self, cache_file: Path):
        storage = SessionStorage(
            await create_file_cache_client(cache_file),
            CookieOptions(name="sid", secure=False),
        )
        response = Response()

        await storage.commit_session(response, Session())

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("sid=")
        assert "Secure" not in cookie


class TestSession:
    """Tests for Session helpers."""

    def test_get_set_unset(self):
        session = Session()
        session.set("a", 1)

        assert session.has("a")
        assert session.get("a") == 1

        session.unset("a")
        session.unset("missing")

        assert not session.has("a")
        assert session.get("a", "default") == "default"
