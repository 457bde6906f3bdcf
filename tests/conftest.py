"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from sitekit.config import EnvConfig, Settings
from sitekit.core.cache import file as file_cache
from sitekit.main import create_app


class FakeClock:
    """Controllable millisecond clock for expiry tests."""

    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def cache_file(tmp_path: Path) -> Path:
    """Path for a cache file that does not exist yet."""
    return tmp_path / "cache.json"


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Freeze the file cache clock; advance it with ``clock.advance(ms)``."""
    fake = FakeClock()
    monkeypatch.setattr(file_cache, "_now_ms", fake)
    return fake


@pytest.fixture
def log() -> MagicMock:
    """Stand-in structlog logger recording calls."""
    return MagicMock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        app_name="sitekit-test",
        environment="test",
        session_cookie_secure=False,
    )


@pytest.fixture
def app_factory(
    settings: Settings, cache_file: Path
) -> Callable[..., FastAPI]:
    def factory(**environ: str) -> FastAPI:
        config = EnvConfig({"CACHE_FILE": str(cache_file), **environ})
        return create_app(settings=settings, config=config)

    return factory


@pytest.fixture
def app(app_factory: Callable[..., FastAPI]) -> FastAPI:
    return app_factory()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with its lifespan running."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
