"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from sitekit import __version__
from sitekit.api import api_router
from sitekit.config import EnvConfig, Settings, get_settings
from sitekit.core.cache import RedisClientRegistry, create_cache_client
from sitekit.core.errors import register_exception_handlers
from sitekit.core.logging import configure_logging
from sitekit.core.metrics import Metrics
from sitekit.core.session import CookieOptions, SessionStorage


logger = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    config: EnvConfig | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings; defaults to the cached settings
        config: Environment lookup for the cache backend; defaults to os.environ

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    config = config or EnvConfig()

    configure_logging(
        level=settings.log_level,
        json_output=settings.is_production,
        redact=settings.log_redact,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            environment=settings.environment,
        )

        registry = RedisClientRegistry()
        app.state.redis_registry = registry
        app.state.cache = await create_cache_client(config, registry)
        app.state.session_storage = SessionStorage(
            app.state.cache,
            CookieOptions(
                name=settings.session_cookie_name,
                max_age=settings.session_cookie_max_age,
                secure=settings.session_cookie_secure,
            ),
        )

        yield

        logger.info("application_shutdown")
        await registry.aclose()
        logger.info("redis_registry_closed")

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.metrics = Metrics(settings.app_name, __version__)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
