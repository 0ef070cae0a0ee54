import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import fx, health
from .services.clock import Clock, utc_now
from .services.rates.base import QuoteSource
from .services.rates.cache_service import build_quote_cache
from .services.rates.errors import RefreshFailed
from .services.rates.providers import BanxicoQuoteSource

logger = logging.getLogger("fx_adapter")


def create_app(
    settings_override: Settings | None = None,
    *,
    quote_source: QuoteSource | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    quote_source / clock: test seams; production uses the Banxico client over a
    shared httpx.AsyncClient and the UTC wall clock.
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One cache per process, built at startup and owned by the app.
        async with httpx.AsyncClient() as client:
            source = quote_source or BanxicoQuoteSource(
                client,
                base_url=settings.banxico_base_url,
                series_id=settings.banxico_series_id,
                token=settings.banxico_token,
                timeout=settings.http_timeout_seconds,
            )
            app.state.quote_cache = build_quote_cache(
                settings, source, clock=clock or utc_now
            )
            if not settings.banxico_token:
                logger.info("no BANXICO_TOKEN configured; calling upstream unauthenticated")
            logger.info(
                "FX adapter ready",
                extra={"series_id": settings.banxico_series_id},
            )
            yield

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(RefreshFailed, errors.refresh_failed_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(fx.router)

    @app.get("/")
    async def root():
        return {"message": "FX Adapter API", "version": settings.version}

    return app


app = create_app()
