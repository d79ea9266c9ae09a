import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.endpoints.health import router as health_router
from app.api.errors import register_exception_handlers
from app.api.main import api_router
from app.api.middleware import AccessLogMiddleware, InboundRateLimitMiddleware, RequestIDMiddleware
from app.core.config import Settings, get_settings
from app.core.log_config import configure_logging
from app.core.security import redact_secret
from app.services.container import Services, build_services

from .version import __version__


async def sweep_periodically(services: Services, interval: float) -> None:
    """Drop expired cache entries and idle inbound-limit clients every ``interval`` seconds."""
    while True:
        await asyncio.sleep(interval)
        services.cache.sweep()
        if services.inbound_limiter is not None:
            services.inbound_limiter.prune()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    services: Services = app.state.services
    settings = services.settings

    for name, key in (("TMDB_API_KEY", settings.TMDB_API_KEY), ("OMDB_API_KEY", settings.OMDB_API_KEY)):
        if key:
            logger.info(f"{name} configured ({redact_secret(key)})")
        else:
            logger.warning(f"{name} is not set, provider calls will be rejected upstream")

    sweeper = None
    if settings.CACHE_SWEEP_INTERVAL_SECONDS > 0:
        sweeper = asyncio.create_task(sweep_periodically(services, settings.CACHE_SWEEP_INTERVAL_SECONDS))

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await services.close()
    logger.info("Provider clients closed")


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="ReelScout",
        description="Movie and TV metadata, watchlists and recommendations",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if settings.APP_ENV != "development" else "/docs",
        redoc_url=None if settings.APP_ENV != "development" else "/redoc",
    )
    app.state.services = services or build_services(settings)

    # the last middleware added runs first
    if app.state.services.inbound_limiter is not None:
        app.add_middleware(InboundRateLimitMiddleware, limiter=app.state.services.inbound_limiter)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(api_router)
    return app


app = create_app()
