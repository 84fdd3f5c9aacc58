"""
FastAPI application factory.

Startup order matters: the schema is migrated before the pool opens, and
the scheduler starts only once storage is ready. Shutdown runs in reverse.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom import __version__
from stockroom.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockroom.api.middleware.error_handler import setup_exception_handlers
from stockroom.api.routes import (
    alerts_router,
    analytics_router,
    health_router,
    inventory_router,
    products_router,
    sales_router,
    trends_router,
    ws_router,
)
from stockroom.config import Settings, configure_logging, get_logger, get_settings
from stockroom.infrastructure.scheduling import JobScheduler

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    products_router,
    inventory_router,
    sales_router,
    analytics_router,
    trends_router,
    alerts_router,
    ws_router,
)


async def _open_storage() -> None:
    from stockroom.infrastructure.storage.sqlite import get_pool
    from stockroom.infrastructure.storage.sqlite.migrations import run_migrations

    results = await run_migrations()
    failed = [r for r in results if not r.success]
    if failed:
        raise RuntimeError(f"Migration v{failed[0].version:03d} failed: {failed[0].error}")

    pool = await get_pool()
    logger.info("storage_ready", db_path=str(pool.db_path), migrations_applied=len(results))


async def _start_scheduler(settings: Settings) -> JobScheduler | None:
    if not settings.scheduler.enabled:
        logger.info("scheduler_disabled")
        return None

    from stockroom.application.services import (
        build_scheduler,
        get_alert_monitor,
        get_forecast_engine,
    )

    scheduler = build_scheduler(
        await get_forecast_engine(),
        await get_alert_monitor(),
        settings,
    )
    scheduler.start()
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Bring storage and background jobs up, then tear them down in reverse."""
    from stockroom.application.services import reset_services
    from stockroom.infrastructure.storage.sqlite import close_storage

    settings = get_settings()
    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        environment=settings.environment,
    )

    try:
        await _open_storage()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    app.state.scheduler = await _start_scheduler(settings)
    logger.info("application_started")

    yield

    logger.info("application_stopping")
    if app.state.scheduler is not None:
        await app.state.scheduler.stop()
        app.state.scheduler = None

    try:
        await close_storage()
    except Exception as e:
        logger.warning("storage_close_failed", error=str(e))

    reset_services()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Stockroom Inventory API",
        description="Stock ledger, demand forecasting and inventory alerts",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )
    app.state.scheduler = None

    # Added last runs first: errors are caught inside the logged span
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials="*" not in settings.api.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "Retry-After"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"name": settings.app_name, "version": __version__, "health": "/api/health"}

    # Container liveness check; no dependencies touched
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
