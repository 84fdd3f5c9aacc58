"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter, Depends

from stockroom import __version__
from stockroom.api.dependencies import get_hub, get_scheduler
from stockroom.application.dto.responses import HealthResponse, ProviderHealthResponse
from stockroom.core.exceptions import DatabaseError
from stockroom.infrastructure.notifications import WebSocketHub
from stockroom.infrastructure.scheduling import JobScheduler

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    scheduler: JobScheduler | None = Depends(get_scheduler),
    hub: WebSocketHub = Depends(get_hub),
) -> HealthResponse:
    """
    Basic health check.

    Returns service status, uptime and background job state.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        scheduler_running=scheduler.running if scheduler else False,
        websocket_clients=hub.client_count,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Runs a read against the products table through the shared pool and
    reports the round trip together with how many connections are busy.
    """
    from stockroom.infrastructure.storage import sqlite as sqlite_storage

    try:
        pool = await sqlite_storage.get_pool()
        started = time.perf_counter()
        async with pool.acquire() as conn:
            await conn.execute("SELECT COUNT(*) FROM products")
        database = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            connections_in_use=pool.in_use,
            pool_size=pool.pool_size,
        )
    except (DatabaseError, aiosqlite.Error, OSError) as e:
        database = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if database.available else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
