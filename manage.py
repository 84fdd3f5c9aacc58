#!/usr/bin/env python3
"""
Stockroom management CLI.

Usage:
    python manage.py serve       Start the API server (with background jobs)
    python manage.py migrate     Apply pending database migrations
    python manage.py status      Show migration status and catalog counts
    python manage.py forecast    Run one forecast sweep and exit
    python manage.py alerts      Run one alert sweep and exit
    python manage.py verify      Replay every product's ledger
"""

import argparse
import asyncio
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent


async def _open_storage() -> None:
    from stockroom.infrastructure.storage.sqlite import get_pool
    from stockroom.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations()
    await get_pool()


async def _close_storage() -> None:
    from stockroom.infrastructure.storage.sqlite import close_storage

    await close_storage()


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    print(f"Starting server on {args.host}:{args.port}...")
    print(f"  API docs:  http://{args.host}:{args.port}/docs (debug only)")
    uvicorn.run(
        "stockroom.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from stockroom.infrastructure.storage.sqlite.migrations import (
        initialize_database,
        verify_schema_integrity,
    )

    async def run() -> int:
        results = await initialize_database(create_backup_before=not args.no_backup)
        if not results:
            print("Database is up to date.")
        for result in results:
            label = "SUCCESS" if result.success else "FAILED"
            print(f"[{label}] v{result.version:03d}: {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"         Error: {result.error}")

        failed = [c for c in await verify_schema_integrity() if c["status"] != "PASS"]
        for check in failed:
            print(f"[FAIL] {check['check']}")
        return 1 if failed or any(not r.success for r in results) else 0

    sys.exit(asyncio.run(run()))


def cmd_status(args: argparse.Namespace) -> None:
    from stockroom.infrastructure.storage.sqlite import get_product_store
    from stockroom.infrastructure.storage.sqlite.migrations import get_migration_status

    async def run() -> None:
        status = await get_migration_status()
        print(f"Database exists:    {status['exists']}")
        print(f"Current version:    {status.get('current_version', 'N/A')}")
        print(f"Pending migrations: {status.get('pending_migrations', [])}")
        if status.get("drifted_migrations"):
            print(f"Edited after apply: {status['drifted_migrations']}")
        if not status["exists"] or status.get("pending_migrations"):
            return

        await _open_storage()
        try:
            store = await get_product_store()
            counts = await store.count_by_status()
            print("Active products by status:")
            for product_status, n in sorted(counts.items(), key=lambda kv: kv[0].value):
                print(f"  {product_status.value:<14} {n}")
        finally:
            await _close_storage()

    asyncio.run(run())


def cmd_forecast(args: argparse.Namespace) -> None:
    from stockroom.application.services import get_forecast_engine

    async def run() -> None:
        await _open_storage()
        try:
            engine = await get_forecast_engine()
            if args.product_id is not None:
                outcome = await engine.forecast_product(args.product_id)
                if outcome.skipped:
                    print(
                        f"Product {outcome.product_id}: skipped "
                        f"({outcome.history_size} rows of history)"
                    )
                for record in outcome.records:
                    print(
                        f"{record.forecast_date} {record.algorithm.value:<15} "
                        f"qty={record.quantity} confidence={record.confidence}"
                    )
                return

            result = await engine.run_sweep()
            print(f"Forecasted: {len(result.forecasted)}")
            print(f"Skipped:    {len(result.skipped)}")
            print(f"Failed:     {len(result.failed)}")
            print(f"Records:    {result.records_written}")
        finally:
            await _close_storage()

    asyncio.run(run())


def cmd_alerts(args: argparse.Namespace) -> None:
    from stockroom.application.services import get_alert_monitor

    async def run() -> None:
        await _open_storage()
        try:
            monitor = await get_alert_monitor()
            created = await monitor.run_sweep()
            print(f"Alerts opened: {len(created)}")
            for alert in created:
                print(f"  [{alert.priority.value}] {alert.title}: {alert.message}")
        finally:
            await _close_storage()

    asyncio.run(run())


def cmd_verify(args: argparse.Namespace) -> None:
    from stockroom.application.use_cases import VerifyLedgerUseCase
    from stockroom.infrastructure.storage.sqlite import get_product_store

    async def run() -> int:
        await _open_storage()
        try:
            store = await get_product_store()
            use_case = VerifyLedgerUseCase()
            mismatches = 0
            for product in await store.list_products(active_only=False, limit=100_000):
                result = await use_case.execute(product.id)  # type: ignore[arg-type]
                if not result.consistent:
                    mismatches += 1
                    print(
                        f"[MISMATCH] {product.sku}: recorded {result.recorded_stock}, "
                        f"replayed {result.replayed_stock}"
                    )
            print(f"Ledger mismatches: {mismatches}")
            return 1 if mismatches else 0
        finally:
            await _close_storage()

    sys.exit(asyncio.run(run()))


def main() -> None:
    from stockroom.config import configure_logging

    parser = argparse.ArgumentParser(
        description="Stockroom management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL for this command",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrating")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show database status")
    p_status.set_defaults(func=cmd_status)

    # forecast
    p_forecast = sub.add_parser("forecast", help="Run one forecast sweep")
    p_forecast.add_argument("--product-id", type=int, help="Forecast a single product")
    p_forecast.set_defaults(func=cmd_forecast)

    # alerts
    p_alerts = sub.add_parser("alerts", help="Run one alert sweep")
    p_alerts.set_defaults(func=cmd_alerts)

    # verify
    p_verify = sub.add_parser("verify", help="Replay every product's stock ledger")
    p_verify.set_defaults(func=cmd_verify)

    args = parser.parse_args()
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
