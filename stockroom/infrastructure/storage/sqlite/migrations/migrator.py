"""
Versioned schema migrations.

Migration files are named vNNN_description.sql and applied in version
order. Each applied version is recorded in schema_migrations together with
a checksum of its SQL so later edits to an applied file can be reported.
An existing database is snapshotted with the SQLite online backup API
before anything runs and restored if a migration fails.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from stockroom.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"^v(\d{3,})_(\w+)\.sql$")

REQUIRED_TABLES = (
    "products",
    "reorder_points",
    "stock_movements",
    "sales_data",
    "forecast_data",
    "alerts",
    "trend_data",
    "schema_migrations",
)

# Guards that keep the movement ledger append-only
LEDGER_TRIGGERS = ("trg_movements_no_update", "trg_movements_no_delete")

SCHEMA_MIGRATIONS_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now')),
    execution_time_ms INTEGER
)
"""


@dataclass(frozen=True)
class Migration:
    """One migration file."""

    version: int
    name: str
    sql: str
    checksum: str

    @property
    def label(self) -> str:
        return f"v{self.version:03d}_{self.name}"

    @classmethod
    def load(cls, path: Path) -> "Migration":
        match = FILENAME_PATTERN.match(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        sql = path.read_text(encoding="utf-8")
        return cls(
            version=int(match.group(1)),
            name=match.group(2),
            sql=sql,
            checksum=hashlib.sha256(sql.encode()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: int
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Migration files in `directory`, lowest version first."""
    migrations: dict[int, Migration] = {}
    for path in directory.glob("v*.sql"):
        try:
            migration = Migration.load(path)
        except ValueError as e:
            logger.warning("migration_file_ignored", path=str(path), error=str(e))
            continue
        if migration.version in migrations:
            raise ValueError(f"Duplicate migration version {migration.version:03d}")
        migrations[migration.version] = migration
    return [migrations[v] for v in sorted(migrations)]


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[int, str]:
    """Applied versions mapped to the checksum they were applied with."""
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    started = time.perf_counter()
    try:
        await conn.executescript(migration.sql)
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", migration=migration.label, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info("migration_applied", migration=migration.label, execution_time_ms=elapsed)
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def _snapshot(source: Path, target: Path) -> None:
    async with aiosqlite.connect(source) as src, aiosqlite.connect(target) as dst:
        await src.backup(dst)


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Apply every pending migration.

    Stops at the first failure. Returns the results of the migrations
    attempted in this run; an up-to-date database yields [].
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
    pending = [m for m in discover_migrations(migrations_dir) if m.version not in applied]

    for migration in discover_migrations(migrations_dir):
        if migration.version in applied and applied[migration.version] != migration.checksum:
            logger.warning("migration_checksum_drift", migration=migration.label)

    if not pending:
        logger.info("database_up_to_date", db_path=str(db_path))
        return []

    backup_path: Path | None = None
    if create_backup_before and applied:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix}")
        await _snapshot(db_path, backup_path)
        logger.info("database_backup_created", backup_path=str(backup_path))

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute(SCHEMA_MIGRATIONS_DDL)
        await conn.commit()

        for migration in pending:
            result = await _apply(conn, migration)
            results.append(result)
            if not result.success:
                break

    if backup_path is not None:
        if results[-1].success:
            backup_path.unlink()
        else:
            await _snapshot(backup_path, db_path)
            logger.warning("database_restored_from_backup", backup_path=str(backup_path))

    logger.info(
        "database_migrated",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


run_migrations = initialize_database


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> dict:
    """Current version, pending versions and applied files whose SQL changed."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations(migrations_dir)

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
            "drifted_migrations": [],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": sorted(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "drifted_migrations": [
            m.version
            for m in discovered
            if m.version in applied and applied[m.version] != m.checksum
        ],
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """SQLite integrity, foreign keys, required tables and ledger guards."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = len(await cursor.fetchall())

        cursor = await conn.execute("SELECT type, name FROM sqlite_master")
        objects = {(row[0], row[1]) for row in await cursor.fetchall()}

    missing_tables = [t for t in REQUIRED_TABLES if ("table", t) not in objects]
    missing_triggers = [t for t in LEDGER_TRIGGERS if ("trigger", t) not in objects]

    def check(name: str, ok: bool, **extra) -> dict:
        return {"check": name, "status": "PASS" if ok else "FAIL", **extra}

    return [
        check("integrity", integrity == "ok", result=integrity),
        check("foreign_keys", fk_violations == 0, violations=fk_violations),
        check("required_tables", not missing_tables, missing=missing_tables),
        check("ledger_triggers", not missing_triggers, missing=missing_triggers),
    ]
