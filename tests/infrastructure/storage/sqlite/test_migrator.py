"""Unit tests for the schema migrator."""

import shutil
from pathlib import Path

import aiosqlite
import pytest

from stockroom.infrastructure.storage.sqlite.migrations.migrator import (
    MIGRATIONS_DIR,
    REQUIRED_TABLES,
    Migration,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Copy of the bundled migrations that tests may extend."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        shutil.copy(path, directory / path.name)
    return directory


class TestDiscovery:
    """Tests for Migration.load() and discover_migrations()."""

    def test_load_parses_filename(self, tmp_path: Path):
        path = tmp_path / "v012_add_suppliers.sql"
        path.write_text("SELECT 1;")

        migration = Migration.load(path)

        assert migration.version == 12
        assert migration.name == "add_suppliers"
        assert migration.label == "v012_add_suppliers"
        assert len(migration.checksum) == 16

    def test_load_rejects_bad_name(self, tmp_path: Path):
        path = tmp_path / "initial.sql"
        path.write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Invalid migration filename"):
            Migration.load(path)

    def test_ordered_and_invalid_ignored(self, tmp_path: Path):
        (tmp_path / "v010_third.sql").write_text("SELECT 3;")
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "vbad.sql").write_text("SELECT 4;")

        assert [m.version for m in discover_migrations(tmp_path)] == [1, 2, 10]

    def test_duplicate_version_rejected(self, tmp_path: Path):
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "v001_again.sql").write_text("SELECT 2;")

        with pytest.raises(ValueError, match="Duplicate"):
            discover_migrations(tmp_path)

    def test_bundled_schema_is_first(self):
        assert discover_migrations()[0].label == "v001_initial_schema"


class TestInitializeDatabase:
    """Tests for initialize_database()."""

    async def test_creates_schema(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [r.version for r in results] == [1, 2]
        assert all(r.success for r in results)
        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
            assert set(REQUIRED_TABLES) <= tables
            assert 1 in await get_applied_migrations(conn)

    async def test_up_to_date_is_a_no_op(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        assert await initialize_database(temp_db_path) == []
        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_new_migration_applied_and_backup_removed(
        self, temp_db_path: Path, migrations_dir: Path
    ):
        await initialize_database(temp_db_path, migrations_dir=migrations_dir)
        (migrations_dir / "v003_supplier_notes.sql").write_text(
            "ALTER TABLE products ADD COLUMN supplier_note TEXT;"
        )

        results = await initialize_database(temp_db_path, migrations_dir=migrations_dir)

        assert [(r.version, r.success) for r in results] == [(3, True)]
        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_failed_migration_restores_backup(
        self, temp_db_path: Path, migrations_dir: Path
    ):
        await initialize_database(temp_db_path, migrations_dir=migrations_dir)
        (migrations_dir / "v003_broken.sql").write_text(
            "ALTER TABLE products ADD COLUMN half_done TEXT;\nTHIS IS NOT SQL;"
        )

        results = await initialize_database(temp_db_path, migrations_dir=migrations_dir)

        assert results[-1].success is False
        assert results[-1].error
        async with aiosqlite.connect(temp_db_path) as conn:
            assert sorted(await get_applied_migrations(conn)) == [1, 2]
            cursor = await conn.execute("PRAGMA table_info(products)")
            columns = {row[1] for row in await cursor.fetchall()}
        assert "half_done" not in columns


class TestStatusAndIntegrity:
    """Tests for get_migration_status() and verify_schema_integrity()."""

    async def test_status_missing_database(self, temp_db_path: Path):
        status = await get_migration_status(temp_db_path)

        assert status["exists"] is False
        assert status["pending_migrations"] == [1, 2]

    async def test_status_reports_drift(self, temp_db_path: Path, migrations_dir: Path):
        await initialize_database(temp_db_path, migrations_dir=migrations_dir)
        schema = migrations_dir / "v001_initial_schema.sql"
        schema.write_text(schema.read_text() + "\n-- edited after release\n")

        status = await get_migration_status(temp_db_path, migrations_dir=migrations_dir)

        assert status["current_version"] == 2
        assert status["pending_migrations"] == []
        assert status["drifted_migrations"] == [1]

    async def test_integrity_passes(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        checks = await verify_schema_integrity(temp_db_path)

        assert {c["check"]: c["status"] for c in checks} == {
            "integrity": "PASS",
            "foreign_keys": "PASS",
            "required_tables": "PASS",
            "ledger_triggers": "PASS",
        }

    async def test_missing_ledger_trigger_fails(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute("DROP TRIGGER trg_movements_no_delete")
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(temp_db_path)}

        assert checks["ledger_triggers"]["status"] == "FAIL"
        assert checks["ledger_triggers"]["missing"] == ["trg_movements_no_delete"]

    async def test_ledger_is_append_only(self, temp_db_path: Path):
        """Triggers reject edits and deletes of movement rows."""
        await initialize_database(temp_db_path, create_backup_before=False)

        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute(
                "INSERT INTO products (name, category, sku) VALUES ('A', 'C', 'A-1')"
            )
            await conn.execute(
                "INSERT INTO stock_movements (product_id, movement_type, quantity) "
                "VALUES (1, 'IN', 5)"
            )
            await conn.commit()

            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute("UPDATE stock_movements SET quantity = 6")
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute("DELETE FROM stock_movements")
