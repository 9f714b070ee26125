"""Shared fixtures: a file-backed SQLite database and a scratch migrations directory."""
from pathlib import Path

import pytest
from databases import Database

from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.core.migrations.migration_tracker import MigrationTracker
from schemaledger.services.database.migration_runner import MigrationRunner
from schemaledger.services.database.status_reporter import StatusReporter


@pytest.fixture
def migrations_dir(tmp_path) -> Path:
    path = tmp_path / "migrations"
    path.mkdir()
    return path


@pytest.fixture
def write_script(migrations_dir):
    """Write a migration script into the scratch directory."""
    def _write(filename: str, sql: str) -> Path:
        path = migrations_dir / filename
        path.write_text(sql, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def database(database_url):
    """Connected database, disconnected after the test."""
    db = Database(database_url)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def registry(migrations_dir) -> MigrationRegistry:
    return MigrationRegistry(migrations_dir)


@pytest.fixture
def tracker(database) -> MigrationTracker:
    return MigrationTracker(database)


@pytest.fixture
def runner(database, registry, tracker) -> MigrationRunner:
    return MigrationRunner(database, registry, tracker)


@pytest.fixture
def reporter(registry, tracker) -> StatusReporter:
    return StatusReporter(registry, tracker)


async def table_names(database: Database) -> set:
    rows = await database.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row["name"] for row in rows}
