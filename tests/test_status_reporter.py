"""
Tests for migration status reporting.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from schemaledger.core.migrations.exceptions import DirectoryReadError, StatementExecutionError
from schemaledger.core.migrations.migration_models import MigrationStatusReport
from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.services.database.status_reporter import StatusReporter, format_status

from conftest import table_names


@pytest.mark.asyncio
async def test_fresh_database_reports_all_pending(reporter, database, write_script):
    write_script("001_init.sql", "CREATE TABLE a (id INTEGER);")
    write_script("002_add_col.sql", "ALTER TABLE a ADD COLUMN b TEXT;")

    status = await reporter.get_status()

    assert status == MigrationStatusReport(
        total=2, applied=0, pending=2,
        applied_migrations=[], pending_migrations=["001_init.sql", "002_add_col.sql"],
    )
    # Status never creates the ledger table
    assert "schema_migrations" not in await table_names(database)


@pytest.mark.asyncio
async def test_end_to_end_run_then_status(runner, reporter, tracker, write_script):
    write_script("001_init.sql", "CREATE TABLE a (id INTEGER);")
    write_script("002_add_col.sql", "ALTER TABLE a ADD COLUMN b TEXT;")

    assert await runner.run_migrations() == ["001_init.sql", "002_add_col.sql"]
    status = await reporter.get_status()

    assert (status.total, status.applied, status.pending) == (2, 2, 0)
    assert status.applied_migrations == ["001_init.sql", "002_add_col.sql"]
    assert status.pending_migrations == []


@pytest.mark.asyncio
async def test_missing_directory_fails_whole_report(tracker, tmp_path):
    await tracker.ensure_table()
    reporter = StatusReporter(MigrationRegistry(tmp_path / "missing"), tracker)

    with pytest.raises(DirectoryReadError):
        await reporter.get_status()


@pytest.mark.asyncio
async def test_ledger_read_failure_propagates(migrations_dir):
    tracker = MagicMock()
    tracker.table_exists = AsyncMock(return_value=True)
    tracker.list_applied = AsyncMock(side_effect=StatementExecutionError("connection refused"))
    reporter = StatusReporter(MigrationRegistry(migrations_dir), tracker)

    with pytest.raises(StatementExecutionError):
        await reporter.get_status()


def test_format_status_lists_pending():
    report = MigrationStatusReport(
        total=2, applied=1, pending=1,
        applied_migrations=["001_init.sql"], pending_migrations=["002_add_col.sql"],
    )

    text = format_status(report)

    assert "Total migrations: 2" in text
    assert "Applied: 1" in text
    assert "Pending: 1" in text
    assert "Pending migrations: 002_add_col.sql" in text


def test_format_status_without_pending():
    report = MigrationStatusReport(total=1, applied=1, pending=0, applied_migrations=["001_init.sql"])

    assert "Pending migrations" not in format_status(report)


def test_report_to_dict():
    report = MigrationStatusReport(total=1, applied=0, pending=1, pending_migrations=["001_init.sql"])

    assert report.to_dict() == {
        "total": 1,
        "applied": 0,
        "pending": 1,
        "applied_migrations": [],
        "pending_migrations": ["001_init.sql"],
    }
