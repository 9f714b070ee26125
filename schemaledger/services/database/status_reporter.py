"""
Status Reporter

Summarises discovered and applied migrations without touching the database.
"""
import logging

from schemaledger.core.migrations.migration_models import MigrationStatusReport
from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.core.migrations.migration_tracker import MigrationTracker

logger = logging.getLogger("schemaledger.database.status")


class StatusReporter:
    """
    Composes the migration source and the ledger into a status report.
    """

    def __init__(self, registry: MigrationRegistry, tracker: MigrationTracker):
        self.registry = registry
        self.tracker = tracker

    async def get_status(self) -> MigrationStatusReport:
        """
        Build the migration status.

        A database whose ledger table has not been created yet reports every
        script as pending. Read errors propagate; no partial report is returned.
        """
        if await self.tracker.table_exists():
            applied = await self.tracker.list_applied()
        else:
            logger.info(f"Ledger table {self.tracker.table_name} does not exist yet")
            applied = []

        scripts = self.registry.list_scripts()
        applied_set = set(applied)
        pending = [name for name in scripts if name not in applied_set]

        return MigrationStatusReport(
            total=len(scripts),
            applied=len(applied),
            pending=len(pending),
            applied_migrations=applied,
            pending_migrations=pending,
        )


def format_status(report: MigrationStatusReport) -> str:
    """Render a status report for the terminal."""
    lines = [
        "Migration Status:",
        f"  Total migrations: {report.total}",
        f"  Applied: {report.applied}",
        f"  Pending: {report.pending}",
    ]
    if report.pending_migrations:
        lines.append(f"  Pending migrations: {', '.join(report.pending_migrations)}")
    return "\n".join(lines)
