"""
Database services: connection lifecycle, migration runner and status reporting.
"""
from schemaledger.services.database.connection_manager import ConnectionManager
from schemaledger.services.database.migration_runner import MigrationRunner
from schemaledger.services.database.status_reporter import StatusReporter

__all__ = ["ConnectionManager", "MigrationRunner", "StatusReporter"]
