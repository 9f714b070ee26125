"""
Migration source, ledger and data models.
"""
from schemaledger.core.migrations.exceptions import (
    DirectoryReadError,
    DuplicateEntryError,
    MigrationError,
    MigrationNotFoundError,
    ScriptReadError,
    StatementExecutionError,
    TransactionError,
)
from schemaledger.core.migrations.migration_models import (
    LedgerEntry,
    MigrationScript,
    MigrationStatusReport,
)
from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.core.migrations.migration_tracker import MigrationTracker
from schemaledger.core.migrations.statements import escape_bind_markers, split_statements

__all__ = [
    "DirectoryReadError",
    "DuplicateEntryError",
    "LedgerEntry",
    "MigrationError",
    "MigrationNotFoundError",
    "MigrationRegistry",
    "MigrationScript",
    "MigrationStatusReport",
    "MigrationTracker",
    "ScriptReadError",
    "StatementExecutionError",
    "TransactionError",
    "escape_bind_markers",
    "split_statements",
]
