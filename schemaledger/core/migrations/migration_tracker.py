"""
Migration Tracker

Tracks which migration scripts have been applied to the database.
"""
import logging
import re
import sqlite3
from typing import Any, List, Optional, Tuple

import asyncpg
from databases import Database

from schemaledger.core.migrations.exceptions import DuplicateEntryError, StatementExecutionError
from schemaledger.core.migrations.migration_models import LedgerEntry

logger = logging.getLogger("schemaledger.migrations.tracker")

DEFAULT_TABLE_NAME = "schema_migrations"

# Optional schema qualifier followed by a table name
TABLE_NAME_PATTERN = re.compile(r"^(?:([A-Za-z_][A-Za-z0-9_]*)\.)?([A-Za-z_][A-Za-z0-9_]*)$")

# (id column, applied_at column) per dialect
COLUMN_TYPES = {
    "postgresql": ("id SERIAL PRIMARY KEY", "applied_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP"),
    "sqlite": ("id INTEGER PRIMARY KEY AUTOINCREMENT", "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"),
    "mysql": ("id INTEGER AUTO_INCREMENT PRIMARY KEY", "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"),
}
DIALECT_ALIASES = {"postgres": "postgresql", "aiosqlite": "sqlite", "aiomysql": "mysql", "asyncmy": "mysql"}


def is_unique_violation(error: BaseException) -> bool:
    """Check whether a driver error is a unique-constraint violation."""
    if isinstance(error, asyncpg.exceptions.UniqueViolationError):
        return True
    if isinstance(error, sqlite3.IntegrityError):
        return "UNIQUE" in str(error).upper()
    # MySQL drivers report duplicate keys as error 1062
    args = getattr(error, "args", ())
    return bool(args) and args[0] == 1062


class MigrationTracker:
    """
    Tracks applied migrations in the ledger table.
    """

    def __init__(self, database: Database, table_name: str = DEFAULT_TABLE_NAME):
        """
        Initialize migration tracker.

        Args:
            database: Database instance
            table_name: Ledger table, optionally schema-qualified (e.g. "maes.migrations")

        Raises:
            ValueError: If the table name is not a plain SQL identifier
        """
        match = TABLE_NAME_PATTERN.match(table_name or "")
        if not match:
            raise ValueError(f"Invalid ledger table name: {table_name!r}")

        self.database = database
        self.table_name = table_name
        self._schema, self._table = match.group(1), match.group(2)

    @property
    def dialect(self) -> str:
        dialect = self.database.url.dialect
        return DIALECT_ALIASES.get(dialect, dialect)

    def _column_types(self) -> Tuple[str, str]:
        return COLUMN_TYPES.get(self.dialect, COLUMN_TYPES["postgresql"])

    async def ensure_table(self) -> None:
        """
        Create the ledger table if it doesn't exist.
        """
        id_column, applied_at_column = self._column_types()
        query = f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            {id_column},
            filename VARCHAR(255) UNIQUE NOT NULL,
            {applied_at_column}
        )
        """

        try:
            await self.database.execute(query)
            logger.info(f"Migrations table ensured: {self.table_name}")
        except Exception as e:
            logger.error(f"Failed to create migrations table {self.table_name}: {e}")
            raise StatementExecutionError(
                f"Could not create ledger table {self.table_name}", cause=e, statement=query.strip()
            ) from e

    async def table_exists(self) -> bool:
        """
        Check whether the ledger table has been created.
        """
        if self.dialect == "sqlite":
            query = "SELECT name FROM sqlite_master WHERE type = 'table' AND name = :table"
            values = {"table": self._table}
        elif self._schema:
            query = (
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = :schema AND table_name = :table"
            )
            values = {"schema": self._schema, "table": self._table}
        else:
            current = "DATABASE()" if self.dialect == "mysql" else "current_schema()"
            query = (
                "SELECT table_name FROM information_schema.tables "
                f"WHERE table_schema = {current} AND table_name = :table"
            )
            values = {"table": self._table}

        row = await self._fetch_one(query, values)
        return row is not None

    async def list_applied(self) -> List[str]:
        """
        Get applied migration filenames.

        Returns:
            Filenames recorded in the ledger, sorted ascending
        """
        rows = await self._fetch_all(f"SELECT filename FROM {self.table_name} ORDER BY filename")
        return [row["filename"] for row in rows]

    async def list_entries(self) -> List[LedgerEntry]:
        """
        Get all ledger entries with their applied timestamps.
        """
        rows = await self._fetch_all(
            f"SELECT filename, applied_at FROM {self.table_name} ORDER BY filename"
        )
        return [LedgerEntry(filename=row["filename"], applied_at=row["applied_at"]) for row in rows]

    async def is_applied(self, filename: str) -> bool:
        """
        Check whether a single migration has been applied.
        """
        row = await self._fetch_one(
            f"SELECT 1 AS applied FROM {self.table_name} WHERE filename = :filename",
            {"filename": filename},
        )
        return row is not None

    async def record_applied(self, filename: str, connection: Optional[Any] = None) -> None:
        """
        Record a migration as successfully applied.

        Args:
            filename: Migration filename
            connection: Connection holding the caller's transaction. When
                omitted the insert runs on the database directly.

        Raises:
            DuplicateEntryError: If the filename is already recorded
            StatementExecutionError: If the insert fails for any other reason
        """
        executor = connection if connection is not None else self.database
        query = f"INSERT INTO {self.table_name} (filename) VALUES (:filename)"

        try:
            await executor.execute(query, {"filename": filename})
        except Exception as e:
            if is_unique_violation(e):
                logger.error(f"Migration {filename} is already recorded in {self.table_name}")
                raise DuplicateEntryError(
                    f"Migration already recorded in {self.table_name}", filename=filename, cause=e
                ) from e
            raise StatementExecutionError(
                "Failed to record migration", filename=filename, cause=e, statement=query
            ) from e

        logger.debug(f"Recorded migration as applied: {filename}")

    async def _fetch_all(self, query: str, values: Optional[dict] = None):
        try:
            return await self.database.fetch_all(query, values)
        except Exception as e:
            logger.error(f"Failed to query migrations table {self.table_name}: {e}")
            raise StatementExecutionError(
                f"Could not read ledger table {self.table_name}", cause=e, statement=query
            ) from e

    async def _fetch_one(self, query: str, values: Optional[dict] = None):
        try:
            return await self.database.fetch_one(query, values)
        except Exception as e:
            logger.error(f"Failed to query migrations table {self.table_name}: {e}")
            raise StatementExecutionError(
                f"Could not read ledger table {self.table_name}", cause=e, statement=query
            ) from e
