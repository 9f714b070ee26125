"""
Migration Runner

Executes pending database migrations in order, one transaction per script.
"""
import logging
from typing import List

from databases import Database

from schemaledger.core.migrations.exceptions import (
    MigrationError,
    StatementExecutionError,
    TransactionError,
)
from schemaledger.core.migrations.migration_models import MigrationScript
from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.core.migrations.migration_tracker import MigrationTracker
from schemaledger.core.migrations.statements import escape_bind_markers, split_statements

logger = logging.getLogger("schemaledger.database.migrations")


class MigrationRunner:
    """
    Discovers and executes pending database migrations.

    A script is applied together with its ledger entry inside a single
    transaction, so the ledger only ever lists scripts that ran completely.
    The first failing script aborts the run; later scripts are not attempted.
    """

    def __init__(self, database: Database, registry: MigrationRegistry, tracker: MigrationTracker):
        """
        Initialize migration runner.

        Args:
            database: Database instance used to execute the scripts
            registry: Source of migration scripts
            tracker: Ledger of applied migrations
        """
        self.database = database
        self.registry = registry
        self.tracker = tracker

    async def pending_migrations(self) -> List[MigrationScript]:
        """
        Scripts present in the migrations directory but absent from the ledger.
        """
        applied = set(await self.tracker.list_applied())
        all_migrations = self.registry.discover_migrations()
        return [m for m in all_migrations if m.filename not in applied]

    async def apply_migration(self, migration: MigrationScript) -> None:
        """
        Execute a single migration and record it in the ledger.

        Args:
            migration: Migration to execute

        Raises:
            StatementExecutionError: If a statement or the ledger insert fails
            DuplicateEntryError: If the ledger already holds this filename
            TransactionError: If the transaction cannot be started or committed
        """
        sql_content = migration.read_sql()
        statements = split_statements(sql_content)

        logger.info(f"Running migration: {migration.filename} ({len(statements)} statements)")

        # Every statement and the ledger insert must share one connection.
        async with self.database.connection() as connection:
            transaction = connection.transaction()
            try:
                await transaction.start()
            except Exception as e:
                raise TransactionError(
                    "Failed to begin transaction", filename=migration.filename, cause=e
                ) from e

            try:
                for i, statement in enumerate(statements, 1):
                    try:
                        await connection.execute(escape_bind_markers(statement))
                        logger.debug(f"  Executed statement {i}/{len(statements)}")
                    except Exception as e:
                        raise StatementExecutionError(
                            f"Failed to execute statement {i}/{len(statements)}",
                            filename=migration.filename,
                            cause=e,
                            statement_index=i,
                            statement=statement,
                        ) from e

                await self.tracker.record_applied(migration.filename, connection=connection)
            except BaseException:
                await self._rollback(transaction, migration)
                raise

            try:
                await transaction.commit()
            except Exception as e:
                await self._rollback(transaction, migration)
                raise TransactionError(
                    "Failed to commit transaction", filename=migration.filename, cause=e
                ) from e

        logger.info(f"Migration completed successfully: {migration.filename}")

    async def _rollback(self, transaction, migration: MigrationScript) -> None:
        try:
            await transaction.rollback()
            logger.warning(f"Rolled back migration: {migration.filename}")
        except Exception as e:
            # The original failure is what the caller needs to see.
            logger.error(f"Rollback failed for migration {migration.filename}: {e}")

    async def run_migrations(self) -> List[str]:
        """
        Discover and run all pending migrations.

        This method:
        1. Creates the ledger table if needed
        2. Reads the ledger and discovers all scripts
        3. Filters to pending scripts, keeping filename order
        4. Applies them one at a time, stopping at the first failure

        Returns:
            Filenames applied by this run, in order. Empty if nothing was pending.

        Raises:
            MigrationError: The first failure; no further scripts are attempted
        """
        await self.tracker.ensure_table()

        pending = await self.pending_migrations()
        if not pending:
            logger.info("No pending migrations")
            return []

        logger.info(f"Found {len(pending)} pending migrations: {[m.filename for m in pending]}")

        applied: List[str] = []
        for migration in pending:
            try:
                await self.apply_migration(migration)
            except MigrationError as e:
                logger.error(f"Migration failed: {migration.filename}: {e}")
                raise
            except Exception as e:
                # Connection acquisition errors surface here unwrapped
                logger.error(f"Migration failed: {migration.filename}: {e}")
                raise StatementExecutionError(
                    "Migration failed", filename=migration.filename, cause=e
                ) from e
            applied.append(migration.filename)

        logger.info(f"✅ All pending migrations completed successfully ({len(applied)} applied)")
        return applied
