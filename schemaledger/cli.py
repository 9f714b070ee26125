#!/usr/bin/env python3
"""
Command-line entry point.

Usage: schemaledger [run|status]
  run    - Run all pending migrations (default)
  status - Show migration status
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Tuple

from databases import Database

from schemaledger.config import Settings, settings as default_settings
from schemaledger.core.migrations.exceptions import MigrationError
from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.core.migrations.migration_tracker import MigrationTracker
from schemaledger.logging_config import configure_logging
from schemaledger.services.database.connection_manager import ConnectionManager
from schemaledger.services.database.migration_runner import MigrationRunner
from schemaledger.services.database.status_reporter import StatusReporter, format_status

logger = logging.getLogger("schemaledger.cli")

COMMANDS = ("run", "status")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemaledger",
        description="Apply pending SQL migrations and report migration status",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=COMMANDS,
        help="run: apply all pending migrations (default); status: show migration status",
    )
    parser.add_argument("--migrations-dir", help="Directory holding the *.sql scripts")
    parser.add_argument("--database-url", help="Overrides the DATABASE_URL environment variable")
    return parser


def build_components(
    database: Database, settings: Settings, migrations_dir: Optional[str] = None
) -> Tuple[MigrationRunner, StatusReporter]:
    registry = MigrationRegistry(migrations_dir or settings.MIGRATIONS_DIR)
    tracker = MigrationTracker(database, settings.MIGRATIONS_TABLE)
    return MigrationRunner(database, registry, tracker), StatusReporter(registry, tracker)


async def execute(args: argparse.Namespace, settings: Settings) -> int:
    """
    Run one command against the database and return the exit status.
    """
    manager = ConnectionManager(args.database_url, settings=settings)
    try:
        database = await manager.connect()
        runner, reporter = build_components(database, settings, args.migrations_dir)

        if args.command == "status":
            report = await reporter.get_status()
            print(format_status(report))
        else:
            await runner.run_migrations()
        return 0
    except MigrationError as e:
        logger.critical(f"Migration command '{args.command}' failed: {e}")
        return 1
    except Exception as e:
        logger.critical(f"Migration command '{args.command}' failed: {e}", exc_info=True)
        return 1
    finally:
        await manager.disconnect()


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    settings = settings or default_settings
    args = build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    if not (args.database_url or settings.DATABASE_URL):
        logger.critical("DATABASE_URL is not set")
        return 1

    return asyncio.run(execute(args, settings))


if __name__ == "__main__":
    sys.exit(main())
