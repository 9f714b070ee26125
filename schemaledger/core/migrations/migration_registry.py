"""
Migration Registry

Discovers migration scripts from the migrations directory.
"""
import logging
import os
from pathlib import Path
from typing import List, Union

from schemaledger.core.migrations.exceptions import DirectoryReadError, MigrationNotFoundError
from schemaledger.core.migrations.migration_models import MigrationScript

logger = logging.getLogger("schemaledger.migrations.registry")


class MigrationRegistry:
    """
    Enumerates the SQL scripts of a migrations directory.

    Filenames are the migration identity and are ordered lexicographically;
    use a zero-padded numeric or timestamp prefix (001_init.sql) to control
    the application order.
    """

    SCRIPT_EXTENSION = ".sql"

    def __init__(self, migrations_dir: Union[str, Path]):
        """
        Initialize migration registry.

        Args:
            migrations_dir: Path to migrations directory (Settings.MIGRATIONS_DIR)
        """
        self.migrations_dir = str(migrations_dir)

    def list_scripts(self) -> List[str]:
        """
        List migration script filenames.

        Returns:
            Filenames with the script extension, sorted ascending.

        Raises:
            DirectoryReadError: If the directory is missing or unreadable.
        """
        try:
            entries = os.listdir(self.migrations_dir)
        except OSError as e:
            logger.error(f"Failed to read migrations directory {self.migrations_dir}: {e}")
            raise DirectoryReadError(
                f"Cannot read migrations directory {self.migrations_dir}", cause=e
            ) from e

        filenames = sorted(
            name for name in entries
            if name.endswith(self.SCRIPT_EXTENSION)
            and os.path.isfile(os.path.join(self.migrations_dir, name))
        )

        if not filenames:
            logger.warning(f"No migration scripts found in {self.migrations_dir}")
        else:
            logger.debug(f"Discovered {len(filenames)} migrations from {self.migrations_dir}")
        return filenames

    def discover_migrations(self) -> List[MigrationScript]:
        """
        Discover all migration scripts in the migrations directory.

        Returns:
            List of MigrationScript objects in application order.
        """
        return [
            MigrationScript(filename=name, filepath=os.path.join(self.migrations_dir, name))
            for name in self.list_scripts()
        ]

    def get_migration(self, filename: str) -> MigrationScript:
        """
        Get a specific migration by filename.

        Raises:
            MigrationNotFoundError: If no such script exists
        """
        for migration in self.discover_migrations():
            if migration.filename == filename:
                return migration

        raise MigrationNotFoundError(f"Migration {filename} not found", filename=filename)
