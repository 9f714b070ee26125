"""
Migration Models

Data models for migration scripts, ledger entries and status reports.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from schemaledger.core.migrations.exceptions import ScriptReadError


@dataclass(frozen=True)
class MigrationScript:
    """
    A versioned SQL script discovered in the migrations directory.

    The filename is both the identity and the sort key of the script.
    """
    filename: str
    filepath: str

    def read_sql(self) -> str:
        """
        Read the raw SQL text of the script.

        Raises:
            ScriptReadError: If the file cannot be read or decoded.
        """
        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptReadError(
                f"Could not read migration script {self.filepath}",
                filename=self.filename,
                cause=e,
            ) from e

    def __str__(self) -> str:
        return f"Migration({self.filename})"


@dataclass
class LedgerEntry:
    """One row of the ledger table."""
    filename: str
    applied_at: Optional[datetime] = None


@dataclass
class MigrationStatusReport:
    """
    Summary of discovered and applied migrations.
    """
    total: int
    applied: int
    pending: int
    applied_migrations: List[str] = field(default_factory=list)
    pending_migrations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "applied": self.applied,
            "pending": self.pending,
            "applied_migrations": list(self.applied_migrations),
            "pending_migrations": list(self.pending_migrations),
        }
