"""
Migration Exceptions
"""
from typing import Optional


class MigrationError(Exception):
    """Base exception for migration errors"""

    def __init__(
        self,
        message: str,
        filename: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.cause = cause

    def __str__(self) -> str:
        text = self.message
        if self.filename and self.filename not in text:
            text = f"{text} [{self.filename}]"
        if self.cause is not None:
            text = f"{text}: {self.cause}"
        return text


class DirectoryReadError(MigrationError):
    """Raised when the migrations directory is missing or unreadable"""
    pass


class ScriptReadError(MigrationError):
    """Raised when a migration script file cannot be read"""
    pass


class MigrationNotFoundError(MigrationError):
    """Raised when a migration is looked up by a filename that does not exist"""
    pass


class DuplicateEntryError(MigrationError):
    """Raised when the ledger already holds an entry for a filename"""
    pass


class StatementExecutionError(MigrationError):
    """Raised when a SQL statement fails to execute"""

    def __init__(
        self,
        message: str,
        filename: Optional[str] = None,
        cause: Optional[BaseException] = None,
        statement_index: Optional[int] = None,
        statement: Optional[str] = None,
    ):
        super().__init__(message, filename=filename, cause=cause)
        self.statement_index = statement_index
        self.statement = statement


class TransactionError(MigrationError):
    """Raised when begin, commit or rollback itself fails"""
    pass
