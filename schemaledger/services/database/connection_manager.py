"""
Database Connection Manager

Handles database connection lifecycle, pooling, and health checks.
"""
import logging
import ssl
from typing import Any, Dict, Optional

from databases import Database, DatabaseURL

from schemaledger.config import Settings, settings as default_settings

logger = logging.getLogger("schemaledger.database.connection")


def build_ssl_option(is_production: bool):
    """
    TLS setting for the PostgreSQL pool.

    Production connections are encrypted but the server certificate is not
    verified; other environments connect without TLS.
    """
    if not is_production:
        return False
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class ConnectionManager:
    """
    Manages database connection lifecycle.
    """

    def __init__(self, database_url: Optional[str] = None, settings: Optional[Settings] = None):
        """
        Initialize connection manager.

        Args:
            database_url: Optional database URL. If not provided, uses DATABASE_URL env var.
            settings: Optional settings, defaults to the module-level settings
        """
        self.settings = settings or default_settings
        self.database_url = database_url or self.settings.DATABASE_URL
        if not self.database_url:
            raise ValueError("DATABASE_URL must be set either as parameter or environment variable")

        self._database: Optional[Database] = None

    def pool_options(self) -> Dict[str, Any]:
        """
        Driver options passed through to the connection pool.
        """
        dialect = DatabaseURL(self.database_url).dialect
        if dialect not in ("postgresql", "postgres"):
            return {}
        return {
            "ssl": build_ssl_option(self.settings.is_production),
            "max_size": self.settings.DB_POOL_MAX_SIZE,
            "timeout": self.settings.DB_CONNECT_TIMEOUT,
        }

    @property
    def database(self) -> Database:
        """
        Get the database instance. Creates it if it doesn't exist.
        """
        if self._database is None:
            self._database = Database(self.database_url, **self.pool_options())
        return self._database

    async def connect(self) -> Database:
        """
        Establish database connection.
        """
        database = self.database
        if not database.is_connected:
            await database.connect()
            logger.info("Database connection established")
        return database

    async def disconnect(self) -> None:
        """
        Close database connection.
        """
        if self._database and self._database.is_connected:
            await self._database.disconnect()
            logger.info("Database connection closed")

    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if not self._database or not self._database.is_connected:
                return False
            await self._database.fetch_val("SELECT 1")
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    def is_connected(self) -> bool:
        return self._database is not None and self._database.is_connected
