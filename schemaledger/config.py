"""Settings loaded from the environment (and a local .env file)."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL: Optional[str]
    ENV: str
    MIGRATIONS_DIR: Path
    MIGRATIONS_TABLE: str
    LOG_LEVEL: str
    DB_POOL_MAX_SIZE: int
    DB_CONNECT_TIMEOUT: float

    def __init__(self):
        self.DATABASE_URL = os.getenv("DATABASE_URL")
        self.ENV = os.getenv("ENV", "development").lower()
        self.MIGRATIONS_DIR = Path(os.getenv("MIGRATIONS_DIR", str(Path.cwd() / "migrations")))
        self.MIGRATIONS_TABLE = os.getenv("MIGRATIONS_TABLE", "schema_migrations")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", "10"))
        self.DB_CONNECT_TIMEOUT = float(os.getenv("DB_CONNECT_TIMEOUT", "2"))

    @property
    def is_production(self) -> bool:
        return self.ENV in ("production", "prod")


settings = Settings()
