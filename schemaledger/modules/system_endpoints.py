from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from schemaledger.config import settings
from schemaledger.core.migrations.migration_registry import MigrationRegistry
from schemaledger.core.migrations.migration_tracker import MigrationTracker
from schemaledger.services.database.connection_manager import ConnectionManager
from schemaledger.services.database.migration_runner import MigrationRunner
from schemaledger.services.database.status_reporter import StatusReporter

router = APIRouter(prefix="/api/system", tags=["System"])

_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager


async def close_connection_manager() -> None:
    if _connection_manager is not None:
        await _connection_manager.disconnect()


async def get_tracker(manager: ConnectionManager = Depends(get_connection_manager)) -> MigrationTracker:
    database = await manager.connect()
    return MigrationTracker(database, settings.MIGRATIONS_TABLE)


def get_registry() -> MigrationRegistry:
    return MigrationRegistry(settings.MIGRATIONS_DIR)


@router.post("/migrate")
async def trigger_migrations(
    tracker: MigrationTracker = Depends(get_tracker),
    registry: MigrationRegistry = Depends(get_registry),
):
    """
    Checks and runs pending database migrations.
    Useful for deploy hooks (Cloud Run jobs).
    """
    runner = MigrationRunner(tracker.database, registry, tracker)
    try:
        applied = await runner.run_migrations()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "success", "applied": applied}


@router.get("/migrations")
async def migration_status(
    tracker: MigrationTracker = Depends(get_tracker),
    registry: MigrationRegistry = Depends(get_registry),
):
    """
    Returns total/applied/pending counts and the pending filenames.
    """
    try:
        report = await StatusReporter(registry, tracker).get_status()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    return report.to_dict()
