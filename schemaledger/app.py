from contextlib import asynccontextmanager

from fastapi import FastAPI

from schemaledger import __version__
from schemaledger.modules.system_endpoints import close_connection_manager, router as system_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown
    await close_connection_manager()


app = FastAPI(title="schemaledger", version=__version__, lifespan=lifespan)
app.include_router(system_router)


@app.get("/")
async def root():
    return {"status": "online", "system": "schemaledger"}
