import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from swarm_ledger import __version__
from swarm_ledger.db import engine
from swarm_ledger.errors import LedgerError, StoreError
from swarm_ledger.load_secrets import log_level, server_host, server_port
from swarm_ledger.models.schemas import Base
from swarm_ledger.routers import ledger

logging.basicConfig(level=log_level)


@asynccontextmanager
async def lifespan(app):
    """Create the account tables if they do not exist yet.
    This function is called to start the server.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.info("Start Server")
    try:
        yield
    finally:
        await engine.dispose()
        logging.info("Stop Server")


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if isinstance(exc, StoreError):
        # Cause is already logged by the service layer.
        return JSONResponse(status_code=exc.status_code, content={"detail": "internal store error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(title="swarm-ledger", version=__version__, lifespan=lifespan)
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.include_router(ledger.ledger_router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=server_host, port=server_port)
