"""gardenos - Garden task board with offline-tolerant cloud sync."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.app_context import AppContext
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.board_router import router as board_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so the initial load is captured
    configure_logfire()

    context = AppContext()
    await context.initialize()
    app.state.context = context
    if context.offline:
        logger.warning("startup_offline", extra={"notice": context.offline_notice})
    else:
        logger.info("startup_complete", extra={"tasks": len(context.board.tasks)})

    yield

    await context.teardown()


app = FastAPI(
    title="gardenos",
    description="Garden task board with routines, calendar and offline-tolerant sync",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(board_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
