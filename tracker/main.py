"""
Strain tracker FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tracker.config import settings
from tracker.context import close_context, create_context
from tracker.routes import catalog as catalog_routes
from tracker.routes import ws as ws_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Build the application context (store backend, identity provider)
    - Close the store on shutdown, ending every open subscription
    """
    # Startup
    app.state.context = await create_context(settings)
    logger.info("Application context initialized")

    yield

    # Shutdown
    await close_context(app.state.context)
    logger.info("Application context closed")


app = FastAPI(
    title="Strain Tracker",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(catalog_routes.router)
app.include_router(ws_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
