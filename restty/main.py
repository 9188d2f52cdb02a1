"""
restty - FastAPI Application Entry Point

An interactive HTTP request tool: compose a request, send it, inspect the
formatted response and latency. Signed-in users get their request history
persisted remotely and mirrored in memory.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .exceptions import register_exception_handlers
from .routers import auth, execute, history
from .state import AppState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Tests may install their own state before startup
    if getattr(app.state, "restty", None) is None:
        app.state.restty = AppState.build()
    outcome = app.state.restty.restore()
    if outcome.error:
        logger.warning("Could not load history at startup: %s", outcome.error)
    yield


app = FastAPI(
    title="restty",
    description="Interactive HTTP request tool with synchronised request history",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# The frontend is served from a different local origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "restty",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(execute.router)
app.include_router(history.router)
app.include_router(auth.router)
