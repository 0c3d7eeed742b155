"""Taskboard API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery, ExMA anti-pattern)
    - Global error handlers map TaskboardError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Entity store created once on startup and stored on app.state; disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Tables created on startup with create_all: no migration tool in this service
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.api.error_handlers import register_error_handlers
from taskboard.api.routes import health, tasks, users
from taskboard.config import get_settings
from taskboard.infrastructure.database import DatabaseSessionManager
from taskboard.infrastructure.entity_store import SqlEntityStore
from taskboard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await db.create_schema()
    app.state.entity_store = SqlEntityStore(db)
    logger.info("Taskboard API started")
    yield
    logger.info("Taskboard API shutting down")
    await db.dispose()


app = FastAPI(
    title="Taskboard API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration (ExMA: no convention-over-config)
app.include_router(health.router)
app.include_router(users.router)
app.include_router(tasks.router)

register_error_handlers(app)
