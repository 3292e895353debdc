"""Carrier sourcing — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sourcing.adapters.persistence.database import engine
from sourcing.config import settings
from sourcing.infrastructure.api.routes_assignments import router as assignments_router
from sourcing.infrastructure.api.routes_events import router as events_router
from sourcing.infrastructure.api.routes_health import router as health_router
from sourcing.infrastructure.api.routes_notes import router as notes_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Carrier Sourcing — award & tariff linking",
        description="Carrier assignment status, award decisions, tariff creation and note mentions",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(events_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")

    return app


app = create_app()
