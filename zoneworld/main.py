from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from zoneworld.config import APP_VERSION, Settings, settings as default_settings
from zoneworld.observability.logging import configure_logging
from zoneworld.api.routes_health import router as health_router
from zoneworld.api.routes_characters import router as characters_router
from zoneworld.api.routes_zones import router as zones_router
from zoneworld.api.routes_ws import router as ws_router
from zoneworld.schemas.events import CharactersUpdate, PopulationUpdate
from zoneworld.services.broadcaster import Broadcaster
from zoneworld.services.character_store import CharacterStore
from zoneworld.services.migration_service import MigrationScheduler
from zoneworld.services.population import get_population_by_zone
from zoneworld.services.zone_registry import ZoneRegistry

logger = logging.getLogger("zoneworld")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    cfg: Settings = app.state.settings
    logger.info("Starting Zoneworld API")
    logger.info("   Environment: %s", cfg.environment)
    logger.info("   Zones: %s", ", ".join(z.name for z in app.state.registry.get_zones()))

    if cfg.migration_enabled:
        app.state.scheduler.start()
    else:
        logger.info("   Migration: disabled")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.scheduler.stop()


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "Invalid character data" if request.method in ("POST", "PATCH") else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"message": message, "error": jsonable_encoder(exc.errors())},
    )


def create_app(cfg: Optional[Settings] = None, rng: Optional[random.Random] = None) -> FastAPI:
    """Build the API with its own store, registry, broadcaster and scheduler."""
    cfg = cfg or default_settings
    cfg.validate_runtime()
    configure_logging(cfg.log_level)

    rng = rng or random.Random(cfg.random_seed)
    store = CharacterStore()
    registry = ZoneRegistry.with_default_zones()

    def snapshot():
        return [
            CharactersUpdate(characters=store.get_characters()),
            PopulationUpdate(population=get_population_by_zone(store, registry)),
        ]

    broadcaster = Broadcaster(snapshot)
    scheduler = MigrationScheduler(
        store,
        registry,
        broadcaster,
        interval_s=cfg.migration_interval_s,
        probability=cfg.migration_probability,
        rng=rng,
    )

    app = FastAPI(
        title="Zoneworld API",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.rng = rng
    app.state.store = store
    app.state.registry = registry
    app.state.broadcaster = broadcaster
    app.state.scheduler = scheduler

    @app.get("/")
    def root():
        return {
            "name": "Zoneworld API",
            "status": "ok",
            "docs": "/docs",
            "health": "/health",
        }

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)

    # Routers
    app.include_router(health_router)
    app.include_router(characters_router)
    app.include_router(zones_router)
    app.include_router(ws_router)

    return app


app = create_app()
