"""Easter Eggs API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map EasterEggsError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - EggService built on startup via lifespan and stored on app.state

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - The database is optional: with persist_ledger=False the ledger and
      event log live in memory only
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eastereggs.api.error_handlers import register_error_handlers
from eastereggs.api.routes import contract, eggs, health, upkeep
from eastereggs.config import get_settings
from eastereggs.infrastructure.database import init_db
from eastereggs.infrastructure.observability import setup_logging
from eastereggs.services.egg_service_factory import build_egg_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = None
    if settings.persist_ledger:
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_url.startswith("sqlite"):
            await manager.create_schema()
    wiring = await build_egg_service(settings, manager)
    app.state.egg_service = wiring.service
    app.state.vrf_coordinator = wiring.coordinator
    logger.info("Easter Eggs API started", extra={"actor": wiring.service.owner})
    yield
    for adapter in (wiring.coordinator, wiring.payment_rail):
        aclose = getattr(adapter, "aclose", None)
        if aclose is not None:
            await aclose()
    if manager is not None:
        await manager.dispose()
    logger.info("Easter Eggs API shutting down")


app = FastAPI(
    title="Easter Eggs API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(contract.router)
app.include_router(eggs.router)
app.include_router(upkeep.router)

register_error_handlers(app)
