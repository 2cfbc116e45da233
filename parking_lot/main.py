# parking_lot/main.py
"""
FastAPI application entry point.
Builds the store handle and lot locks once at startup, registers error
handlers and all routers.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from parking_lot.config import Settings, settings as default_settings
from parking_lot.database import build_engine, build_session_factory, create_tables
from parking_lot.errors import ParkingError, PersistenceFailure
from parking_lot.routers import lots, parking, maintenance, reports, health
from parking_lot.services.lot_locks import LotLockRegistry
from parking_lot.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Settings = app.state.settings
    configure_logging(cfg)
    logger.info("🚀 Parking backend starting up...")
    engine = build_engine(
        cfg.DATABASE_URL,
        pool_size=cfg.DB_POOL_SIZE,
        max_overflow=cfg.DB_MAX_OVERFLOW,
        echo=cfg.DB_ECHO,
    )
    create_tables(engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logger.info("✅ Database tables ready")
    logger.info(f"💰 Hourly rate: {cfg.HOURLY_RATE}")
    logger.info(f"🌐 Listening on http://{cfg.BACKEND_IP}:{cfg.BACKEND_PORT}")
    yield
    logger.info("🛑 Parking backend shutting down...")
    engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(
        title="Parking Lot API",
        description="Space allocation, occupancy, billing and daily reports.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings
    app.state.lot_locks = LotLockRegistry()

    # ── Request Timing Middleware ────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Error Handlers ───────────────────────────────────────────────────
    @app.exception_handler(ParkingError)
    async def parking_error_handler(request: Request, exc: ParkingError):
        if not isinstance(exc, PersistenceFailure):
            logger.info(f"{request.method} {request.url.path} rejected: {exc.code}: {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": str(exc), "error": exc.code},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # ── Routers ──────────────────────────────────────────────────────────
    app.include_router(lots.router,        prefix="/api/v1", tags=["🅿️  Lots"])
    app.include_router(parking.router,     prefix="/api/v1", tags=["🚗 Park / Unpark"])
    app.include_router(maintenance.router, prefix="/api/v1", tags=["🔧 Maintenance"])
    app.include_router(reports.router,     prefix="/api/v1", tags=["📊 Reports"])
    app.include_router(health.router,      prefix="/api/v1", tags=["💚 Health"])

    return app


app = create_app()
