"""
LiveRisk Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from liverisk.core.config import settings
from liverisk.api.v1 import router as api_v1_router
from liverisk.services.dispatcher import get_dispatcher, start_dispatcher, stop_dispatcher

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Mock feed: {settings.enable_mock_feed}")

    await start_dispatcher(settings)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await stop_dispatcher()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    LiveRisk Streaming Risk Monitor API

    ## Architecture
    - **Price History Store**: Bounded per-instrument price and quote history
    - **Metrics Calculator**: Annualized volatility, 1-day parametric VaR, short-term change
    - **Suggestion Engine**: Stop-loss / hedge alerts and stable-allocation ideas
    - **Tick Dispatcher**: Applies one tick at a time and recomputes everything

    ## Core Principles
    - Metrics and suggestions are recomputed in full on every tick
    - Bad ticks are rejected at the store, never partially applied
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    dispatcher = get_dispatcher()
    services = await dispatcher.health_check()
    return {
        "status": "healthy" if all(services.values()) else "degraded",
        "services": services,
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "instruments": len(dispatcher.store),
        "pending_ticks": dispatcher.pending,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "LiveRisk Backend API",
        "docs": "/docs",
        "health": "/health",
    }
