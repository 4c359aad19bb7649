"""FastAPI application entry point for the copy-trading analytics service."""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from copytrade_analytics import __version__
from copytrade_analytics.api.routes import calculator, health
from copytrade_analytics.config import settings
from copytrade_analytics.logging_config import configure_logging

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Copy-Trading Portfolio Analytics API",
    description="Rolling-window and trailing-window analytics for trader allocations",
    version=__version__,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(calculator.router)


@app.on_event("startup")
async def startup_event():
    """
    FastAPI startup event handler.

    Configures structured logging.
    """
    configure_logging()
    logger.info(
        "application_started",
        environment=settings.environment,
        version=__version__,
    )


@app.on_event("shutdown")
async def shutdown_event():
    """
    FastAPI shutdown event handler.

    Disposes the database engine's connection pool.
    """
    from copytrade_analytics.database import engine

    if engine is not None:
        await engine.dispose()
    logger.info("application_stopped")


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Copy-Trading Portfolio Analytics API", "version": __version__}
