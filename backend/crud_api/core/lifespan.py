"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from crud_api.models import Base, MODEL_MAP
from crud_api.services.registry import REGISTRY
from shared.config.logging import setup_logging, api_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with insecure configuration."
            )
        logger.warning("Running with development defaults")

    # A registry edge pointing at a missing column would make every cascade
    # through it fail, so refuse to start.
    registry_errors = REGISTRY.validate(MODEL_MAP)
    if registry_errors:
        for error in registry_errors:
            logger.error("Relationship registry error", error=error)
        raise RuntimeError(f"Invalid relationship registry: {'; '.join(registry_errors)}")

    logger.info("Starting CRUD API", port=settings.api_port, env=settings.environment)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down CRUD API")
    engine.dispose()
