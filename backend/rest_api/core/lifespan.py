"""
Startup and shutdown for the REST API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from rest_api.models import Base
from shared.config.logging import rest_api_logger as logger, setup_logging
from shared.config.settings import settings
from shared.infrastructure.db import engine
from shared.infrastructure.events import close_redis_pool


def check_configuration() -> None:
    """Refuse to start production with weak secrets; warn elsewhere."""
    problems = settings.validate_production_secrets()
    for problem in problems:
        logger.error("Configuration error", problem=problem)
    if problems and settings.environment == "production":
        raise RuntimeError("Refusing to start: " + "; ".join(problems))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()

    Base.metadata.create_all(bind=engine)
    logger.info(
        "FoodHub API started",
        port=settings.rest_api_port,
        env=settings.environment,
        stripe_enabled=bool(settings.stripe_secret_key),
    )

    yield

    await close_redis_pool()
    logger.info("FoodHub API stopped")
