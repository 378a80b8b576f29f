"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring; no business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup, yield, then dispose the SQL engine on shutdown."""
    settings = get_settings()
    logger.info("Starting %s %s", settings.app_name, settings.app_version)

    yield

    await dispose_engine()
    logger.info("SQL engine disposed")
