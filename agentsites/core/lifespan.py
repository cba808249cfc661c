"""Application lifespan: startup and shutdown.

Wiring only: logging, telemetry, and DB engine dispose.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from agentsites.core.config import get_settings
from agentsites.infrastructure.persistence import database
from agentsites.shared.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
    setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, telemetry (if enabled). Shutdown: span flush, SQL
    engine dispose.
    """
    settings = get_settings()
    setup_logging()
    logger.info("Starting %s %s", settings.app_name, settings.app_version)

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.setup() is not None:
            database._ensure_engine()
            telemetry.instrument(app, database.engine)
            set_telemetry(telemetry)
    else:
        logger.info("Telemetry disabled")

    yield

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
    await database.dispose_engine()
