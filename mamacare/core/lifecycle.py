"""
Application lifecycle management using the FastAPI lifespan pattern.

Startup builds the reminder engine and starts its runner; shutdown stops
the runner and releases the HTTP client and database engine.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mamacare.config.settings import Settings, get_settings
from mamacare.core.container import RemindersContainer
from mamacare.database import close_database, get_session_factory
from mamacare.integrations.expo import ExpoPushClient

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup initialization and graceful shutdown.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._container: RemindersContainer | None = None
        self._initialized = False

    async def startup(self, app: FastAPI) -> None:
        """Build the reminder engine and start it when enabled."""
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        container = RemindersContainer(self._settings, db_session_factory=get_session_factory())
        if isinstance(container.push_provider, ExpoPushClient):
            await container.push_provider.initialize()

        runner = container.get_runner()
        app.state.reminder_runner = runner
        self._container = container

        if self._settings.REMINDER_SCHEDULER_ENABLED:
            await runner.start()
        else:
            logger.info("Reminder scheduler disabled via REMINDER_SCHEDULER_ENABLED=False")

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self, app: FastAPI) -> None:
        if not self._initialized or self._container is None:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        await self._container.get_runner().stop()
        if isinstance(self._container.push_provider, ExpoPushClient):
            await self._container.push_provider.close()
        await close_database()

        app.state.reminder_runner = None
        self._container = None
        self._initialized = False
        logger.info("Application lifecycle shutdown completed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = LifecycleManager(getattr(app.state, "settings", None))

    await lifecycle.startup(app)

    yield  # Application runs here

    await lifecycle.shutdown(app)
