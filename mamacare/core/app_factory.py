"""
FastAPI application factory for the reminder engine.

The app exposes the admin reminder API and a health check. The reminder
runner itself is attached by the lifespan (``mamacare.core.lifecycle``).
"""

import logging

from fastapi import FastAPI, Request

from mamacare.api.exception_handlers import register_exception_handlers
from mamacare.api.router import api_router
from mamacare.config.settings import Settings, get_settings
from mamacare.core.lifecycle import lifespan

logger = logging.getLogger(__name__)


async def health_check(request: Request) -> dict[str, object]:
    """Liveness plus whether the reminder runner is started."""
    runner = request.app.state.reminder_runner
    settings: Settings = request.app.state.settings
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "scheduler_running": bool(runner is not None and runner.is_running),
    }


class AppFactory:
    """
    Builds the FastAPI application in discrete steps: base app, state,
    exception handlers, routes.
    """

    def __init__(self, settings: Settings | None = None, use_lifespan: bool = True) -> None:
        """
        Args:
            settings: Settings override (defaults to the cached settings)
            use_lifespan: Start the reminder engine with the app; API tests
                turn this off and attach a runner themselves
        """
        self._settings = settings or get_settings()
        self._use_lifespan = use_lifespan

    def create_app(self) -> FastAPI:
        app = self._create_base_app()
        self._init_state(app)
        register_exception_handlers(app)
        self._include_routes(app)

        logger.info(f"{self._settings.PROJECT_NAME} app created (lifespan={'on' if self._use_lifespan else 'off'})")
        return app

    def _create_base_app(self) -> FastAPI:
        docs_enabled = self._settings.DEBUG
        return FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{self._settings.API_V1_STR}/docs" if docs_enabled else None,
            redoc_url=f"{self._settings.API_V1_STR}/redoc" if docs_enabled else None,
            openapi_url=f"{self._settings.API_V1_STR}/openapi.json" if docs_enabled else None,
            lifespan=lifespan if self._use_lifespan else None,
        )

    def _init_state(self, app: FastAPI) -> None:
        app.state.settings = self._settings
        app.state.reminder_runner = None

    def _include_routes(self, app: FastAPI) -> None:
        app.include_router(api_router, prefix=self._settings.API_V1_STR)
        app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])


def create_app(settings: Settings | None = None, use_lifespan: bool = True) -> FastAPI:
    """Create the FastAPI application."""
    return AppFactory(settings, use_lifespan=use_lifespan).create_app()
