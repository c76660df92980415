"""
Shared FastAPI App Factory

Builds the application for production (main.py) and for tests, which pass
their own lifespan.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.lab_booking.driving_adapter.http_controller.attendance_controller import (
    router as attendance_router,
)
from src.service.lab_booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.lab_booking.driving_adapter.http_controller.cron_controller import (
    router as cron_router,
)
from src.service.lab_booking.driving_adapter.http_controller.lab_controller import (
    router as lab_router,
)
from src.service.lab_booking.driving_adapter.http_controller.session_controller import (
    router as session_router,
)
from src.service.lab_booking.driving_adapter.http_controller.user_controller import (
    router as user_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Lab seat, session and equipment booking',
    service_name: str = 'lab-booking-api',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name reported on traces

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    tracing_config = TracingConfig(service_name=service_name)
    if tracing_config.enabled:
        tracing_config.instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(user_router, prefix='/api/user', tags=['user'])
    app.include_router(lab_router, prefix='/api/lab', tags=['lab'])
    app.include_router(session_router, prefix='/api/session', tags=['session'])
    app.include_router(booking_router, prefix='/api/booking', tags=['booking'])
    app.include_router(attendance_router, prefix='/api/attendance', tags=['attendance'])
    app.include_router(cron_router, prefix='/api/cron', tags=['cron'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
