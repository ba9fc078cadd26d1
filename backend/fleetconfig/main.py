"""fleetconfig API — FastAPI application entry point.

Invariants:
    - Routers registered explicitly: health, config templates, device templates,
      device config
    - Global error handlers turn FleetConfigError into the structured error envelope
    - Logging configured before the database so engine setup is logged
    - Pooled connections released on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleetconfig.api.error_handlers import register_error_handlers
from fleetconfig.api.routes import (
    config_templates, device_config, device_templates, health,
)
from fleetconfig.config import get_settings
from fleetconfig.infrastructure.database import init_db
from fleetconfig.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_sql)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle,
        echo=settings.database_echo,
    )
    logger.info(f"{settings.service_name} {settings.service_version} started")
    try:
        yield
    finally:
        await manager.dispose()
        logger.info(f"{settings.service_name} stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title="fleetconfig API",
        version=settings.service_version,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    application.include_router(health.router)
    application.include_router(config_templates.router)
    application.include_router(device_templates.router)
    application.include_router(device_config.router)
    register_error_handlers(application)
    return application


app = create_app()
