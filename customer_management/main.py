from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from customer_management.api.router import api_router
from customer_management.core.config import get_settings
from customer_management.core.errors import register_exception_handlers
from customer_management.core.logging import configure_logging
from customer_management.db.base import Base
from customer_management.db.session import engine

# Import models to register with SQLAlchemy
import customer_management.models  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.environment != "prod":
        # Production schemas are created with scripts/init_db.py
        Base.metadata.create_all(bind=engine)
    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_api_docs else None,
        redoc_url="/redoc" if settings.enable_api_docs else None,
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["health"])
    def health():
        return {"ok": True}

    return app


app = create_app()
