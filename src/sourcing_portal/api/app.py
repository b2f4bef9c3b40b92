"""
sourcing_portal.api.app

FastAPI app factory for the Sourcing Portal service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sourcing_portal import __version__
from sourcing_portal.api.errors import register_exception_handlers
from sourcing_portal.api.routers.auth import router as auth_router
from sourcing_portal.api.routers.dev import router as dev_router
from sourcing_portal.api.routers.health import router as health_router
from sourcing_portal.api.routers.proposals import router as proposals_router
from sourcing_portal.api.routers.sourcing_requests import router as sourcing_requests_router
from sourcing_portal.db.init_db import init_db
from sourcing_portal.db.session import create_engine, create_sessionmaker
from sourcing_portal.observability.logging import configure_logging, get_logger
from sourcing_portal.observability.middleware import RequestContextMiddleware
from sourcing_portal.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Sourcing Portal",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    # Login/register are served at the root and under /api/auth.
    app.include_router(auth_router)
    app.include_router(auth_router, prefix="/api/auth")

    api = APIRouter(prefix="/api")
    api.include_router(sourcing_requests_router)
    api.include_router(proposals_router)
    if settings.env != "prod":
        # Demo data tooling is not routed at all in prod.
        api.include_router(dev_router)
    app.include_router(api)

    return app


# --- Module Notes -----------------------------------------------------------
# Business logic stays in services; this module only wires layers together.
