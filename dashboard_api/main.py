"""
Dashboard API main application.
Entry point for the FastAPI REST server.

Run:
    uvicorn dashboard_api.main:app --reload
"""

from fastapi import FastAPI

from dashboard_api.core.cors import configure_cors
from dashboard_api.core.errors import register_exception_handlers
from dashboard_api.core.lifespan import lifespan
from dashboard_api.routers.health import router as health_router
from dashboard_api.routers.organizations import router as organizations_router
from dashboard_api.routers.visitors import router as visitors_router
from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware


def create_app() -> FastAPI:
    app = FastAPI(
        title="Dashboard API",
        description="Multi-tenant visitor management API",
        version="0.1.0",
        lifespan=lifespan,
    )

    configure_cors(app)
    # Registered last so it wraps CORS and binds the request ID first
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(organizations_router, prefix=settings.api_prefix)
    app.include_router(visitors_router, prefix=settings.api_prefix)

    return app


app = create_app()
