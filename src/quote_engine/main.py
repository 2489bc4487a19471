"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.routes import distance, health, invoices, pricing, quotes, services, slots
from .config import settings

ROUTERS = (
    health.router,
    services.router,
    distance.router,
    slots.router,
    pricing.router,
    quotes.router,
    invoices.router,
)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=__version__)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "version": __version__,
            "status": "running",
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
