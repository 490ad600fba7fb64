"""API route registration."""

from fastapi import FastAPI

from src.api.routes import catalog, system, webhook


def include_api_routes(app: FastAPI) -> None:
    """Attach all API routers to the application."""

    app.include_router(system.router)
    app.include_router(webhook.router)
    app.include_router(catalog.router)
