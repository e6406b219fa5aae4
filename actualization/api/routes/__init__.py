"""API route registration."""

from fastapi import FastAPI

from actualization.api.routes import actualize, facts, system


def include_api_routes(app: FastAPI) -> None:
    """Attach all API routers to the application."""

    app.include_router(system.router)
    app.include_router(facts.router)
    app.include_router(actualize.router)
