"""FastAPI application entry point."""

from actualization.application import create_app

app = create_app()

__all__ = ["app"]
