"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from actualization.api.routes import include_api_routes
from actualization.config import settings
from actualization.services.queue.fact_queue import get_redis_client
from actualization.services.queue.redis_stream import RedisStreamService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Make sure the fact stream and its consumer group exist before serving."""
    try:
        await RedisStreamService(
            get_redis_client(),
            settings.FACTS_STREAM_KEY,
            settings.FACTS_CONSUMER_GROUP,
        ).ensure_consumer_group()
    except Exception:
        logger.exception("Failed preparing the fact stream on startup")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Catalog Actualization",
        description="Assembles sellable product views from partial upstream facts",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
