"""System-level routes such as health checks."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import APIRouter, Depends
from redis.exceptions import RedisError

from actualization.config import settings
from actualization.services.queue.fact_queue import get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    return {"message": "Catalog actualization service"}


@router.get("/health")
async def health_check(
    client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> dict[str, str]:
    """Health check endpoint with Redis connectivity check."""

    try:
        redis_status = "connected" if await client.ping() else "disconnected"
    except (RedisError, OSError) as exc:
        logger.warning("Redis health check failed: %s", exc)
        redis_status = "disconnected"

    return {
        "status": "healthy",
        "redis": redis_status,
        "environment": settings.ENVIRONMENT,
    }
