"""Redis-backed queue for inbound catalog facts."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import redis.asyncio as redis

from actualization.config import settings
from actualization.models.facts import CatalogFact

logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return a singleton Redis client for the current process."""

    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


class FactQueue:
    """Pushes facts onto the stream consumed by the fact workers."""

    def __init__(self, client: redis.Redis, stream_key: str) -> None:
        self._client = client
        self._stream_key = stream_key

    async def enqueue(self, facts: Sequence[CatalogFact]) -> int:
        if not facts:
            return 0

        for fact in facts:
            await self._client.xadd(
                name=self._stream_key,
                fields={"payload": fact.model_dump_json()},
                id="*",
            )

        logger.info("Queued %s catalog facts", len(facts))
        return len(facts)


def get_fact_queue() -> FactQueue:
    client = get_redis_client()
    return FactQueue(client, settings.FACTS_STREAM_KEY)
