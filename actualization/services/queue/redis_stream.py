"""Redis stream service for the catalog fact stream."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import redis.asyncio as redis  # type: ignore[import]
from redis.exceptions import ResponseError  # type: ignore[import]

from actualization.config import settings

logger = logging.getLogger(__name__)

StreamEntries = list[tuple[str, Sequence[tuple[str, dict[str, str]]]]]


class RedisStreamService:
    """Consumer-group access to one Redis stream."""

    def __init__(self, client: redis.Redis, stream_key: str, group_name: str):
        self.client = client
        self.stream_key = stream_key
        self.group_name = group_name

    async def ensure_consumer_group(self) -> None:
        """Create the consumer group, and the stream with it, if missing."""
        try:
            await self.client.xgroup_create(
                name=self.stream_key,
                groupname=self.group_name,
                id="0",
                mkstream=True,
            )
            logger.info(
                "Created Redis consumer group", extra={"group": self.group_name}
            )
        except ResponseError as exc:
            if "BUSYGROUP" in str(exc):
                logger.debug(
                    "Consumer group already exists", extra={"group": self.group_name}
                )
                return
            logger.error("Failed to create consumer group: %s", exc, exc_info=True)
            raise

    async def _read(self, consumer_name: str, count: int, block_ms: int) -> StreamEntries:
        """One XREADGROUP call for entries never delivered to this group."""
        return await self.client.xreadgroup(
            groupname=self.group_name,
            consumername=consumer_name,
            streams={self.stream_key: ">"},
            count=count,
            block=block_ms,
        )

    async def read_batch(
        self,
        consumer_name: str,
        count: int = 10,
        block_ms: int = 5000,
    ) -> StreamEntries:
        """Read the next batch of undelivered facts for this consumer."""
        try:
            return await self._read(consumer_name, count, block_ms)
        except ResponseError as exc:
            if "NOGROUP" in str(exc):
                logger.warning("Consumer group missing, recreating: %s", exc)
                await self.ensure_consumer_group()
                return await self._read(consumer_name, count, block_ms)
            raise

    async def acknowledge_messages(self, message_ids: list[str]) -> None:
        """Acknowledge applied facts."""
        if message_ids:
            await self.client.xack(self.stream_key, self.group_name, *message_ids)

    async def delete_messages(self, message_ids: list[str]) -> None:
        """Delete acknowledged facts from the stream."""
        if message_ids:
            await self.client.xdel(self.stream_key, *message_ids)

    async def add_to_stream(
        self, fields: dict[str, str], stream_key: str | None = None
    ) -> str:
        """Add an entry to this stream or to ``stream_key``."""
        key = stream_key or self.stream_key
        return await self.client.xadd(key, fields)


def create_redis_stream_service(
    stream_key: str | None = None,
    group_name: str | None = None,
) -> RedisStreamService:
    """Factory function to create a Redis stream service."""
    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
    )
    stream = stream_key or settings.FACTS_STREAM_KEY
    group = group_name or settings.FACTS_CONSUMER_GROUP
    return RedisStreamService(client, stream, group)
