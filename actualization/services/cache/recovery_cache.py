"""Short-term store for facts that arrived before their item was known."""

from __future__ import annotations

from typing import TypeVar

import redis.asyncio as redis
from pydantic import BaseModel

from actualization.config import settings

ModelT = TypeVar("ModelT", bound=BaseModel)


class RecoveryCache:
    """Last known good value per fact kind and item, kept in Redis with a TTL."""

    def __init__(
        self,
        client: redis.Redis,
        prefix: str | None = None,
        ttl_seconds: int | None = None,
    ):
        self._client = client
        self._prefix = prefix or settings.RECOVERY_CACHE_KEY_PREFIX
        self._ttl = ttl_seconds or settings.RECOVERY_CACHE_TTL_SECONDS

    def _key(self, kind: str, item_id: str) -> str:
        return f"{self._prefix}preserve-{kind.replace('_', '-')}-{item_id}"

    async def set(self, kind: str, item_id: str, value: BaseModel) -> None:
        await self._client.set(
            self._key(kind, item_id), value.model_dump_json(), ex=self._ttl
        )

    async def get(
        self, kind: str, item_id: str, model: type[ModelT]
    ) -> ModelT | None:
        raw = await self._client.get(self._key(kind, item_id))
        if not raw:
            return None
        return model.model_validate_json(raw)

    async def remove_and_return(
        self, kind: str, item_id: str, model: type[ModelT]
    ) -> ModelT | None:
        raw = await self._client.getdel(self._key(kind, item_id))
        if not raw:
            return None
        return model.model_validate_json(raw)

    async def remove(self, kind: str, item_id: str) -> None:
        await self._client.delete(self._key(kind, item_id))
