"""Redis-backed document collection for incomplete products."""

from __future__ import annotations

import logging

import redis.asyncio as redis

from actualization.config import settings
from actualization.models.completion import IncompleteProduct, ItemId, ProductId

logger = logging.getLogger(__name__)

PRODUCT_COLLECTION = "incomplete-product"
ITEM_INDEX_COLLECTION = "item-product"


class CatalogDocumentStore:
    """Stores incomplete products by id plus an item id to product id index."""

    def __init__(self, client: redis.Redis, prefix: str | None = None):
        self._client = client
        self._prefix = prefix or settings.DOCUMENT_KEY_PREFIX

    def _key(self, collection: str, entity_id: str) -> str:
        return f"{self._prefix}{collection}:{entity_id}"

    async def get_product(self, product_id: ProductId) -> IncompleteProduct | None:
        raw = await self._client.get(self._key(PRODUCT_COLLECTION, product_id))
        if not raw:
            return None
        return IncompleteProduct.model_validate_json(raw)

    async def put_product(self, product: IncompleteProduct) -> None:
        await self._client.set(
            self._key(PRODUCT_COLLECTION, product.product_id),
            product.model_dump_json(),
        )

    async def delete_product(self, product_id: ProductId) -> None:
        await self._client.delete(self._key(PRODUCT_COLLECTION, product_id))
        logger.info("Product document deleted", extra={"product_id": product_id})

    async def get_product_id(self, item_id: ItemId) -> ProductId | None:
        raw = await self._client.get(self._key(ITEM_INDEX_COLLECTION, item_id))
        if not raw:
            return None
        return raw.decode() if isinstance(raw, bytes) else raw

    async def set_product_id(self, item_id: ItemId, product_id: ProductId) -> None:
        await self._client.set(self._key(ITEM_INDEX_COLLECTION, item_id), product_id)

    async def remove_product_id(self, item_id: ItemId) -> None:
        await self._client.delete(self._key(ITEM_INDEX_COLLECTION, item_id))
        logger.debug("Item index entry removed", extra={"item_id": item_id})
