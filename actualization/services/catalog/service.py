"""Applies upstream facts to stored products and serves the export views."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel

from actualization.models.catalog import ProductItem
from actualization.models.completion import IncompleteProduct, IncompleteProductItem, ItemId
from actualization.models.facts import CatalogFact, FactKind
from actualization.models.inventory import (
    FullInventory,
    ProductItemBackorderAvailability,
    ProductItemStockBalance,
)
from actualization.models.localized import (
    ActualizedItem,
    ProductErrorReport,
    ProductExportError,
)
from actualization.models.price import ProductItemPrice
from actualization.models.results import NoSuccess, PartialResult, PartialSuccess
from actualization.models.store import Language, StoreTimeZone
from actualization.services.cache.recovery_cache import RecoveryCache
from actualization.services.catalog import merge
from actualization.services.catalog.localization import (
    actualized_info,
    complete_and_localize_for_all_languages,
    complete_and_localize_item,
    complete_and_localize_product,
)
from actualization.services.pricing import price_log
from actualization.services.queue.fact_queue import get_redis_client
from actualization.services.storage.document_store import CatalogDocumentStore

logger = logging.getLogger(__name__)

FACT_MODELS: dict[FactKind, type[BaseModel]] = {
    "product_item": ProductItem,
    "price": ProductItemPrice,
    "inventory": FullInventory,
    "stock_balance": ProductItemStockBalance,
    "backorder_availability": ProductItemBackorderAvailability,
}

# Facts that only carry an item id and may precede the item metadata.
REPLAYABLE_KINDS: tuple[FactKind, ...] = (
    "price",
    "inventory",
    "stock_balance",
    "backorder_availability",
)


class FactItemMismatchError(ValueError):
    """Raised when a fact's envelope and payload name different items."""


def record_item_id(record: BaseModel) -> str:
    match record:
        case ProductItem(sku=sku) | FullInventory(sku=sku):
            return sku
        case ProductItemPrice(item_id=item_id):
            return item_id
        case ProductItemStockBalance(product_item_id=item_id) | ProductItemBackorderAvailability(
            product_item_id=item_id
        ):
            return item_id
    raise TypeError(f"Unsupported fact record: {type(record).__name__}")


def parse_fact_record(fact: CatalogFact) -> BaseModel:
    record = FACT_MODELS[fact.kind].model_validate(fact.payload)
    if record_item_id(record) != fact.item_id:
        raise FactItemMismatchError(
            f"Fact for item {fact.item_id} carries a {fact.kind} "
            f"record of item {record_item_id(record)}"
        )
    return record


class CatalogService:
    """Keeps incomplete products in the document store up to date."""

    def __init__(
        self,
        store: CatalogDocumentStore,
        cache: RecoveryCache,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(UTC))

    def now(self) -> datetime:
        return self._clock()

    async def apply_fact(self, fact: CatalogFact) -> IncompleteProduct | None:
        """Apply one fact; returns the updated product, or None when it was parked."""

        if fact.op == "delete":
            return await self._remove(fact.kind, fact.item_id)

        record = parse_fact_record(fact)
        if isinstance(record, ProductItem):
            return await self._apply_product_item(record)

        product_id = await self._store.get_product_id(fact.item_id)
        if product_id is None:
            await self._cache.set(fact.kind, fact.item_id, record)
            logger.info(
                "Item not known yet, preserving fact",
                extra={"kind": fact.kind, "item_id": fact.item_id},
            )
            return None

        product = await self._store.get_product(product_id) or IncompleteProduct.empty(
            product_id
        )
        product = self._apply(product, fact.kind, record)
        await self._store.put_product(product)
        return product

    def _apply(
        self, product: IncompleteProduct, kind: FactKind, record: BaseModel
    ) -> IncompleteProduct:
        match kind:
            case "product_item":
                return merge.product_with_product_item(product, record)
            case "price":
                product = merge.product_with_price(product, record)
                return self._refresh_price_history(product, record.item_id)
            case "inventory":
                return merge.product_with_inventory(product, record)
            case "stock_balance":
                return merge.product_with_stock_balance(product, record)
            case "backorder_availability":
                return merge.product_with_backorder_availability(product, record)
        raise ValueError(f"Unknown fact kind: {kind}")

    def _refresh_price_history(
        self, product: IncompleteProduct, item_id: ItemId
    ) -> IncompleteProduct:
        item = product.find_full_item(item_id)
        if item is None or item.price is None:
            return product
        price = price_log.refresh(self.now(), item.price)
        return merge.with_incomplete_item(product, item.model_copy(update={"price": price}))

    async def _apply_product_item(self, item: ProductItem) -> IncompleteProduct:
        moved: IncompleteProductItem | None = None
        previous_product_id = await self._store.get_product_id(item.sku)
        if previous_product_id and previous_product_id != item.product_id:
            moved = await self._detach_item(previous_product_id, item.sku)

        product = await self._store.get_product(
            item.product_id
        ) or IncompleteProduct.empty(item.product_id)
        if moved is not None:
            product = merge.with_incomplete_item(product, moved)
        product = self._apply(product, "product_item", item)

        replayed: list[FactKind] = []
        for kind in REPLAYABLE_KINDS:
            preserved = await self._cache.get(kind, item.sku, FACT_MODELS[kind])
            if preserved is None:
                continue
            logger.info(
                "Replaying preserved fact",
                extra={"kind": kind, "item_id": item.sku},
            )
            product = self._apply(product, kind, preserved)
            replayed.append(kind)

        await self._store.put_product(product)
        await self._store.set_product_id(item.sku, item.product_id)
        # Parked facts stay in the cache until the replayed product is stored.
        for kind in replayed:
            await self._cache.remove(kind, item.sku)
        return product

    async def _detach_item(
        self, product_id: str, item_id: ItemId
    ) -> IncompleteProductItem | None:
        previous = await self._store.get_product(product_id)
        if previous is None:
            return None
        moved = previous.find_full_item(item_id)
        remaining = merge.remove_full_item(previous, item_id)
        if remaining.incomplete_items:
            await self._store.put_product(remaining)
        else:
            await self._store.delete_product(product_id)
        logger.info(
            "Item moved between products",
            extra={"item_id": item_id, "from_product_id": product_id},
        )
        return moved

    async def _remove(self, kind: FactKind, item_id: ItemId) -> IncompleteProduct | None:
        await self._cache.remove(kind, item_id)
        product_id = await self._store.get_product_id(item_id)
        if product_id is None:
            return None
        product = await self._store.get_product(product_id)
        if product is None:
            return None

        match kind:
            case "product_item":
                product = merge.product_remove_product_item(product, item_id)
            case "price":
                product = merge.product_remove_price(product, item_id)
            case "inventory":
                product = merge.product_remove_inventory(product, item_id)
            case "stock_balance":
                product = merge.product_remove_stock_balance(product, item_id)
            case "backorder_availability":
                product = merge.product_remove_backorder_availability(product, item_id)

        # An item with every slot cleared is forgotten, index entry included.
        if product.find_full_item(item_id) == IncompleteProductItem.empty(item_id):
            product = merge.remove_full_item(product, item_id)
            await self._store.remove_product_id(item_id)
            if not product.incomplete_items:
                await self._store.delete_product(product_id)
                return product

        await self._store.put_product(product)
        return product

    # Export

    async def get_product(self, product_id: str) -> IncompleteProduct | None:
        return await self._store.get_product(product_id)

    async def _find_item(self, item_id: ItemId) -> IncompleteProductItem:
        product_id = await self._store.get_product_id(item_id)
        product = await self._store.get_product(product_id) if product_id else None
        item = product.find_full_item(item_id) if product else None
        return item or IncompleteProductItem.empty(item_id)

    async def actualize_items(
        self,
        item_ids: list[ItemId],
        language: Language,
        store_timezone: StoreTimeZone,
    ) -> tuple[list[ActualizedItem], dict[ItemId, list[ProductExportError]]]:
        now = self.now()
        items: list[ActualizedItem] = []
        errors: dict[ItemId, list[ProductExportError]] = {}
        for item_id in dict.fromkeys(item_ids):
            incomplete = await self._find_item(item_id)
            localized, item_errors = complete_and_localize_item(
                now, incomplete, store_timezone, language
            )
            if localized is not None:
                items.append(actualized_info(localized))
            if item_errors:
                errors[item_id] = item_errors
        return items, errors

    async def export_product(
        self,
        product_id: str,
        language: Language,
        store_timezone: StoreTimeZone,
    ) -> PartialResult | None:
        product = await self._store.get_product(product_id)
        if product is None:
            return None
        return complete_and_localize_product(self.now(), product, store_timezone, language)

    async def error_report(
        self, product_id: str, store_timezone: StoreTimeZone
    ) -> ProductErrorReport | None:
        product = await self._store.get_product(product_id)
        if product is None:
            return None
        now = self.now()
        results = complete_and_localize_for_all_languages(now, product, store_timezone)
        errors = {
            language: list(result.errors)
            for language, result in results.items()
            if isinstance(result, PartialSuccess | NoSuccess)
        }
        return ProductErrorReport(product_id=product_id, errors=errors, timestamp=now)


def get_catalog_service() -> CatalogService:
    """FastAPI dependency factory."""

    client = get_redis_client()
    return CatalogService(CatalogDocumentStore(client), RecoveryCache(client))
