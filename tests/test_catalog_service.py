"""Tests for applying upstream facts and exporting stored products."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from actualization.models.facts import CatalogFact
from actualization.models.localized import CompletionError
from actualization.models.price import ProductItemPrice
from actualization.models.results import FullSuccess, NoSuccess
from actualization.models.store import Language, StoreTimeZone
from actualization.services.catalog.service import FactItemMismatchError
from tests.factories import (
    TODAY,
    inventory,
    price_pool,
    product_item,
    stock_balance,
)

RU = Language.RUSSIAN
MOSCOW = StoreTimeZone.MOSCOW


def fact(kind: str, record, item_id: str = "sku-1") -> CatalogFact:
    return CatalogFact(kind=kind, item_id=item_id, payload=record.model_dump(mode="json"))


def delete(kind: str, item_id: str = "sku-1") -> CatalogFact:
    return CatalogFact(kind=kind, item_id=item_id, op="delete")


async def _complete_item(service, sku: str = "sku-1", product_id: str = "product-1"):
    await service.apply_fact(fact("product_item", product_item(sku, product_id), sku))
    await service.apply_fact(fact("price", price_pool(sku, list_value=100), sku))
    return await service.apply_fact(fact("inventory", inventory(sku), sku))


@pytest.mark.asyncio
async def test_fact_before_metadata_is_preserved_then_replayed(
    catalog_service, redis_client
):
    parked = await catalog_service.apply_fact(fact("price", price_pool(list_value=100)))
    await catalog_service.apply_fact(fact("stock_balance", stock_balance(w1=2)))

    assert parked is None
    assert await redis_client.exists("actualization:cache:preserve-price-sku-1") == 1

    product = await catalog_service.apply_fact(fact("product_item", product_item()))

    item = product.find_full_item("sku-1")
    assert item.price.list_prices[0].price.value == 100
    assert list(item.price.selling_price_history) == [TODAY]
    assert item.stock_balance is not None
    assert await redis_client.exists("actualization:cache:preserve-price-sku-1") == 0


@pytest.mark.asyncio
async def test_complete_product_is_exported(catalog_service):
    await _complete_item(catalog_service)

    result = await catalog_service.export_product("product-1", RU, MOSCOW)

    assert isinstance(result, FullSuccess)
    assert result.value.variations[0].product_item.sku == "sku-1"


@pytest.mark.asyncio
async def test_unknown_product_is_not_exported(catalog_service):
    assert await catalog_service.export_product("product-9", RU, MOSCOW) is None
    assert await catalog_service.error_report("product-9", MOSCOW) is None


@pytest.mark.asyncio
async def test_price_history_follows_price_changes(catalog_service, clock):
    await _complete_item(catalog_service)
    clock.now = clock.now + timedelta(days=1)

    product = await catalog_service.apply_fact(
        fact("price", price_pool(list_value=90))
    )

    history = product.find_price("sku-1").selling_price_history
    assert [p.value for p in history.values()] == [100, 90]


@pytest.mark.asyncio
async def test_delete_clears_slot(catalog_service):
    await _complete_item(catalog_service)

    product = await catalog_service.apply_fact(delete("inventory"))

    assert product.find_inventory("sku-1") is None
    result = await catalog_service.export_product("product-1", RU, MOSCOW)
    assert isinstance(result, NoSuccess)


@pytest.mark.asyncio
async def test_delete_drops_preserved_fact(catalog_service):
    await catalog_service.apply_fact(fact("price", price_pool(list_value=100)))
    await catalog_service.apply_fact(delete("price"))

    product = await catalog_service.apply_fact(fact("product_item", product_item()))

    assert product.find_price("sku-1") is None


@pytest.mark.asyncio
async def test_item_moves_between_products(catalog_service):
    await _complete_item(catalog_service)

    product = await catalog_service.apply_fact(
        fact("product_item", product_item(product_id="product-2"))
    )

    assert product.product_id == "product-2"
    assert product.find_price("sku-1") is not None
    assert await catalog_service.get_product("product-1") is None


@pytest.mark.asyncio
async def test_envelope_and_payload_must_name_the_same_item(catalog_service):
    with pytest.raises(FactItemMismatchError):
        await catalog_service.apply_fact(
            fact("inventory", inventory("sku-2"), item_id="sku-1")
        )


@pytest.mark.asyncio
async def test_actualize_items(catalog_service):
    await _complete_item(catalog_service)

    items, errors = await catalog_service.actualize_items(
        ["sku-1", "sku-9", "sku-1"], RU, MOSCOW
    )

    assert [i.sku for i in items] == ["sku-1"]
    assert list(errors) == ["sku-9"]
    assert all(isinstance(e, CompletionError) for e in errors["sku-9"])
    assert len(errors["sku-9"]) == 3


@pytest.mark.asyncio
async def test_error_report_lists_failing_languages(catalog_service):
    await _complete_item(catalog_service)

    report = await catalog_service.error_report("product-1", MOSCOW)

    assert list(report.errors) == [Language.ENGLISH]
    assert report.errors[Language.ENGLISH][0].item_id == "sku-1"


@pytest.mark.asyncio
async def test_preserved_fact_parses_back(catalog_service, redis_client):
    await catalog_service.apply_fact(fact("price", price_pool(list_value=100)))

    raw = await redis_client.get("actualization:cache:preserve-price-sku-1")

    assert ProductItemPrice.model_validate_json(raw).item_id == "sku-1"


@pytest.mark.asyncio
async def test_price_window_without_offset_is_rejected_before_parking(
    catalog_service, redis_client
):
    payload = price_pool(list_value=100).model_dump(mode="json")
    payload["list_prices"][0]["price"]["start"] = "2024-01-01T00:00:00"

    with pytest.raises(ValidationError):
        await catalog_service.apply_fact(
            CatalogFact(kind="price", item_id="sku-1", payload=payload)
        )

    assert await redis_client.exists("actualization:cache:preserve-price-sku-1") == 0


@pytest.mark.asyncio
async def test_failed_replay_keeps_preserved_facts(
    catalog_service, redis_client, monkeypatch
):
    await catalog_service.apply_fact(fact("price", price_pool(list_value=100)))
    await catalog_service.apply_fact(fact("stock_balance", stock_balance(w1=2)))
    store = catalog_service._store
    put_product = store.put_product
    monkeypatch.setattr(
        store, "put_product", AsyncMock(side_effect=ConnectionError("redis down"))
    )

    with pytest.raises(ConnectionError):
        await catalog_service.apply_fact(fact("product_item", product_item()))

    assert await redis_client.exists("actualization:cache:preserve-price-sku-1") == 1
    assert (
        await redis_client.exists("actualization:cache:preserve-stock-balance-sku-1")
        == 1
    )
    assert await catalog_service.get_product("product-1") is None

    monkeypatch.setattr(store, "put_product", put_product)
    product = await catalog_service.apply_fact(fact("product_item", product_item()))

    assert product.find_price("sku-1") is not None
    assert product.find_full_item("sku-1").stock_balance is not None
    assert await redis_client.exists("actualization:cache:preserve-price-sku-1") == 0
    assert (
        await redis_client.exists("actualization:cache:preserve-stock-balance-sku-1")
        == 0
    )


@pytest.mark.asyncio
async def test_clearing_last_slot_forgets_item(catalog_service):
    await catalog_service.apply_fact(fact("product_item", product_item()))

    await catalog_service.apply_fact(delete("product_item"))

    assert await catalog_service.get_product("product-1") is None
    parked = await catalog_service.apply_fact(fact("price", price_pool(list_value=100)))
    assert parked is None


@pytest.mark.asyncio
async def test_clearing_one_of_two_items_keeps_product(catalog_service):
    await catalog_service.apply_fact(fact("product_item", product_item()))
    await catalog_service.apply_fact(fact("product_item", product_item("sku-2"), "sku-2"))

    product = await catalog_service.apply_fact(delete("product_item"))

    assert list(product.incomplete_items) == ["sku-2"]
    assert await catalog_service.get_product("product-1") == product
