"""Tests for promoting incomplete items and products."""

from datetime import date

from actualization.models.completion import (
    CompletedItem,
    IncompleteItem,
    IncompleteProduct,
    IncompleteProductItem,
    MissingProductItemPart,
    ProductItemPart,
)
from actualization.models.inventory import (
    AvailabilityKind,
    CalculatedBackorder,
    CalculatedBackorderAvailability,
    ManualBackorder,
    ProductItemBackorderAvailability,
)
from actualization.models.results import FullSuccess, NoSuccess, PartialSuccess
from actualization.services.catalog import merge
from actualization.services.catalog.completion import complete_product, try_complete_item
from tests.factories import NOW, inventory, price_pool, product_item


def _item(sku: str = "sku-1", *, with_price: bool = True) -> IncompleteProductItem:
    item = IncompleteProductItem.empty(sku)
    item = merge.with_product_item(product_item(sku), item)
    item = merge.with_inventory(inventory(sku), item)
    if with_price:
        item = merge.with_price(price_pool(sku, list_value=100), item)
    return item


def _backorder_fact(sku: str = "sku-1") -> ProductItemBackorderAvailability:
    return ProductItemBackorderAvailability(
        product_item_id=sku,
        backorder_availability=CalculatedBackorderAvailability(
            availability_date=date(2024, 7, 1),
            availability_kind=AvailabilityKind.SUPPLIER_CONFIRMED,
            quantity_to_be_available=4,
        ),
        timestamp=NOW,
    )


def test_item_without_price_reports_only_price():
    result = try_complete_item(_item(with_price=False))

    assert result == IncompleteItem(
        [MissingProductItemPart(part=ProductItemPart.PRICE, item_id="sku-1")]
    )


def test_empty_item_reports_every_part():
    result = try_complete_item(IncompleteProductItem.empty("sku-1"))

    assert [m.part for m in result.missing_parts] == [
        ProductItemPart.PRODUCT_ITEM,
        ProductItemPart.PRICE,
        ProductItemPart.INVENTORY,
    ]


def test_stock_balance_is_optional():
    result = try_complete_item(_item())

    assert isinstance(result, CompletedItem)
    assert result.item.stock_balance is None


def test_calculated_backorder_is_folded_into_inventory():
    item = merge.with_backorder_availability(_backorder_fact(), _item())

    result = try_complete_item(item)

    backorder = result.item.inventory.backorder_availability
    assert isinstance(backorder, CalculatedBackorder)
    assert backorder.available_on == date(2024, 7, 1)


def test_published_backorder_is_kept():
    item = _item()
    item = item.model_copy(
        update={
            "inventory": item.inventory.model_copy(
                update={
                    "backorder_availability": ManualBackorder(
                        backorder_availability_date=date(2024, 8, 1)
                    )
                }
            )
        }
    )
    item = merge.with_backorder_availability(_backorder_fact(), item)

    result = try_complete_item(item)

    assert result.item.inventory.backorder_availability.available_on == date(2024, 8, 1)


def test_product_with_one_incomplete_item_is_partial():
    product = IncompleteProduct.empty("product-1")
    product = merge.with_incomplete_item(product, _item("sku-1"))
    product = merge.with_incomplete_item(product, _item("sku-2", with_price=False))

    result = complete_product(product)

    assert isinstance(result, PartialSuccess)
    assert [i.product_item.sku for i in result.value.items] == ["sku-1"]
    assert result.errors == [
        MissingProductItemPart(part=ProductItemPart.PRICE, item_id="sku-2")
    ]


def test_product_with_all_items_complete():
    product = merge.with_incomplete_item(IncompleteProduct.empty("product-1"), _item())

    assert isinstance(complete_product(product), FullSuccess)


def test_product_without_complete_items():
    product = merge.with_incomplete_item(
        IncompleteProduct.empty("product-1"), _item(with_price=False)
    )

    result = complete_product(product)

    assert isinstance(result, NoSuccess)
    assert result.id == "product-1"
