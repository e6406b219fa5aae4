"""Tests for folding upstream facts into incomplete items."""

from actualization.models.catalog import Dimensions
from actualization.models.completion import IncompleteProduct, IncompleteProductItem
from actualization.services.catalog import merge
from tests.factories import (
    TODAY,
    inventory,
    original,
    price_pool,
    product_item,
    stock_balance,
)


def _limited_quantities(item: IncompleteProductItem) -> dict[str, int]:
    return {p.price.price_id: p.quantity for p in item.price.limited_prices}


def test_limited_quantity_never_increases():
    item = IncompleteProductItem.empty("sku-1")
    item = merge.with_price(price_pool(list_value=100, limited=[(60, 5)]), item)
    item = merge.with_price(price_pool(list_value=100, limited=[(60, 8)]), item)

    assert _limited_quantities(item) == {"limited-60": 5}


def test_new_limited_price_keeps_its_quantity():
    item = IncompleteProductItem.empty("sku-1")
    item = merge.with_price(price_pool(list_value=100, limited=[(60, 5)]), item)
    item = merge.with_price(price_pool(list_value=100, limited=[(50, 8)]), item)

    assert _limited_quantities(item) == {"limited-50": 8}


def test_fact_for_another_item_is_ignored():
    item = IncompleteProductItem.empty("sku-1")

    assert merge.with_inventory(inventory("sku-2"), item) == item
    assert merge.with_price(price_pool("sku-2", list_value=1), item) == item


def test_freight_class_taken_from_dimensions():
    item = IncompleteProductItem.empty("sku-1")
    item = merge.with_product_item(
        product_item(dimensions=Dimensions(freight_class=" 12 ")), item
    )
    item = merge.with_inventory(inventory(), item)

    assert item.inventory.freight_class == 12
    assert item.product_item.dimensions.freight_class == "12"


def test_inventory_freight_class_wins():
    item = IncompleteProductItem.empty("sku-1")
    item = merge.with_inventory(inventory(freight_class=7), item)
    item = merge.with_product_item(
        product_item(dimensions=Dimensions(freight_class="12")), item
    )

    assert item.inventory.freight_class == 7
    assert item.product_item.dimensions.freight_class == "7"


def test_unparsable_freight_class_is_cleared():
    item = IncompleteProductItem.empty("sku-1")
    item = merge.with_product_item(
        product_item(dimensions=Dimensions(freight_class="heavy")), item
    )
    item = merge.with_inventory(inventory(), item)

    assert item.inventory.freight_class is None
    assert item.product_item.dimensions.freight_class is None


def test_fact_order_does_not_matter():
    facts = [
        lambda p: merge.product_with_product_item(p, product_item()),
        lambda p: merge.product_with_inventory(p, inventory()),
        lambda p: merge.product_with_stock_balance(p, stock_balance(w1=3)),
    ]

    forward = IncompleteProduct.empty("product-1")
    for apply in facts:
        forward = apply(forward)
    backward = IncompleteProduct.empty("product-1")
    for apply in reversed(facts):
        backward = apply(backward)

    assert forward == backward


def test_remove_clears_one_slot():
    product = merge.product_with_inventory(
        merge.product_with_product_item(IncompleteProduct.empty("product-1"), product_item()),
        inventory(),
    )

    product = merge.product_remove_inventory(product, "sku-1")

    assert product.find_inventory("sku-1") is None
    assert product.find_product_item("sku-1") is not None


def test_remove_on_unknown_item_is_a_no_op():
    product = IncompleteProduct.empty("product-1")

    assert merge.product_remove_price(product, "sku-9") == product


def test_remove_full_item():
    product = merge.product_with_product_item(
        IncompleteProduct.empty("product-1"), product_item()
    )

    assert merge.remove_full_item(product, "sku-1").incomplete_items == {}


def test_price_update_keeps_logged_history():
    item = IncompleteProductItem.empty("sku-1")
    item = merge.with_price(price_pool(list_value=100, history={TODAY: original(100)}), item)
    item = merge.with_price(price_pool(list_value=90), item)

    assert item.price.list_prices[0].price.value == 90
    assert list(item.price.selling_price_history) == [TODAY]
