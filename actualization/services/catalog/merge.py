"""Pure update operations folding upstream facts into incomplete items.

Every ``with_*`` operation is idempotent and, per field, commutative, so facts
can be applied in the order they arrive. The single exception is the price
update: limited-price quantities never increase across updates, which makes
the result depend on the order in which pools are applied.
"""

from __future__ import annotations

from collections.abc import Callable

from actualization.models.catalog import ProductItem
from actualization.models.completion import (
    IncompleteProduct,
    IncompleteProductItem,
    ItemId,
)
from actualization.models.inventory import (
    FullInventory,
    ProductItemBackorderAvailability,
    ProductItemStockBalance,
)
from actualization.models.price import LimitedPrice, ProductItemPrice


def _merge_limited_prices(
    old_prices: list[LimitedPrice], new_prices: list[LimitedPrice]
) -> list[LimitedPrice]:
    old_quantities = {p.price.price_id: p.quantity for p in old_prices}
    merged = []
    for price in new_prices:
        old_quantity = old_quantities.get(price.price.price_id)
        if old_quantity is None:
            merged.append(price)
        else:
            merged.append(
                price.model_copy(update={"quantity": min(old_quantity, price.quantity)})
            )
    return merged


def _merge_prices(
    old_price: ProductItemPrice, new_price: ProductItemPrice
) -> ProductItemPrice:
    # Upstream pools carry no history; the logged one belongs to this service.
    return new_price.model_copy(
        update={
            "limited_prices": _merge_limited_prices(
                old_price.limited_prices, new_price.limited_prices
            ),
            "selling_price_history": {
                **old_price.selling_price_history,
                **new_price.selling_price_history,
            },
        }
    )


def parse_freight_class(raw: str | None) -> int:
    try:
        return int((raw or "").strip())
    except ValueError:
        return 0


def _eval_freight_class(item: ProductItem, inventory: FullInventory) -> int:
    if inventory.freight_class is not None:
        return inventory.freight_class
    return parse_freight_class(item.dimensions.freight_class)


def _merge_freight_class(incomplete: IncompleteProductItem) -> IncompleteProductItem:
    """Make item dimensions and inventory agree on the freight class."""

    item, inventory = incomplete.product_item, incomplete.inventory
    if item is None or inventory is None:
        return incomplete

    freight_class = _eval_freight_class(item, inventory)
    dimensions = item.dimensions.model_copy(
        update={"freight_class": str(freight_class) if freight_class else None}
    )
    return incomplete.model_copy(
        update={
            "product_item": item.model_copy(update={"dimensions": dimensions}),
            "inventory": inventory.model_copy(
                update={"freight_class": freight_class or None}
            ),
        }
    )


def with_product_item(
    item: ProductItem, incomplete: IncompleteProductItem
) -> IncompleteProductItem:
    if incomplete.item_id != item.sku:
        return incomplete
    return _merge_freight_class(incomplete.model_copy(update={"product_item": item}))


def with_inventory(
    inventory: FullInventory, incomplete: IncompleteProductItem
) -> IncompleteProductItem:
    if incomplete.item_id != inventory.sku:
        return incomplete
    return _merge_freight_class(incomplete.model_copy(update={"inventory": inventory}))


def with_stock_balance(
    stock_balance: ProductItemStockBalance, incomplete: IncompleteProductItem
) -> IncompleteProductItem:
    if incomplete.item_id != stock_balance.product_item_id:
        return incomplete
    return incomplete.model_copy(update={"stock_balance": stock_balance})


def with_backorder_availability(
    backorder_availability: ProductItemBackorderAvailability,
    incomplete: IncompleteProductItem,
) -> IncompleteProductItem:
    if incomplete.item_id != backorder_availability.product_item_id:
        return incomplete
    return incomplete.model_copy(
        update={"backorder_availability": backorder_availability}
    )


def with_price(
    price: ProductItemPrice, incomplete: IncompleteProductItem
) -> IncompleteProductItem:
    """Replace the price pool; limited quantities only ever go down."""

    if incomplete.item_id != price.item_id:
        return incomplete
    if incomplete.price is not None:
        price = _merge_prices(incomplete.price, price)
    return incomplete.model_copy(update={"price": price})


def remove_product_item(incomplete: IncompleteProductItem) -> IncompleteProductItem:
    return incomplete.model_copy(update={"product_item": None})


def remove_price(incomplete: IncompleteProductItem) -> IncompleteProductItem:
    return incomplete.model_copy(update={"price": None})


def remove_inventory(incomplete: IncompleteProductItem) -> IncompleteProductItem:
    return incomplete.model_copy(update={"inventory": None})


def remove_stock_balance(incomplete: IncompleteProductItem) -> IncompleteProductItem:
    return incomplete.model_copy(update={"stock_balance": None})


def remove_backorder_availability(
    incomplete: IncompleteProductItem,
) -> IncompleteProductItem:
    return incomplete.model_copy(update={"backorder_availability": None})


# Product level


def with_incomplete_item(
    product: IncompleteProduct, item: IncompleteProductItem
) -> IncompleteProduct:
    items = {**product.incomplete_items, item.item_id: item}
    return product.model_copy(update={"incomplete_items": items})


def _update_item(
    product: IncompleteProduct,
    item_id: ItemId,
    update: Callable[[IncompleteProductItem], IncompleteProductItem],
) -> IncompleteProduct:
    existing = product.find_full_item(item_id) or IncompleteProductItem.empty(item_id)
    return with_incomplete_item(product, update(existing))


def product_with_product_item(
    product: IncompleteProduct, item: ProductItem
) -> IncompleteProduct:
    return _update_item(product, item.sku, lambda i: with_product_item(item, i))


def product_with_price(
    product: IncompleteProduct, price: ProductItemPrice
) -> IncompleteProduct:
    return _update_item(product, price.item_id, lambda i: with_price(price, i))


def product_with_inventory(
    product: IncompleteProduct, inventory: FullInventory
) -> IncompleteProduct:
    return _update_item(product, inventory.sku, lambda i: with_inventory(inventory, i))


def product_with_stock_balance(
    product: IncompleteProduct, stock_balance: ProductItemStockBalance
) -> IncompleteProduct:
    return _update_item(
        product,
        stock_balance.product_item_id,
        lambda i: with_stock_balance(stock_balance, i),
    )


def product_with_backorder_availability(
    product: IncompleteProduct, backorder_availability: ProductItemBackorderAvailability
) -> IncompleteProduct:
    return _update_item(
        product,
        backorder_availability.product_item_id,
        lambda i: with_backorder_availability(backorder_availability, i),
    )


def _remove_from_item(
    product: IncompleteProduct,
    item_id: ItemId,
    remove: Callable[[IncompleteProductItem], IncompleteProductItem],
) -> IncompleteProduct:
    item = product.find_full_item(item_id)
    if item is None:
        return product
    return with_incomplete_item(product, remove(item))


def product_remove_product_item(
    product: IncompleteProduct, item_id: ItemId
) -> IncompleteProduct:
    return _remove_from_item(product, item_id, remove_product_item)


def product_remove_price(product: IncompleteProduct, item_id: ItemId) -> IncompleteProduct:
    return _remove_from_item(product, item_id, remove_price)


def product_remove_inventory(
    product: IncompleteProduct, item_id: ItemId
) -> IncompleteProduct:
    return _remove_from_item(product, item_id, remove_inventory)


def product_remove_stock_balance(
    product: IncompleteProduct, item_id: ItemId
) -> IncompleteProduct:
    return _remove_from_item(product, item_id, remove_stock_balance)


def product_remove_backorder_availability(
    product: IncompleteProduct, item_id: ItemId
) -> IncompleteProduct:
    return _remove_from_item(product, item_id, remove_backorder_availability)


def remove_full_item(product: IncompleteProduct, item_id: ItemId) -> IncompleteProduct:
    items = {k: v for k, v in product.incomplete_items.items() if k != item_id}
    return product.model_copy(update={"incomplete_items": items})
