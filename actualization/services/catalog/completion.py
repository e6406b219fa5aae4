"""Promotion of incomplete items and products to complete ones."""

from __future__ import annotations

import logging

from actualization.models.completion import (
    CompletedItem,
    CompleteProduct,
    CompleteProductItem,
    IncompleteItem,
    IncompleteProduct,
    IncompleteProductItem,
    ItemCompletionResult,
    MissingProductItemPart,
    ProductItemPart,
)
from actualization.models.inventory import CalculatedBackorder, FullInventory
from actualization.models.results import (
    FullSuccess,
    NoSuccess,
    PartialResult,
    PartialSuccess,
)

logger = logging.getLogger(__name__)


def _inventory_with_backorder(
    inventory: FullInventory, incomplete: IncompleteProductItem
) -> FullInventory:
    # An availability already published with the inventory takes precedence.
    fact = incomplete.backorder_availability
    if inventory.backorder_availability is not None or fact is None:
        return inventory
    if fact.backorder_availability is None:
        return inventory
    return inventory.model_copy(
        update={
            "backorder_availability": CalculatedBackorder(
                availability=fact.backorder_availability
            )
        }
    )


def try_complete_item(incomplete: IncompleteProductItem) -> ItemCompletionResult:
    """Complete the item or report every part that is still missing."""

    item, price, inventory = (
        incomplete.product_item,
        incomplete.price,
        incomplete.inventory,
    )
    # Stock balance is optional: virtual items such as bundles never get one.
    if item is not None and price is not None and inventory is not None:
        return CompletedItem(
            CompleteProductItem(
                product_item=item,
                price=price,
                inventory=_inventory_with_backorder(inventory, incomplete),
                stock_balance=incomplete.stock_balance,
            )
        )

    missing = [
        MissingProductItemPart(part=part, item_id=incomplete.item_id)
        for part, value in (
            (ProductItemPart.PRODUCT_ITEM, item),
            (ProductItemPart.PRICE, price),
            (ProductItemPart.INVENTORY, inventory),
        )
        if value is None
    ]
    return IncompleteItem(missing)


def complete_product(product: IncompleteProduct) -> PartialResult:
    completed: list[CompleteProductItem] = []
    missing: list[MissingProductItemPart] = []
    for incomplete in product.incomplete_items.values():
        match try_complete_item(incomplete):
            case CompletedItem(item=item):
                completed.append(item)
            case IncompleteItem(missing_parts=parts):
                missing.extend(parts)

    if not completed:
        logger.debug(
            "No complete items for product",
            extra={"product_id": product.product_id, "missing": len(missing)},
        )
        return NoSuccess(product.product_id, missing)

    complete = CompleteProduct(product_id=product.product_id, items=completed)
    if not missing:
        return FullSuccess(complete)
    return PartialSuccess(complete, missing)
