"""Incomplete (in-progress) and complete catalog items."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field

from actualization.models.catalog import ProductItem
from actualization.models.inventory import (
    FullInventory,
    ProductItemBackorderAvailability,
    ProductItemStockBalance,
)
from actualization.models.price import ProductItemPrice

ProductId = str
ItemId = str


class IncompleteProductItem(BaseModel):
    """Materialized view of one item, assembled from independently arriving facts."""

    item_id: ItemId
    product_item: ProductItem | None = None
    price: ProductItemPrice | None = None
    inventory: FullInventory | None = None
    stock_balance: ProductItemStockBalance | None = None
    backorder_availability: ProductItemBackorderAvailability | None = None

    @classmethod
    def empty(cls, item_id: ItemId) -> IncompleteProductItem:
        return cls(item_id=item_id)


class IncompleteProduct(BaseModel):
    product_id: ProductId
    incomplete_items: dict[ItemId, IncompleteProductItem] = Field(
        default_factory=dict
    )

    @classmethod
    def empty(cls, product_id: ProductId) -> IncompleteProduct:
        return cls(product_id=product_id)

    def find_full_item(self, item_id: ItemId) -> IncompleteProductItem | None:
        return self.incomplete_items.get(item_id)

    def find_product_item(self, item_id: ItemId) -> ProductItem | None:
        item = self.find_full_item(item_id)
        return item.product_item if item else None

    def find_inventory(self, item_id: ItemId) -> FullInventory | None:
        item = self.find_full_item(item_id)
        return item.inventory if item else None

    def find_price(self, item_id: ItemId) -> ProductItemPrice | None:
        item = self.find_full_item(item_id)
        return item.price if item else None


class CompleteProductItem(BaseModel):
    """Item with every part required for serving; stock balance may be absent."""

    product_item: ProductItem
    price: ProductItemPrice
    inventory: FullInventory
    stock_balance: ProductItemStockBalance | None = None


class CompleteProduct(BaseModel):
    product_id: ProductId
    items: list[CompleteProductItem] = Field(default_factory=list)


class ProductItemPart(StrEnum):
    PRODUCT_ITEM = "product_item"
    PRICE = "price"
    INVENTORY = "inventory"


class MissingProductItemPart(BaseModel):
    part: ProductItemPart
    item_id: ItemId


@dataclass(frozen=True)
class CompletedItem:
    item: CompleteProductItem


@dataclass(frozen=True)
class IncompleteItem:
    missing_parts: list[MissingProductItemPart]


ItemCompletionResult = CompletedItem | IncompleteItem
