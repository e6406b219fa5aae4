"""Resolved stock view served with a localized item."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class BufferedWarehouseStock(BaseModel):
    kind: Literal["buffered"] = "buffered"
    quantity_available_now: float
    quantity_to_be_available: float


class ExternalWarehouseStock(BaseModel):
    kind: Literal["external"] = "external"
    warehouse_id: int
    quantity: float


class DropshipmentStock(BaseModel):
    kind: Literal["dropshipment"] = "dropshipment"
    warehouse_id: int
    quantity: float


AvailableStock = Annotated[
    BufferedWarehouseStock | ExternalWarehouseStock | DropshipmentStock,
    Field(discriminator="kind"),
]


def available_quantity(stock: AvailableStock) -> float:
    if isinstance(stock, BufferedWarehouseStock):
        return stock.quantity_available_now + stock.quantity_to_be_available
    return stock.quantity


class Warehouse(BaseModel):
    id: int
    is_dropshipment: bool


class AvailableItemStock(BaseModel):
    status: Literal["available"] = "available"
    stocks: list[AvailableStock]

    def is_in_stock(self) -> bool:
        return any(
            not (isinstance(s, DropshipmentStock) and s.quantity == 0)
            for s in self.stocks
        )

    def in_stock_quantity(self) -> float:
        for stock in self.stocks:
            quantity = available_quantity(stock)
            if quantity > 0:
                return quantity
        return 0.0


class OutOfStockItemStock(BaseModel):
    status: Literal["out_of_stock"] = "out_of_stock"
    lead_time: int = 0
    shipping_from_warehouse: Warehouse

    def is_in_stock(self) -> bool:
        return False

    def in_stock_quantity(self) -> float:
        return 0.0


ItemStock = Annotated[
    AvailableItemStock | OutOfStockItemStock, Field(discriminator="status")
]
