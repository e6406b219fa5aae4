"""Inventory, stock balance and backorder availability facts."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class TextDeliveryNotice(StrEnum):
    OUT_OF_SUPPLY = "out_of_supply"
    NOT_AVAILABLE = "not_available"
    OUT_FOR_SEASON = "out_for_season"


class AvailabilityKind(StrEnum):
    PARTIAL_BACKORDER_COVERAGE = "partial_backorder_coverage"
    SUPPLIER_PREDICTED = "supplier_predicted"
    SUPPLIER_CONFIRMED = "supplier_confirmed"
    DELIVERED_TO_WAREHOUSE = "delivered_to_warehouse"


class CalculatedBackorderAvailability(BaseModel):
    availability_date: date
    availability_kind: AvailabilityKind
    quantity_to_be_available: float
    exception_code: Literal["unconfirmed_date"] | None = None


class CalculatedBackorder(BaseModel):
    kind: Literal["calculated"] = "calculated"
    availability: CalculatedBackorderAvailability

    @property
    def available_on(self) -> date:
        return self.availability.availability_date


class ManualBackorder(BaseModel):
    kind: Literal["manual"] = "manual"
    backorder_availability_date: date

    @property
    def available_on(self) -> date:
        return self.backorder_availability_date


BackorderAvailability = Annotated[
    CalculatedBackorder | ManualBackorder, Field(discriminator="kind")
]


class FullInventory(BaseModel):
    """Sellability flags of an item as published by the inventory source."""

    sku: str = Field(..., min_length=1)
    in_stock_message: int = 0
    out_of_stock_message: int = 0
    out_of_stock_lead_time: int = 0
    backorder_availability: BackorderAvailability | None = None
    text_delivery_notice: TextDeliveryNotice | None = None
    drop_shipment_only: bool = False
    is_buyable: bool = True
    is_active: bool = True
    disabled_for_feeds: bool = False
    freight_class: int | None = None


class WarehouseStockBalance(BaseModel):
    quantity_available_now: float
    quantity_to_be_available: float = 0.0
    timestamp: datetime


class ProductItemStockBalance(BaseModel):
    product_item_id: str
    stock_balance: dict[int, WarehouseStockBalance] = Field(default_factory=dict)


class ProductItemBackorderAvailability(BaseModel):
    product_item_id: str
    backorder_availability: CalculatedBackorderAvailability | None = None
    timestamp: datetime
