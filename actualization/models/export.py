"""Request and response schemas of the export API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from actualization.models.localized import (
    ActualizedItem,
    FullItemError,
    LocalizedCompleteProduct,
    ProductExportError,
)
from actualization.models.store import Language, StoreTimeZone


class ActualizeRequest(BaseModel):
    product_item_ids: list[str] = Field(..., min_length=1, max_length=500)
    language: Language = Language.RUSSIAN
    timezone: StoreTimeZone | None = Field(
        default=None,
        description="Store whose calendar day is used; defaults to the configured store",
    )


class ActualizeResponse(BaseModel):
    items: list[ActualizedItem] = Field(default_factory=list)
    errors: dict[str, list[ProductExportError]] = Field(default_factory=dict)


class ProductExportResponse(BaseModel):
    """Localized product with the variations that could not be served."""

    product_id: str
    status: Literal["full_success", "partial_success", "no_success"]
    product: LocalizedCompleteProduct | None = None
    errors: dict[str, list[ProductExportError]] = Field(default_factory=dict)
    unavailable_variations: dict[str, list[FullItemError]] = Field(
        default_factory=dict
    )
