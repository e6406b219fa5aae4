"""Language-specific projections of complete items and their error types."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from actualization.models.catalog import (
    Asset,
    BrandShortInfo,
    CategoryTree,
    Dimensions,
    EnergyClass,
    FullReview,
    SeoUrlData,
    UserRating,
)
from actualization.models.completion import ItemId, MissingProductItemPart, ProductId
from actualization.models.inventory import FullInventory
from actualization.models.price import CurrentPrice
from actualization.models.stock import ItemStock
from actualization.models.store import Language


class LocalizedStringSpecValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str
    localized_value: str | None = None


class LocalizedNumberSpecValue(BaseModel):
    kind: Literal["number"] = "number"
    value: float
    measure_unit: str | None = None
    localized_value: str | None = None
    localized_unit_name: str | None = None


LocalizedRichSpecValue = LocalizedStringSpecValue | LocalizedNumberSpecValue


class LocalizedSpecValue(BaseModel):
    flag: bool | None = None
    single: LocalizedRichSpecValue | None = None
    multi: list[LocalizedRichSpecValue] | None = None


class LocalizedTechSpec(BaseModel):
    spec_name: str
    spec_value: LocalizedSpecValue
    spec_localization: str | None = None


class LocalizedProductItem(BaseModel):
    sku: str
    product_id: ProductId
    selling_start: datetime | None = None

    primary_category_id: str
    category_ids: list[CategoryTree] = Field(default_factory=list)

    brand: BrandShortInfo

    warranty: str | None = None
    campaign_ids: list[str] = Field(default_factory=list)

    mpn: str
    pro_term: str
    feature: str | None = None
    variant: str | None = None

    short_description: str
    full_review: FullReview

    primary_image_id: str
    secondary_image_ids: list[str] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)

    dimensions: Dimensions

    seo: SeoUrlData
    keywords: list[str] = Field(default_factory=list)
    user_rating: UserRating

    tech_specs: list[LocalizedTechSpec] = Field(default_factory=list)

    energy_class: EnergyClass | None = None
    sort_order: int | None = None


class LocalizedCompleteItem(BaseModel):
    product_item: LocalizedProductItem
    price: CurrentPrice
    inventory: FullInventory
    stock: ItemStock
    language: Language


class ProductItemRequiredField(StrEnum):
    PRO_TERM = "pro_term"
    MPN = "mpn"
    FULL_REVIEW = "full_review"
    SHORT_DESCRIPTION = "short_description"
    SEO = "seo"


class MissingField(BaseModel):
    """The only kind of ProductItemLocalizationError: a required field is absent."""

    kind: Literal["missing_field"] = "missing_field"
    field: ProductItemRequiredField


ProductItemLocalizationError = MissingField


class LocalizationErrors(BaseModel):
    kind: Literal["localization_errors"] = "localization_errors"
    errors: list[ProductItemLocalizationError]


class NoActivePriceError(BaseModel):
    kind: Literal["no_active_price"] = "no_active_price"


FullItemError = Annotated[
    LocalizationErrors | NoActivePriceError, Field(discriminator="kind")
]


class ItemLocalizationFailed(BaseModel):
    kind: Literal["item_localization_error"] = "item_localization_error"
    item_id: ItemId
    language: Language
    errors: list[ProductItemLocalizationError]


class NoActivePrice(BaseModel):
    kind: Literal["no_active_price"] = "no_active_price"
    item_id: ItemId


ItemLocalizationError = Annotated[
    ItemLocalizationFailed | NoActivePrice, Field(discriminator="kind")
]


class CompletionError(BaseModel):
    kind: Literal["completion_error"] = "completion_error"
    error: MissingProductItemPart

    @property
    def item_id(self) -> ItemId:
        return self.error.item_id


class LocalizationError(BaseModel):
    kind: Literal["localization_error"] = "localization_error"
    error: ItemLocalizationError

    @property
    def item_id(self) -> ItemId:
        return self.error.item_id


ProductExportError = Annotated[
    CompletionError | LocalizationError, Field(discriminator="kind")
]


class LocalizedCompleteProduct(BaseModel):
    product_id: ProductId
    language: Language
    variations: list[LocalizedCompleteItem] = Field(default_factory=list)
    unavailable_variations: dict[ItemId, list[FullItemError]] = Field(
        default_factory=dict
    )


class ProductErrorReport(BaseModel):
    product_id: ProductId
    errors: dict[Language, list[ProductExportError]] = Field(default_factory=dict)
    timestamp: datetime


class ActualizedItem(BaseModel):
    """Short view of an item used by cart and listing pages."""

    sku: str
    is_active: bool
    price: CurrentPrice
    inventory: FullInventory
    stock_balance: ItemStock
