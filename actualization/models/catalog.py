"""Raw catalog item metadata as delivered by the catalog source."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from actualization.models.store import Language


class StringSpecValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str
    localized_values: dict[Language, str] = Field(default_factory=dict)


class NumberSpecValue(BaseModel):
    kind: Literal["number"] = "number"
    value: float
    measure_unit: str | None = None
    localized_values: dict[Language, str] = Field(default_factory=dict)
    localized_unit_names: dict[Language, str] | None = None


RichSpecValue = StringSpecValue | NumberSpecValue


class SpecValue(BaseModel):
    """Tech spec value: a flag, a single rich value, or several of them."""

    flag: bool | None = None
    single: RichSpecValue | None = None
    multi: list[RichSpecValue] | None = None


class TechSpec(BaseModel):
    spec_name: str
    spec_value: SpecValue
    spec_localization: dict[Language, str] = Field(default_factory=dict)


class Asset(BaseModel):
    id: str
    name: str
    file_name: str


class WeightInfo(BaseModel):
    tara: float = 0.0
    netto: float = 0.0
    gross: float = 0.0


class Dimensions(BaseModel):
    height: float = 0.0
    length: float = 0.0
    width: float = 0.0
    weight: WeightInfo = Field(default_factory=WeightInfo)
    freight_class: str | None = Field(
        default=None, description="Raw freight class text from the catalog source"
    )


class CategoryTree(BaseModel):
    category_id: str
    is_default: bool = False
    parent_category: CategoryTree | None = None


class BrandShortInfo(BaseModel):
    id: str
    name: str


class FullReview(BaseModel):
    campaign_intro_text: str | None = None
    long_description: str
    unique_selling_points: list[str] = Field(default_factory=list)


class UserRating(BaseModel):
    rating: float = 0.0
    reviews_count: int = 0
    is_visible: bool = False


class PageUrl(BaseModel):
    is_active: bool
    slug: str


class SeoUrlData(BaseModel):
    urls: list[PageUrl] = Field(default_factory=list)


class EnergyClass(BaseModel):
    label: Literal["A", "B", "C", "D", "E", "F", "G"]
    description: dict[Language, str] = Field(default_factory=dict)


class ProductItem(BaseModel):
    """Catalog metadata of a single sellable variation of a product."""

    sku: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    selling_start_date: datetime | None = None

    primary_category_id: str = ""
    category_ids: list[CategoryTree] = Field(default_factory=list)

    brand: BrandShortInfo

    campaign_ids: list[str] = Field(default_factory=list)
    mpn: str = ""
    pro_term: dict[Language, str] = Field(default_factory=dict)
    feature: dict[Language, str] = Field(default_factory=dict)
    variant: dict[Language, str] = Field(default_factory=dict)

    short_description: dict[Language, str] = Field(default_factory=dict)
    full_review: dict[Language, FullReview] = Field(default_factory=dict)

    primary_image_id: str = ""
    secondary_image_ids: list[str] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)

    dimensions: Dimensions = Field(default_factory=Dimensions)

    seo: dict[Language, SeoUrlData] = Field(default_factory=dict)
    keywords: dict[Language, list[str]] = Field(default_factory=dict)
    user_rating: dict[Language, UserRating] = Field(default_factory=dict)

    tech_specs: list[TechSpec] = Field(default_factory=list)
    energy_class: EnergyClass | None = None

    sort_order: int | None = None
    warranty: str | None = None
