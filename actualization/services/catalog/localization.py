"""Projection of complete items into per-language, per-store views."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from actualization.models.catalog import (
    NumberSpecValue,
    ProductItem,
    RichSpecValue,
    SpecValue,
    TechSpec,
    UserRating,
)
from actualization.models.completion import (
    CompletedItem,
    CompleteProduct,
    CompleteProductItem,
    IncompleteItem,
    IncompleteProduct,
    IncompleteProductItem,
    ItemId,
)
from actualization.models.localized import (
    ActualizedItem,
    CompletionError,
    FullItemError,
    ItemLocalizationError,
    ItemLocalizationFailed,
    LocalizationError,
    LocalizationErrors,
    LocalizedCompleteItem,
    LocalizedCompleteProduct,
    LocalizedNumberSpecValue,
    LocalizedProductItem,
    LocalizedRichSpecValue,
    LocalizedSpecValue,
    LocalizedStringSpecValue,
    LocalizedTechSpec,
    MissingField,
    NoActivePrice,
    NoActivePriceError,
    ProductExportError,
    ProductItemLocalizationError,
    ProductItemRequiredField,
)
from actualization.models.results import (
    FullSuccess,
    NoSuccess,
    PartialResult,
    PartialSuccess,
    append_errors,
    map_error,
)
from actualization.models.store import Language, StoreTimeZone
from actualization.services.catalog.completion import complete_product, try_complete_item
from actualization.services.catalog.stock import item_stock
from actualization.services.pricing import engine

logger = logging.getLogger(__name__)


def _localize_rich_spec(spec: RichSpecValue, language: Language) -> LocalizedRichSpecValue:
    if isinstance(spec, NumberSpecValue):
        unit_names = spec.localized_unit_names or {}
        return LocalizedNumberSpecValue(
            value=spec.value,
            measure_unit=spec.measure_unit,
            localized_value=spec.localized_values.get(language),
            localized_unit_name=unit_names.get(language),
        )
    return LocalizedStringSpecValue(
        value=spec.value, localized_value=spec.localized_values.get(language)
    )


def _localize_spec_value(
    value: SpecValue, language: Language
) -> LocalizedSpecValue | None:
    if value.flag is not None:
        return LocalizedSpecValue(flag=value.flag)
    if value.single is not None:
        return LocalizedSpecValue(single=_localize_rich_spec(value.single, language))
    if value.multi:
        return LocalizedSpecValue(
            multi=[_localize_rich_spec(v, language) for v in value.multi]
        )
    return None


def localize_tech_specs(specs: list[TechSpec], language: Language) -> list[LocalizedTechSpec]:
    """Localize specs, dropping the ones that end up without a value."""

    localized = []
    for spec in specs:
        value = _localize_spec_value(spec.spec_value, language)
        if value is None:
            continue
        localized.append(
            LocalizedTechSpec(
                spec_name=spec.spec_name,
                spec_value=value,
                spec_localization=spec.spec_localization.get(language),
            )
        )
    return localized


def _not_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def localize_product_item(
    item: ProductItem, language: Language
) -> tuple[LocalizedProductItem | None, list[ProductItemLocalizationError]]:
    """Localize ``item``; every missing required field is reported, not just the first."""

    required: dict[ProductItemRequiredField, Any] = {
        ProductItemRequiredField.PRO_TERM: _not_blank(item.pro_term.get(language)),
        ProductItemRequiredField.FULL_REVIEW: item.full_review.get(language),
        ProductItemRequiredField.SHORT_DESCRIPTION: _not_blank(
            item.short_description.get(language)
        ),
        ProductItemRequiredField.SEO: item.seo.get(language),
        ProductItemRequiredField.MPN: _not_blank(item.mpn),
    }
    errors = [MissingField(field=f) for f, value in required.items() if value is None]
    if errors:
        return None, errors

    localized = LocalizedProductItem(
        sku=item.sku,
        product_id=item.product_id,
        selling_start=item.selling_start_date,
        primary_category_id=item.primary_category_id,
        category_ids=item.category_ids,
        brand=item.brand,
        warranty=item.warranty,
        campaign_ids=item.campaign_ids,
        mpn=required[ProductItemRequiredField.MPN],
        pro_term=required[ProductItemRequiredField.PRO_TERM],
        feature=item.feature.get(language),
        variant=item.variant.get(language),
        short_description=required[ProductItemRequiredField.SHORT_DESCRIPTION],
        full_review=required[ProductItemRequiredField.FULL_REVIEW],
        primary_image_id=item.primary_image_id,
        secondary_image_ids=item.secondary_image_ids,
        assets=item.assets,
        dimensions=item.dimensions,
        seo=required[ProductItemRequiredField.SEO],
        keywords=item.keywords.get(language, []),
        user_rating=item.user_rating.get(language, UserRating()),
        tech_specs=localize_tech_specs(item.tech_specs, language),
        energy_class=item.energy_class,
        sort_order=item.sort_order,
    )
    return localized, []


def localize_complete_item(
    now: datetime,
    store_timezone: StoreTimeZone,
    language: Language,
    item: CompleteProductItem,
) -> tuple[LocalizedCompleteItem | None, list[ItemLocalizationError]]:
    """Localize text and resolve the price; both must succeed."""

    sku = item.product_item.sku
    localized, field_errors = localize_product_item(item.product_item, language)
    price = engine.current(now, store_timezone, item.price)

    errors: list[ItemLocalizationError] = []
    if field_errors:
        errors.append(
            ItemLocalizationFailed(item_id=sku, language=language, errors=field_errors)
        )
    if price is None:
        errors.append(NoActivePrice(item_id=sku))
    if errors:
        return None, errors

    return (
        LocalizedCompleteItem(
            product_item=localized,
            price=price,
            inventory=item.inventory,
            stock=item_stock(item.stock_balance),
            language=language,
        ),
        [],
    )


def _to_full_item_error(error: ItemLocalizationError) -> FullItemError:
    if isinstance(error, NoActivePrice):
        return NoActivePriceError()
    return LocalizationErrors(errors=error.errors)


def to_full_item_errors(
    errors: list[ItemLocalizationError],
) -> dict[ItemId, list[FullItemError]]:
    grouped: dict[ItemId, list[FullItemError]] = {}
    for error in errors:
        grouped.setdefault(error.item_id, []).append(_to_full_item_error(error))
    return grouped


def try_localize_complete_product(
    now: datetime,
    product: CompleteProduct,
    store_timezone: StoreTimeZone,
    language: Language,
) -> PartialResult:
    variations: list[LocalizedCompleteItem] = []
    errors: list[ItemLocalizationError] = []
    for item in product.items:
        localized, item_errors = localize_complete_item(
            now, store_timezone, language, item
        )
        if localized is not None:
            variations.append(localized)
        errors.extend(item_errors)

    if not variations:
        return NoSuccess(product.product_id, errors)

    localized_product = LocalizedCompleteProduct(
        product_id=product.product_id,
        language=language,
        variations=sorted(variations, key=lambda v: v.product_item.sku),
        unavailable_variations=to_full_item_errors(errors),
    )
    if errors:
        return PartialSuccess(localized_product, errors)
    return FullSuccess(localized_product)


def complete_and_localize_item(
    now: datetime,
    item: IncompleteProductItem,
    store_timezone: StoreTimeZone,
    language: Language,
) -> tuple[LocalizedCompleteItem | None, list[ProductExportError]]:
    match try_complete_item(item):
        case IncompleteItem(missing_parts=parts):
            return None, [CompletionError(error=part) for part in parts]
        case CompletedItem(item=complete):
            localized, errors = localize_complete_item(
                now, store_timezone, language, complete
            )
            return localized, [LocalizationError(error=e) for e in errors]
    raise TypeError("Unexpected completion result")


def complete_and_localize_item_for_all_stores(
    now: datetime, item: IncompleteProductItem
) -> dict[StoreTimeZone, dict[Language, tuple[LocalizedCompleteItem | None, list[ProductExportError]]]]:
    return {
        store: {
            language: complete_and_localize_item(now, item, store, language)
            for language in Language
        }
        for store in StoreTimeZone
    }


def complete_and_localize_product(
    now: datetime,
    product: IncompleteProduct,
    store_timezone: StoreTimeZone,
    language: Language,
) -> PartialResult:
    """Complete and localize a product; items missing parts skip localization."""

    completion = map_error(lambda e: CompletionError(error=e), complete_product(product))
    match completion:
        case FullSuccess(value=complete):
            return map_error(
                lambda e: LocalizationError(error=e),
                try_localize_complete_product(now, complete, store_timezone, language),
            )
        case PartialSuccess(value=complete, errors=completion_errors):
            localized = map_error(
                lambda e: LocalizationError(error=e),
                try_localize_complete_product(now, complete, store_timezone, language),
            )
            return append_errors(completion_errors, localized)
        case NoSuccess():
            return completion
    raise TypeError("Unexpected completion result")


def complete_and_localize_for_all_languages(
    now: datetime, product: IncompleteProduct, store_timezone: StoreTimeZone
) -> dict[Language, PartialResult]:
    return {
        language: complete_and_localize_product(now, product, store_timezone, language)
        for language in Language
    }


def actualized_info(item: LocalizedCompleteItem) -> ActualizedItem:
    return ActualizedItem(
        sku=item.product_item.sku,
        is_active=item.inventory.is_active,
        price=item.price,
        inventory=item.inventory,
        stock_balance=item.stock,
    )
