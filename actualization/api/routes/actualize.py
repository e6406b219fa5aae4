"""Export routes: actualized items, localized products and error reports."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from actualization.config import settings
from actualization.models.export import (
    ActualizeRequest,
    ActualizeResponse,
    ProductExportResponse,
)
from actualization.models.localized import ProductErrorReport, ProductExportError
from actualization.models.results import FullSuccess, NoSuccess, PartialSuccess
from actualization.models.store import Language, StoreTimeZone
from actualization.services.catalog.service import CatalogService, get_catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["export"])

ServiceDependency = Annotated[CatalogService, Depends(get_catalog_service)]


def _parse_language(value: str | None) -> Language:
    if value is None:
        return Language.RUSSIAN
    language = Language.parse(value)
    if language is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown language: {value}",
        )
    return language


def _parse_timezone(value: str | None) -> StoreTimeZone:
    store = StoreTimeZone.parse(value or settings.DEFAULT_STORE_TIMEZONE)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown store timezone: {value}",
        )
    return store


def group_by_item(
    errors: Sequence[ProductExportError],
) -> dict[str, list[ProductExportError]]:
    grouped: dict[str, list[ProductExportError]] = defaultdict(list)
    for error in errors:
        grouped[error.item_id].append(error)
    return dict(grouped)


@router.post("/actualize", summary="Current price, inventory and stock of items")
async def actualize_items(
    request: ActualizeRequest, service: ServiceDependency
) -> ActualizeResponse:
    store = request.timezone or _parse_timezone(None)
    items, errors = await service.actualize_items(
        request.product_item_ids, request.language, store
    )
    return ActualizeResponse(items=items, errors=errors)


@router.get("/products/{product_id}", summary="Localized product for one store")
async def export_product(
    product_id: str,
    service: ServiceDependency,
    language: Annotated[str | None, Query()] = None,
    timezone: Annotated[str | None, Query()] = None,
) -> ProductExportResponse:
    """Complete and localize every variation of a product.

    Variations that miss a part or cannot be localized are reported in
    ``errors``; the product is still returned when at least one variation is
    sellable.
    """
    result = await service.export_product(
        product_id, _parse_language(language), _parse_timezone(timezone)
    )
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product {product_id} not found",
        )

    match result:
        case FullSuccess(value=product):
            return ProductExportResponse(
                product_id=product_id,
                status="full_success",
                product=product,
                unavailable_variations=product.unavailable_variations,
            )
        case PartialSuccess(value=product, errors=errors):
            return ProductExportResponse(
                product_id=product_id,
                status="partial_success",
                product=product,
                errors=group_by_item(errors),
                unavailable_variations=product.unavailable_variations,
            )
        case NoSuccess(errors=errors):
            return ProductExportResponse(
                product_id=product_id,
                status="no_success",
                errors=group_by_item(errors),
            )
    raise TypeError("Unexpected export result")


@router.get(
    "/products/{product_id}/errors",
    summary="Why variations of a product are not exported, per language",
)
async def product_errors(
    product_id: str,
    service: ServiceDependency,
    timezone: Annotated[str | None, Query()] = None,
) -> ProductErrorReport:
    report = await service.error_report(product_id, _parse_timezone(timezone))
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product {product_id} not found",
        )
    return report
