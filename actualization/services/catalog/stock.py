"""Stock view derived from per-warehouse balances."""

from __future__ import annotations

from collections.abc import Iterable

from actualization.models.inventory import ProductItemStockBalance, WarehouseStockBalance
from actualization.models.stock import (
    AvailableItemStock,
    AvailableStock,
    BufferedWarehouseStock,
    DropshipmentStock,
    ExternalWarehouseStock,
    ItemStock,
    OutOfStockItemStock,
    Warehouse,
)

MAIN_WAREHOUSE = 1
# Only reported when no warehouse is known at all.
DEFAULT_OOS_WAREHOUSE = -1
IGNORED_WAREHOUSES = frozenset({230})
WAREHOUSES_WITH_LEADTIME = frozenset({MAIN_WAREHOUSE})


def sanitize(warehouse_ids: Iterable[int]) -> list[int]:
    return [w for w in warehouse_ids if w not in IGNORED_WAREHOUSES]


def is_dropshipment_warehouse(warehouse_id: int) -> bool:
    return warehouse_id == 0 or warehouse_id >= 100000


def pick_warehouse_for_out_of_stock(warehouse_ids: list[int]) -> int:
    dropshipment = [w for w in warehouse_ids if is_dropshipment_warehouse(w)]
    if dropshipment:
        return dropshipment[-1]
    if warehouse_ids:
        return warehouse_ids[0]
    return DEFAULT_OOS_WAREHOUSE


def _warehouse_stock(
    warehouse_id: int, balance: WarehouseStockBalance
) -> AvailableStock | None:
    buffered = warehouse_id in WAREHOUSES_WITH_LEADTIME
    total = balance.quantity_available_now
    if buffered:
        total += balance.quantity_to_be_available
    if total <= 0:
        return None
    if buffered:
        return BufferedWarehouseStock(
            quantity_available_now=balance.quantity_available_now,
            quantity_to_be_available=balance.quantity_to_be_available,
        )
    return ExternalWarehouseStock(
        warehouse_id=warehouse_id, quantity=balance.quantity_available_now
    )


def item_stock(stock_balance: ProductItemStockBalance | None) -> ItemStock:
    balances = stock_balance.stock_balance if stock_balance else {}
    warehouse_ids = sanitize(sorted(balances))
    oos_warehouse_id = pick_warehouse_for_out_of_stock(warehouse_ids)
    out_of_stock = OutOfStockItemStock(
        lead_time=0,
        shipping_from_warehouse=Warehouse(
            id=oos_warehouse_id,
            is_dropshipment=is_dropshipment_warehouse(oos_warehouse_id),
        ),
    )

    available: list[AvailableStock] = []
    for warehouse_id in warehouse_ids:
        balance = balances[warehouse_id]
        if is_dropshipment_warehouse(warehouse_id):
            if balance.quantity_available_now > 0:
                available.append(
                    DropshipmentStock(
                        warehouse_id=warehouse_id,
                        quantity=balance.quantity_available_now,
                    )
                )
            continue
        stock = _warehouse_stock(warehouse_id, balance)
        if stock is not None:
            available.append(stock)

    if not available:
        return out_of_stock
    return AvailableItemStock(stocks=available)
