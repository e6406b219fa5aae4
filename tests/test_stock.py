"""Tests for the stock view derived from warehouse balances."""

from actualization.models.inventory import WarehouseStockBalance
from actualization.models.stock import (
    AvailableItemStock,
    BufferedWarehouseStock,
    DropshipmentStock,
    ExternalWarehouseStock,
    OutOfStockItemStock,
)
from actualization.services.catalog.stock import (
    DEFAULT_OOS_WAREHOUSE,
    item_stock,
    pick_warehouse_for_out_of_stock,
)
from tests.factories import NOW, stock_balance


def test_no_balance_is_out_of_stock():
    stock = item_stock(None)

    assert isinstance(stock, OutOfStockItemStock)
    assert stock.shipping_from_warehouse.id == DEFAULT_OOS_WAREHOUSE
    assert stock.in_stock_quantity() == 0.0


def test_main_warehouse_counts_incoming_quantity():
    balance = stock_balance()
    balance.stock_balance[1] = WarehouseStockBalance(
        quantity_available_now=0, quantity_to_be_available=4, timestamp=NOW
    )

    stock = item_stock(balance)

    assert isinstance(stock, AvailableItemStock)
    assert stock.stocks == [
        BufferedWarehouseStock(quantity_available_now=0, quantity_to_be_available=4)
    ]
    assert stock.in_stock_quantity() == 4


def test_warehouses_are_listed_in_id_order():
    stock = item_stock(stock_balance(w100005=2, w7=3, w1=1))

    assert [type(s) for s in stock.stocks] == [
        BufferedWarehouseStock,
        ExternalWarehouseStock,
        DropshipmentStock,
    ]
    assert stock.is_in_stock()


def test_ignored_warehouse():
    stock = item_stock(stock_balance(w230=10))

    assert isinstance(stock, OutOfStockItemStock)


def test_empty_dropshipment_is_shipping_warehouse():
    stock = item_stock(stock_balance(w5=0, w100001=0))

    assert isinstance(stock, OutOfStockItemStock)
    assert stock.shipping_from_warehouse.id == 100001
    assert stock.shipping_from_warehouse.is_dropshipment is True


def test_pick_warehouse_for_out_of_stock():
    assert pick_warehouse_for_out_of_stock([3, 5]) == 3
    assert pick_warehouse_for_out_of_stock([0, 3]) == 0
    assert pick_warehouse_for_out_of_stock([]) == DEFAULT_OOS_WAREHOUSE
