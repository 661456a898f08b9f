"""
Tests for `domain/inventory.py`.

Covers rules:
- Cost price is the quantity-weighted average of every batch.
- First stocking uses the batch unit cost.
- Non-positive batch quantities are rejected before any cost is computed.
- Adjustments floor quantity at zero and leave cost untouched.
- Transitions return new instances; the original item is unchanged.
- Stock consumption: one unit per plain sale, one per kit occurrence.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from domain.inventory import InventoryItem, stock_consumption, weighted_average_cost
from domain.sale import Sale, SaleItem


def _item(quantity: int = 0, cost_price: str = "0") -> InventoryItem:
    return InventoryItem(
        item_id="inv-1",
        product_name="Vitamin C Serum",
        quantity=quantity,
        cost_price=Decimal(cost_price),
    )


def test_restock_sequence_yields_weighted_average() -> None:
    """0 units; +10 for 100 -> 10.00; +10 for 200 -> 15.00."""

    item = _item()

    item = item.restock(10, Decimal("100"))
    assert item.quantity == 10
    assert item.cost_price == Decimal("10.00")

    item = item.restock(10, Decimal("200"))
    assert item.quantity == 20
    assert item.cost_price == Decimal("15.00")


def test_restock_after_partial_sales_uses_remaining_quantity() -> None:
    """Later batches blend with the then-current average and remaining quantity."""

    item = _item(quantity=4, cost_price="10")
    restocked = item.restock(6, Decimal("90"))

    # (4 * 10 + 90) / 10
    assert restocked.cost_price == Decimal("13")
    assert restocked.quantity == 10


def test_weighted_average_falls_back_to_batch_unit_cost_when_total_is_zero() -> None:
    """A stock position of -qty cannot exist, but the guard keeps the result finite."""

    assert weighted_average_cost(-5, Decimal("7"), 5, Decimal("50")) == Decimal("10")


@pytest.mark.parametrize("quantity", [0, -1])
def test_restock_rejects_non_positive_quantity(quantity: int) -> None:
    with pytest.raises(ValueError):
        _item(quantity=3, cost_price="10").restock(quantity, Decimal("50"))


def test_first_stocking_uses_batch_unit_cost() -> None:
    item = InventoryItem.first_stocking(
        item_id="inv-9",
        product_name="Toner",
        quantity=4,
        total_cost=Decimal("50"),
        default_sell_price=Decimal("29.90"),
    )

    assert item.cost_price == Decimal("12.5")
    assert item.quantity == 4
    assert item.default_sell_price == Decimal("29.90")


def test_first_stocking_rejects_zero_quantity() -> None:
    with pytest.raises(ValueError):
        InventoryItem.first_stocking(item_id="x", product_name="Toner", quantity=0, total_cost=Decimal("10"))


def test_adjust_floors_at_zero_and_keeps_cost() -> None:
    item = _item(quantity=1, cost_price="8")

    sold = item.adjust(-1)
    oversold = sold.adjust(-1)

    assert sold.quantity == 0
    assert oversold.quantity == 0
    assert oversold.cost_price == Decimal("8")


def test_transitions_do_not_mutate_original() -> None:
    item = _item(quantity=2, cost_price="5")
    item.restock(2, Decimal("30"))
    item.adjust(-1)

    assert item.quantity == 2
    assert item.cost_price == Decimal("5")

    with pytest.raises(FrozenInstanceError):
        item.quantity = 10  # type: ignore[misc]


def test_negative_quantity_rejected() -> None:
    with pytest.raises(ValueError):
        _item(quantity=-1)


def test_stock_consumption_plain_sale() -> None:
    sale = Sale(
        sale_id="s1",
        client_name="Ana",
        product_name="Toner",
        amount=Decimal("30"),
        sale_date=date(2025, 3, 1),
    )

    assert stock_consumption(sale) == {"Toner": 1}


def test_stock_consumption_kit_counts_each_occurrence() -> None:
    items = (
        SaleItem("Toner", 1, Decimal("5")),
        SaleItem("Serum", 1, Decimal("12")),
        SaleItem("Toner", 1, Decimal("5")),
    )
    sale = Sale(
        sale_id="s2",
        client_name="Ana",
        product_name="Combo: Toner + Serum + Toner",
        amount=Decimal("80"),
        sale_date=date(2025, 3, 1),
        items=items,
    )

    assert stock_consumption(sale) == {"Toner": 2, "Serum": 1}
