"""
Tests for `domain/sale.py` and `domain/money.py`.

Covers rules:
- Net profit = amount - discount - commission - cost - freight - ad cost,
  never clamped.
- Money fields are non-negative; a Sale is immutable.
- A kit is a sale with items; its label is synthesized from the components.
- Lenient amount coercion: invalid or missing input reads as 0.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from domain.money import coerce_amount
from domain.sale import Sale, SaleItem, SaleStatus, combo_label


def _sale(**overrides) -> Sale:
    fields = dict(
        sale_id="s1",
        client_name="Maria Silva",
        product_name="Serum",
        amount=Decimal("120"),
        sale_date=date(2025, 3, 10),
    )
    fields.update(overrides)
    return Sale(**fields)


def test_net_profit_decomposition() -> None:
    sale = _sale(
        discount=Decimal("5"),
        commission_value=Decimal("15"),
        cost=Decimal("40"),
        freight=Decimal("12.50"),
        ad_cost=Decimal("7.50"),
    )

    assert sale.net_profit == Decimal("40.00")


def test_net_profit_can_be_negative() -> None:
    sale = _sale(amount=Decimal("10"), cost=Decimal("30"))

    assert sale.net_profit == Decimal("-20")


@pytest.mark.parametrize("field_name", ["amount", "cost", "freight", "ad_cost", "discount"])
def test_negative_money_rejected(field_name: str) -> None:
    with pytest.raises(ValueError):
        _sale(**{field_name: Decimal("-1")})


def test_defaults() -> None:
    sale = _sale()

    assert sale.status is SaleStatus.PENDING
    assert sale.channel is None
    assert sale.items == ()
    assert sale.is_kit is False


def test_sale_is_immutable() -> None:
    sale = _sale()

    with pytest.raises(FrozenInstanceError):
        sale.amount = Decimal("1")  # type: ignore[misc]


def test_kit_items_and_label() -> None:
    items = (
        SaleItem("Serum", 1, Decimal("12.50")),
        SaleItem("Toner", 1, Decimal("7.25")),
    )
    sale = _sale(product_name=combo_label(items), items=items)

    assert sale.is_kit is True
    assert sale.product_name == "Combo: Serum + Toner"


def test_sale_item_validation() -> None:
    assert SaleItem("Serum", 3, Decimal("2.50")).total_cost == Decimal("7.50")

    with pytest.raises(ValueError):
        SaleItem("Serum", 0, Decimal("1"))
    with pytest.raises(ValueError):
        SaleItem("Serum", 1, Decimal("-1"))


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("120.50", Decimal("120.50")),
        (" 7 ", Decimal("7")),
        (15, Decimal("15")),
        (0.1, Decimal("0.1")),
        (Decimal("3.3"), Decimal("3.3")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        (None, Decimal("0")),
        (float("nan"), Decimal("0")),
    ],
)
def test_coerce_amount(raw, expected: Decimal) -> None:
    assert coerce_amount(raw) == expected
