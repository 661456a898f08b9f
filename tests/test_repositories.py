"""
Tests for the Supabase repositories against the in-memory fake client.

Covers rules:
- Sales, inventory items and leads survive a write/read through their row
  mappings (Decimals stored as strings, kit items as JSON, UTC timestamps).
- Rows with missing optional money columns read as 0.
- Restocking an unknown product raises LookupError; adjusting one is a no-op.
- Stock adjustments floor at zero.
- A backend error surfaces as RuntimeError.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from domain.channel import SaleChannel
from domain.inventory import InventoryItem
from domain.lead import Lead
from domain.sale import Sale, SaleItem, SaleStatus
from repositories import inventory_repository, lead_repository, sale_repository


def _kit_sale() -> Sale:
    return Sale(
        sale_id="s1",
        client_name="Maria",
        product_name="Combo: Serum + Toner",
        amount=Decimal("89.90"),
        sale_date=date(2025, 3, 10),
        cost=Decimal("19.75"),
        commission_value=Decimal("15"),
        status=SaleStatus.PAID,
        channel=SaleChannel.REFERRAL,
        items=(
            SaleItem("Serum", 1, Decimal("12.50")),
            SaleItem("Toner", 1, Decimal("7.25")),
        ),
    )


def test_sale_round_trip(fake_db) -> None:
    sale = _kit_sale()

    sale_repository.create_sale(sale)

    assert fake_db.tables["sales"][0]["sale_type"] == "Referral"
    assert fake_db.tables["sales"][0]["amount"] == "89.90"
    assert sale_repository.get_sale_by_id("s1") == sale
    assert sale_repository.list_sales() == [sale]


def test_sale_row_with_missing_columns(fake_db) -> None:
    fake_db.tables["sales"] = [
        {
            "sale_id": "legacy",
            "client_name": "Joana",
            "product_name": "Toner",
            "amount": 40,
            "sale_date": "2025-01-05T10:00:00Z",
            "sale_type": "",
        }
    ]

    sale = sale_repository.get_sale_by_id("legacy")

    assert sale.sale_date == date(2025, 1, 5)
    assert sale.cost == 0
    assert sale.commission_value == 0
    assert sale.channel is None
    assert sale.status is SaleStatus.PENDING
    assert sale.net_profit == Decimal("40")


def test_sales_listed_newest_first(fake_db) -> None:
    for sale_id, day in [("a", date(2025, 1, 1)), ("b", date(2025, 3, 1)), ("c", date(2025, 2, 1))]:
        sale_repository.create_sale(
            Sale(sale_id=sale_id, client_name="X", product_name="P", amount=Decimal("1"), sale_date=day)
        )

    assert [s.sale_id for s in sale_repository.list_sales()] == ["b", "c", "a"]


def test_get_and_delete_missing_sale(fake_db) -> None:
    assert sale_repository.get_sale_by_id("nope") is None
    sale_repository.delete_sale("nope")


def test_backend_error_raises_runtime_error(fake_db) -> None:
    fake_db.failures.add(("sales", "insert"))

    with pytest.raises(RuntimeError, match="Failed to record sale"):
        sale_repository.create_sale(_kit_sale())


def test_inventory_upsert_and_list_sorted(fake_db) -> None:
    inventory_repository.upsert_product(InventoryItem("i2", "Toner", 4, Decimal("7.25")))
    items = inventory_repository.upsert_product(
        InventoryItem("i1", "Serum", 10, Decimal("12.50"), default_sell_price=Decimal("59.90"))
    )

    assert [i.product_name for i in items] == ["Serum", "Toner"]
    assert items[0].default_sell_price == Decimal("59.90")
    assert items[1].default_sell_price is None


def test_restock_recomputes_weighted_cost(fake_db) -> None:
    inventory_repository.upsert_product(InventoryItem("i1", "Serum", 10, Decimal("10")))

    items = inventory_repository.restock("Serum", 10, Decimal("200"))

    assert items[0].quantity == 20
    assert items[0].cost_price == Decimal("15")


def test_restock_unknown_product(fake_db) -> None:
    with pytest.raises(LookupError):
        inventory_repository.restock("Ghost", 1, Decimal("1"))


def test_adjust_stock(fake_db) -> None:
    inventory_repository.upsert_product(InventoryItem("i1", "Serum", 2, Decimal("10")))

    assert inventory_repository.adjust_stock("Serum", -1).quantity == 1
    assert inventory_repository.adjust_stock("Serum", -5).quantity == 0
    assert inventory_repository.get_product_by_name("Serum").quantity == 0


def test_adjust_stock_unknown_product_is_noop(fake_db) -> None:
    assert inventory_repository.adjust_stock("Ghost", -1) is None
    assert fake_db.tables.get("inventory", []) == []


def test_delete_product(fake_db) -> None:
    inventory_repository.upsert_product(InventoryItem("i1", "Serum", 2, Decimal("10")))

    assert inventory_repository.delete_product("i1") == []


def test_lead_round_trip(fake_db) -> None:
    lead = Lead(
        lead_id="l1",
        client_name="Maria",
        created_at=datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc),
        phone="+55 11 99999-0000",
        product_interest="Serum",
        expected_date=date(2025, 3, 20),
    )

    lead_repository.create_lead(lead)

    row = fake_db.tables["leads"][0]
    assert row["notes"] == ""
    assert row["created_at_utc"] == "2025-03-10T14:00:00+00:00"
    assert lead_repository.get_lead_by_id("l1") == lead
    assert lead_repository.list_leads() == [lead]

    lead_repository.delete_lead("l1")
    assert lead_repository.get_lead_by_id("l1") is None


def test_lead_naive_backend_timestamp_read_as_utc(fake_db) -> None:
    fake_db.tables["leads"] = [
        {"lead_id": "l1", "client_name": "Maria", "created_at_utc": "2025-03-10T14:00:00"}
    ]

    lead = lead_repository.get_lead_by_id("l1")

    assert lead.created_at == datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc)


def test_sale_row_with_unreadable_amount_reads_as_zero(fake_db) -> None:
    fake_db.tables["sales"] = [
        {
            "sale_id": "bad",
            "client_name": "Joana",
            "product_name": "Toner",
            "amount": "NaN",
            "sale_date": "2025-01-05",
        },
        {
            "sale_id": "blank",
            "client_name": "Joana",
            "product_name": "Toner",
            "amount": "",
            "sale_date": "2025-01-06",
        },
    ]

    assert sale_repository.get_sale_by_id("bad").amount == 0
    assert sale_repository.get_sale_by_id("blank").amount == 0
