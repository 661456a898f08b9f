"""
Tests for `services/csv_export_service.py`.

Covers rules:
- Leading formula characters are stripped from text fields and logged.
- Header row is always written; rows follow input order.
- Money columns keep their sign (a loss is written as a negative number).
"""

from __future__ import annotations

import csv
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from domain.channel import SaleChannel
from domain.sale import Sale
from services.csv_export_service import (
    CSV_COLUMNS,
    generate_sales_csv,
    sale_to_csv_row,
    sanitize_csv_field,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("=HYPERLINK(\"x\")", "HYPERLINK(\"x\")"),
        ("+-@cmd", "cmd"),
        ("Maria Silva", "Maria Silva"),
        ("", ""),
        (None, ""),
    ],
)
def test_sanitize_csv_field(raw, expected: str) -> None:
    assert sanitize_csv_field(raw) == expected


def test_sanitize_logs_stripped_characters(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="services.csv_export_service"):
        sanitize_csv_field("=SUM(A1)", "client_name")

    assert len(caplog.records) == 1
    assert caplog.records[0].field_name == "client_name"
    assert caplog.records[0].stripped_characters == "="


def test_clean_value_is_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="services.csv_export_service"):
        sanitize_csv_field("Serum", "product_name")

    assert caplog.records == []


def test_empty_export_has_header_only() -> None:
    rows = list(csv.reader(StringIO(generate_sales_csv([]))))

    assert rows == [CSV_COLUMNS]


def test_export_rows() -> None:
    sales = [
        Sale(
            sale_id="s1",
            client_name="=Maria",
            product_name="Serum",
            amount=Decimal("10"),
            sale_date=date(2025, 3, 10),
            cost=Decimal("30"),
            channel=SaleChannel.REFERRAL,
            commission_value=Decimal("15"),
        ),
        Sale(
            sale_id="s2",
            client_name="Joana",
            product_name="Toner",
            amount=Decimal("40"),
            sale_date=date(2025, 3, 11),
        ),
    ]

    rows = list(csv.reader(StringIO(generate_sales_csv(sales))))

    assert len(rows) == 3
    first = dict(zip(CSV_COLUMNS, rows[1]))
    assert first["Client"] == "Maria"
    assert first["Channel"] == "Referral"
    assert first["Net Profit"] == "-35"
    assert dict(zip(CSV_COLUMNS, rows[2]))["Channel"] == ""


def test_row_matches_column_count() -> None:
    sale = Sale(
        sale_id="s1",
        client_name="Maria",
        product_name="Serum",
        amount=Decimal("1"),
        sale_date=date(2025, 1, 1),
    )

    assert len(sale_to_csv_row(sale)) == len(CSV_COLUMNS)
