"""
Sale repository (persistence).

This module provides *only* persistence operations for the Sale domain entity.
It does not resolve economics or touch stock; it only inserts, fetches and
deletes sale rows.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from domain.channel import parse_channel
from domain.money import coerce_amount
from domain.sale import Sale, SaleItem, SaleStatus
from domain.time import to_calendar_date
from repositories.client import get_client

# Supabase table name for sales.
# Keep this aligned with your database schema.
_SALES_TABLE: str = "sales"


def _items_to_json(sale: Sale) -> list[dict[str, Any]] | None:
    if not sale.is_kit:
        return None
    return [
        {
            "product_name": item.product_name,
            "quantity": item.quantity,
            "unit_cost": str(item.unit_cost),
        }
        for item in sale.items
    ]


def _sale_to_row(sale: Sale) -> dict[str, Any]:
    """Convert a domain Sale to a Supabase row payload."""

    return {
        "sale_id": sale.sale_id,
        "client_name": sale.client_name,
        "product_name": sale.product_name,
        "items": _items_to_json(sale),
        "amount": str(sale.amount),
        "cost": str(sale.cost),
        "freight": str(sale.freight),
        "commission_rate": str(sale.commission_rate),
        "commission_value": str(sale.commission_value),
        "ad_cost": str(sale.ad_cost),
        "discount": str(sale.discount),
        "sale_date": sale.sale_date.isoformat(),
        "status": sale.status.value,
        "sale_type": sale.channel.value if sale.channel is not None else None,
    }


def _row_to_sale(row: Mapping[str, Any]) -> Sale:
    """
    Convert a Supabase row into a Sale.

    Missing optional money columns are read as 0.
    """

    items = tuple(
        SaleItem(
            product_name=str(item["product_name"]),
            quantity=int(item.get("quantity", 1)),
            unit_cost=coerce_amount(item.get("unit_cost")),
        )
        for item in (row.get("items") or [])
    )

    return Sale(
        sale_id=str(row["sale_id"]),
        client_name=str(row["client_name"]),
        product_name=str(row["product_name"]),
        amount=coerce_amount(row.get("amount")),
        sale_date=to_calendar_date(row["sale_date"]),
        cost=coerce_amount(row.get("cost")),
        freight=coerce_amount(row.get("freight")),
        commission_rate=coerce_amount(row.get("commission_rate")),
        commission_value=coerce_amount(row.get("commission_value")),
        ad_cost=coerce_amount(row.get("ad_cost")),
        discount=coerce_amount(row.get("discount")),
        status=SaleStatus(row.get("status") or SaleStatus.PENDING.value),
        channel=parse_channel(row.get("sale_type")),
        items=items,
    )


def create_sale(sale: Sale) -> Sale:
    """
    Insert a resolved sale.

    Returns:
        The Sale that was stored
    """

    response = get_client().table(_SALES_TABLE).insert(_sale_to_row(sale)).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to record sale: {error}")
    return sale


def list_sales() -> List[Sale]:
    """
    Retrieve every sale, newest first.

    Returns:
        List[Sale] (possibly empty)
    """

    response = (
        get_client()
        .table(_SALES_TABLE)
        .select("*")
        .order("sale_date", desc=True)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list sales: {error}")

    rows = getattr(response, "data", None) or []
    return [_row_to_sale(row) for row in rows]


def get_sale_by_id(sale_id: str) -> Optional[Sale]:
    """
    Retrieve a single sale by its ID.

    Returns:
        Sale or None if not found
    """

    response = (
        get_client()
        .table(_SALES_TABLE)
        .select("*")
        .eq("sale_id", sale_id)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to get sale: {error}")

    rows = getattr(response, "data", None) or []

    if not rows:
        return None

    return _row_to_sale(rows[0])


def delete_sale(sale_id: str) -> None:
    """
    Delete a sale.

    Stock consumed by the sale is not restored.
    """

    response = get_client().table(_SALES_TABLE).delete().eq("sale_id", sale_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to delete sale: {error}")


__all__ = [
    "create_sale",
    "list_sales",
    "get_sale_by_id",
    "delete_sale",
]
