"""
Inventory repository (persistence).

This module provides persistence operations for the InventoryItem domain
entity. Valuation rules (weighted-average cost, quantity floor) live in
`domain/inventory.py`; this module loads the current row, applies the domain
transition and writes the result back.

There is no row locking: two concurrent restocks of the same product can lose
an update.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from domain.inventory import InventoryItem
from domain.money import coerce_amount
from repositories.client import get_client

logger = logging.getLogger(__name__)

# Supabase table name for inventory items.
# Keep this aligned with your database schema.
_INVENTORY_TABLE: str = "inventory"


def _item_to_row(item: InventoryItem) -> dict[str, Any]:
    """Convert a domain InventoryItem to a Supabase row payload."""

    return {
        "item_id": item.item_id,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "cost_price": str(item.cost_price),
        "default_sell_price": (
            str(item.default_sell_price) if item.default_sell_price is not None else None
        ),
    }


def _row_to_item(row: Mapping[str, Any]) -> InventoryItem:
    """Convert a Supabase row into an InventoryItem."""

    sell_price = row.get("default_sell_price")
    return InventoryItem(
        item_id=str(row["item_id"]),
        product_name=str(row["product_name"]),
        quantity=int(row.get("quantity") or 0),
        cost_price=coerce_amount(row.get("cost_price")),
        default_sell_price=coerce_amount(sell_price) if sell_price not in (None, "") else None,
    )


def list_inventory() -> List[InventoryItem]:
    """
    Fetch all inventory items ordered by product name.

    Returns:
    - List[InventoryItem] (possibly empty)
    """

    response = (
        get_client()
        .table(_INVENTORY_TABLE)
        .select("*")
        .order("product_name")
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch inventory: {error}")

    rows = getattr(response, "data", None) or []
    return [_row_to_item(row) for row in rows]


def get_product_by_name(product_name: str) -> Optional[InventoryItem]:
    """Fetch a single item by its product name (business key)."""

    response = (
        get_client()
        .table(_INVENTORY_TABLE)
        .select("*")
        .eq("product_name", product_name)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch inventory item: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_item(rows[0])


def upsert_product(item: InventoryItem) -> List[InventoryItem]:
    """
    Insert or replace an inventory item (keyed by item_id).

    Returns:
    - The refreshed inventory list
    """

    response = (
        get_client()
        .table(_INVENTORY_TABLE)
        .upsert(_item_to_row(item), on_conflict="item_id")
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        code = getattr(error, "code", None)
        if str(code) == "23505":
            raise ValueError(f"Product already exists: {item.product_name}") from None
        raise RuntimeError(f"Failed to save inventory item: {error}")

    return list_inventory()


def _update_item(item: InventoryItem) -> None:
    response = (
        get_client()
        .table(_INVENTORY_TABLE)
        .update({"quantity": item.quantity, "cost_price": str(item.cost_price)})
        .eq("item_id", item.item_id)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to update inventory item: {error}")


def restock(product_name: str, quantity: int, total_cost: Decimal) -> List[InventoryItem]:
    """
    Add a batch to an existing product and recompute its weighted-average cost.

    Raises:
    - LookupError if no item exists for product_name
    - ValueError if quantity is not positive

    Returns:
    - The refreshed inventory list
    """

    current = get_product_by_name(product_name)
    if current is None:
        raise LookupError(f"Product not found in inventory: {product_name}")

    updated = current.restock(quantity, total_cost)
    _update_item(updated)

    logger.info(
        "Restocked %s: +%d units, quantity %d -> %d, cost_price %s -> %s",
        product_name,
        quantity,
        current.quantity,
        updated.quantity,
        current.cost_price,
        updated.cost_price,
    )
    return list_inventory()


def adjust_stock(product_name: str, delta: int) -> Optional[InventoryItem]:
    """
    Change a product's quantity by delta (negative for a sale).

    Quantity is floored at zero. Returns None, without writing, when the
    product is not stocked (e.g. a sale of an untracked product).
    """

    current = get_product_by_name(product_name)
    if current is None:
        logger.warning(
            "Stock adjustment skipped for unknown product",
            extra={"product_name": product_name, "delta": delta},
        )
        return None

    updated = current.adjust(delta)
    if current.quantity + delta < 0:
        logger.warning(
            "Stock for %s floored at zero (had %d, delta %d)",
            product_name,
            current.quantity,
            delta,
        )
    _update_item(updated)
    return updated


def delete_product(item_id: str) -> List[InventoryItem]:
    """
    Delete an inventory item.

    Returns:
    - The refreshed inventory list
    """

    response = get_client().table(_INVENTORY_TABLE).delete().eq("item_id", item_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to delete inventory item: {error}")

    return list_inventory()


__all__ = [
    "list_inventory",
    "get_product_by_name",
    "upsert_product",
    "restock",
    "adjust_stock",
    "delete_product",
]
