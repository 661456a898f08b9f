"""
Sales service: write-side orchestration.

Handles:
- Recording a sale: resolve economics against the current inventory, insert
  the sale, decrement stock for every consumed product, and remove the lead
  the sale was converted from.
- Adding and restocking products.
- Converting a lead into a pre-filled sale draft.
- Loading the dashboard snapshot (sales, inventory, leads).

The three tables are written sequentially with no transaction. If a step
after the sale insert fails, PartialWriteError reports what was already
written so the caller can reload and retry; nothing is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Tuple
from uuid import uuid4

from domain.inventory import InventoryItem, stock_consumption
from domain.lead import Lead
from domain.money import coerce_amount
from domain.sale import Sale
from repositories import inventory_repository, lead_repository, sale_repository
from services.economics_service import SaleDraft, build_sale

logger = logging.getLogger(__name__)


class PartialWriteError(RuntimeError):
    """Raised when a multi-step write fails after some steps were persisted."""

    def __init__(self, step: str, sale_id: str, completed_steps: Tuple[str, ...]) -> None:
        self.step = step
        self.sale_id = sale_id
        self.completed_steps = completed_steps
        super().__init__(
            f"Sale {sale_id} partially recorded: step '{step}' failed "
            f"after {', '.join(completed_steps) or 'no steps'}"
        )


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    sales: List[Sale]
    inventory: List[InventoryItem]
    leads: List[Lead]


def load_dashboard_snapshot() -> DashboardSnapshot:
    """Load the three collections the dashboard computes from."""

    return DashboardSnapshot(
        sales=sale_repository.list_sales(),
        inventory=inventory_repository.list_inventory(),
        leads=lead_repository.list_leads(),
    )


def record_sale(draft: SaleDraft, converting_lead_id: Optional[str] = None) -> Sale:
    """
    Record a new sale.

    Process:
    1. Resolve cost/commission/profit against the current inventory snapshot
    2. Insert the sale
    3. Decrement stock (one unit per product, per kit occurrence)
    4. Delete the converted lead, if any

    Raises:
        ValueError / LookupError: the draft cannot be resolved (nothing written)
        RuntimeError: the sale insert failed (nothing written)
        PartialWriteError: the sale was stored but a later step failed
    """

    inventory = inventory_repository.list_inventory()
    sale = build_sale(draft, inventory)

    sale_repository.create_sale(sale)
    completed: List[str] = ["create_sale"]
    logger.info(
        "Recorded sale %s: %s / %s amount=%s net_profit=%s",
        sale.sale_id,
        sale.client_name,
        sale.product_name,
        sale.amount,
        sale.net_profit,
    )

    for product_name, units in stock_consumption(sale).items():
        step = f"adjust_stock:{product_name}"
        try:
            inventory_repository.adjust_stock(product_name, -units)
        except Exception as exc:
            logger.exception("Stock decrement failed for sale %s", sale.sale_id)
            raise PartialWriteError(step, sale.sale_id, tuple(completed)) from exc
        completed.append(step)

    if converting_lead_id is not None:
        try:
            lead_repository.delete_lead(converting_lead_id)
        except Exception as exc:
            logger.exception("Lead %s not removed after sale %s", converting_lead_id, sale.sale_id)
            raise PartialWriteError("delete_lead", sale.sale_id, tuple(completed)) from exc

    return sale


def _whole_quantity(value: Any) -> int:
    """Coerce a stock quantity; fractional units are rejected, not truncated."""

    amount = coerce_amount(value)
    if amount != amount.to_integral_value():
        raise ValueError(f"quantity must be a whole number of units, got {value!r}")
    return int(amount)


def add_product(
    product_name: str,
    quantity: Any,
    total_cost: Any,
    default_sell_price: Any = None,
) -> List[InventoryItem]:
    """
    Stock a new product; its cost price is the batch unit cost.

    product_name is the inventory business key. Raises ValueError for a name
    that is already stocked (restock it instead) and for a non-positive or
    fractional quantity.
    """

    qty = _whole_quantity(quantity)
    if inventory_repository.get_product_by_name(product_name) is not None:
        raise ValueError(f"Product already exists: {product_name}")

    sell_price: Optional[Decimal] = (
        coerce_amount(default_sell_price) if default_sell_price not in (None, "") else None
    )
    item = InventoryItem.first_stocking(
        item_id=str(uuid4()),
        product_name=product_name,
        quantity=qty,
        total_cost=coerce_amount(total_cost),
        default_sell_price=sell_price,
    )
    logger.info("Added product %s: %d units at %s", product_name, item.quantity, item.cost_price)
    return inventory_repository.upsert_product(item)


def restock_product(product_name: str, quantity: Any, total_cost: Any) -> List[InventoryItem]:
    """
    Restock an existing product (weighted-average cost).

    Raises ValueError for a non-positive or fractional quantity, LookupError
    for an unknown product.
    """

    qty = _whole_quantity(quantity)
    if qty <= 0:
        raise ValueError("quantity must be > 0")
    return inventory_repository.restock(product_name, qty, coerce_amount(total_cost))


def convert_lead(lead: Lead, sale_date: date) -> SaleDraft:
    """
    Pre-fill a sale draft from a lead.

    The lead is deleted only when the resulting sale is recorded with
    `record_sale(draft, converting_lead_id=lead.lead_id)`.
    """

    return SaleDraft(
        client_name=lead.client_name,
        product_name=lead.product_interest or "",
        sale_date=sale_date,
    )


__all__ = [
    "PartialWriteError",
    "DashboardSnapshot",
    "load_dashboard_snapshot",
    "record_sale",
    "add_product",
    "restock_product",
    "convert_lead",
]
