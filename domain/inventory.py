"""
Domain: Inventory valuation.

Rules implemented here:
- Stock is valued at a quantity-weighted average unit cost. Every restock
  blends the prior position with the incoming batch:

    new_cost = (qty * cost + batch_total_cost) / (qty + batch_qty)

  falling back to the batch unit cost when the resulting quantity is 0.
- A batch must carry a positive quantity; this is checked before any cost is
  computed.
- Selling consumes one unit per product (per kit occurrence for combos).
- Quantity never goes below zero.

This module contains only pure domain entities: no I/O, no database.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Optional

from .money import require_non_negative
from .sale import Sale


def weighted_average_cost(
    existing_quantity: int,
    existing_cost_price: Decimal,
    incoming_quantity: int,
    incoming_total_cost: Decimal,
) -> Decimal:
    """
    Blend an existing stock position with an incoming batch.

    Raises ValueError if incoming_quantity is not positive.
    """

    if incoming_quantity <= 0:
        raise ValueError("incoming_quantity must be > 0")

    batch_unit_cost = incoming_total_cost / incoming_quantity
    total_quantity = existing_quantity + incoming_quantity
    if total_quantity <= 0:
        return batch_unit_cost
    return (existing_quantity * existing_cost_price + incoming_total_cost) / total_quantity


@dataclass(frozen=True, slots=True)
class InventoryItem:
    """
    Stock position for one product.

    product_name is the business key used by sales and restocks.
    Transitions (restock/adjust) return new instances.
    """

    item_id: str
    product_name: str
    quantity: int
    cost_price: Decimal
    default_sell_price: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError("quantity must be >= 0")
        require_non_negative("cost_price", self.cost_price)

    @staticmethod
    def first_stocking(
        *,
        item_id: str,
        product_name: str,
        quantity: int,
        total_cost: Decimal,
        default_sell_price: Optional[Decimal] = None,
    ) -> "InventoryItem":
        """Create a product from its first batch; cost_price is the batch unit cost."""

        if quantity <= 0:
            raise ValueError("quantity must be > 0")
        return InventoryItem(
            item_id=item_id,
            product_name=product_name,
            quantity=quantity,
            cost_price=total_cost / quantity,
            default_sell_price=default_sell_price,
        )

    def restock(self, quantity: int, total_cost: Decimal) -> "InventoryItem":
        """Add a batch and recompute the weighted-average cost."""

        new_cost = weighted_average_cost(self.quantity, self.cost_price, quantity, total_cost)
        return replace(self, quantity=self.quantity + quantity, cost_price=new_cost)

    def adjust(self, delta: int) -> "InventoryItem":
        """Change quantity by delta (floored at 0); cost_price is untouched."""

        return replace(self, quantity=max(0, self.quantity + delta))


def stock_consumption(sale: Sale) -> Dict[str, int]:
    """
    Units of stock consumed by a sale, keyed by product name.

    A plain sale consumes one unit of its product. A kit consumes one unit per
    occurrence of each component in its item list.
    """

    if not sale.is_kit:
        return {sale.product_name: 1}
    return dict(Counter(item.product_name for item in sale.items))
