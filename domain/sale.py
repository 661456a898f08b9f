"""
Domain: Sale transactions.

Rules captured here:
- A Sale is created with its economics already resolved (cost, commission,
  ad spend) and is immutable afterwards.
- amount, cost, freight, ad_cost and discount are non-negative.
- commission_value is derived at creation time, never edited independently.
- Net profit = amount - discount - commission_value - cost - freight - ad_cost.
  It is never clamped; a loss is reported as a negative value.

Status (Paid/Pending/Cancelled) is stored but not interpreted by any
computation in this project.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .channel import SaleChannel
from .money import ZERO, require_non_negative

COMBO_PREFIX = "Combo: "


class SaleStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


@dataclass(frozen=True, slots=True)
class SaleItem:
    """One component of a kit sale, with the unit cost captured at sale time."""

    product_name: str
    quantity: int
    unit_cost: Decimal

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("quantity must be > 0")
        require_non_negative("unit_cost", self.unit_cost)

    @property
    def total_cost(self) -> Decimal:
        return self.unit_cost * self.quantity


def combo_label(items: Tuple[SaleItem, ...]) -> str:
    """Synthesize the product label of a kit sale, e.g. 'Combo: Serum + Toner'."""

    return COMBO_PREFIX + " + ".join(item.product_name for item in items)


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable record of a single sale.

    `cost` is the resolved product cost at the moment of sale (unit cost for a
    single product, sum of component costs for a kit).
    """

    sale_id: str
    client_name: str
    product_name: str
    amount: Decimal
    sale_date: date
    cost: Decimal = ZERO
    freight: Decimal = ZERO
    commission_rate: Decimal = ZERO
    commission_value: Decimal = ZERO
    ad_cost: Decimal = ZERO
    discount: Decimal = ZERO
    status: SaleStatus = SaleStatus.PENDING
    channel: Optional[SaleChannel] = None
    items: Tuple[SaleItem, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        require_non_negative("amount", self.amount)
        require_non_negative("cost", self.cost)
        require_non_negative("freight", self.freight)
        require_non_negative("ad_cost", self.ad_cost)
        require_non_negative("discount", self.discount)

    @property
    def is_kit(self) -> bool:
        return len(self.items) > 0

    @property
    def net_profit(self) -> Decimal:
        return (
            self.amount
            - self.discount
            - self.commission_value
            - self.cost
            - self.freight
            - self.ad_cost
        )
