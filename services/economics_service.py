"""
Sale economics service.

Resolves the money side of a sale at the moment it is recorded:
- product cost from the current inventory snapshot (weighted-average cost),
- commission according to the channel rule,
- ad spend (kept only for channels that allow it),
- net profit.

Everything here is a pure function of its inputs. Raw numeric input is
expected to pass through `domain.money.coerce_amount` first; SaleDraft does
that on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple
from uuid import uuid4

from domain.channel import CommissionMode, SaleChannel, rule_for
from domain.inventory import InventoryItem
from domain.money import HUNDRED, ZERO, coerce_amount
from domain.sale import Sale, SaleItem, SaleStatus, combo_label


@dataclass(frozen=True, slots=True)
class EconomicsInput:
    amount: Decimal
    resolved_unit_cost: Decimal
    channel: Optional[SaleChannel] = None
    discount: Decimal = ZERO
    freight: Decimal = ZERO
    ad_cost: Decimal = ZERO
    commission_rate: Decimal = ZERO
    fixed_commission_amount: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class SaleEconomics:
    """
    Resolved economics of a sale.

    commission_rate is the rate actually applied (0 for channels that do not
    use a percentage); ad_cost is 0 unless the channel allows ad spend.
    """

    commission_value: Decimal
    commission_rate: Decimal
    ad_cost: Decimal
    net_profit: Decimal


def calculate_sale_economics(data: EconomicsInput) -> SaleEconomics:
    """
    Compute commission and net profit for a sale.

    net_profit = amount - discount - commission - cost - freight - ad_cost

    The result is not clamped: a sale below cost yields a negative profit.
    """

    rule = rule_for(data.channel)

    if rule.commission_mode is CommissionMode.FIXED:
        commission_value = data.fixed_commission_amount
        commission_rate = ZERO
    elif rule.commission_mode is CommissionMode.NONE:
        commission_value = ZERO
        commission_rate = ZERO
    else:
        commission_value = data.amount * (data.commission_rate / HUNDRED)
        commission_rate = data.commission_rate

    ad_cost = data.ad_cost if rule.allows_ad_cost else ZERO

    net_profit = (
        data.amount
        - data.discount
        - commission_value
        - data.resolved_unit_cost
        - data.freight
        - ad_cost
    )

    return SaleEconomics(
        commission_value=commission_value,
        commission_rate=commission_rate,
        ad_cost=ad_cost,
        net_profit=net_profit,
    )


def resolve_kit_cost(items: Iterable[SaleItem]) -> Decimal:
    """Total product cost of a kit: sum of unit_cost * quantity."""

    return sum((item.total_cost for item in items), ZERO)


def _index_by_name(inventory: Iterable[InventoryItem]) -> Mapping[str, InventoryItem]:
    return {item.product_name: item for item in inventory}


def resolve_unit_cost(product_name: str, inventory: Iterable[InventoryItem]) -> Decimal:
    """
    Current cost_price of a product in the inventory snapshot.

    Products that are not stocked cost 0.
    """

    item = _index_by_name(inventory).get(product_name)
    return item.cost_price if item is not None else ZERO


def snapshot_kit_items(
    product_names: Sequence[str],
    inventory: Iterable[InventoryItem],
) -> Tuple[SaleItem, ...]:
    """
    Build kit components, one unit per listed name, priced at the snapshot cost.

    A product may be listed more than once; each occurrence is its own item.
    Raises LookupError for a name that is not in the inventory.
    """

    by_name = _index_by_name(inventory)
    items = []
    for name in product_names:
        product = by_name.get(name)
        if product is None:
            raise LookupError(f"Product not found in inventory: {name}")
        items.append(SaleItem(product_name=name, quantity=1, unit_cost=product.cost_price))
    return tuple(items)


@dataclass(frozen=True, slots=True)
class SaleDraft:
    """
    Raw sale input as entered at the point of sale.

    Numeric fields accept anything; they are coerced to Decimal (invalid -> 0).
    For a kit, `kit_products` lists the component names (repeats allowed) and
    `product_name` is ignored in favour of the synthesized combo label.
    """

    client_name: str
    sale_date: date
    product_name: str = ""
    amount: Any = ZERO
    channel: Optional[SaleChannel] = None
    commission_rate: Any = ZERO
    fixed_commission: Any = ZERO
    ad_cost: Any = ZERO
    freight: Any = ZERO
    discount: Any = ZERO
    is_kit: bool = False
    kit_products: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in ("amount", "commission_rate", "fixed_commission", "ad_cost", "freight", "discount"):
            object.__setattr__(self, name, coerce_amount(getattr(self, name)))
        object.__setattr__(self, "kit_products", tuple(self.kit_products))


def with_suggested_price(draft: SaleDraft, inventory: Iterable[InventoryItem]) -> SaleDraft:
    """
    Fill the draft amount from the product's default sell price.

    The draft is returned unchanged for kits, unknown products and products
    without a default price.
    """

    if draft.is_kit:
        return draft
    item = _index_by_name(inventory).get(draft.product_name)
    if item is None or item.default_sell_price is None:
        return draft
    return replace(draft, amount=item.default_sell_price)


def build_sale(
    draft: SaleDraft,
    inventory: Iterable[InventoryItem],
    sale_id: Optional[str] = None,
) -> Sale:
    """
    Resolve a draft into a Sale using the given inventory snapshot.

    Raises:
        ValueError: kit sale without components, or missing client/product name
        LookupError: kit component not present in the inventory
    """

    inventory = list(inventory)

    if not draft.client_name.strip():
        raise ValueError("client_name must not be empty")

    if draft.is_kit:
        if not draft.kit_products:
            raise ValueError("A combo sale needs at least one item")
        items = snapshot_kit_items(draft.kit_products, inventory)
        product_name = combo_label(items)
        cost = resolve_kit_cost(items)
    else:
        if not draft.product_name.strip():
            raise ValueError("product_name must not be empty")
        items = ()
        product_name = draft.product_name
        cost = resolve_unit_cost(draft.product_name, inventory)

    economics = calculate_sale_economics(
        EconomicsInput(
            amount=draft.amount,
            resolved_unit_cost=cost,
            channel=draft.channel,
            discount=draft.discount,
            freight=draft.freight,
            ad_cost=draft.ad_cost,
            commission_rate=draft.commission_rate,
            fixed_commission_amount=draft.fixed_commission,
        )
    )

    return Sale(
        sale_id=sale_id or str(uuid4()),
        client_name=draft.client_name,
        product_name=product_name,
        amount=draft.amount,
        sale_date=draft.sale_date,
        cost=cost,
        freight=draft.freight,
        commission_rate=economics.commission_rate,
        commission_value=economics.commission_value,
        ad_cost=economics.ad_cost,
        discount=draft.discount,
        status=SaleStatus.PENDING,
        channel=draft.channel,
        items=items,
    )


__all__ = [
    "EconomicsInput",
    "SaleEconomics",
    "SaleDraft",
    "calculate_sale_economics",
    "resolve_kit_cost",
    "resolve_unit_cost",
    "snapshot_kit_items",
    "with_suggested_price",
    "build_sale",
]
