"""
Sales aggregation service.

Filters a sales snapshot and reduces it to dashboard totals.

Filter semantics (all combined with AND):
- date range: inclusive on both ends, day granularity; an unset bound is open
- channel: exact match; ALL_CHANNELS disables the filter
- product: exact match on product_name (chart drill-down)
- search: case-insensitive substring of client_name or product_name
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from domain.channel import SaleChannel
from domain.money import ZERO
from domain.sale import Sale
from domain.time import to_calendar_date

ALL_CHANNELS = "all"


@dataclass(frozen=True, slots=True)
class SalesFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    channel: Union[SaleChannel, str, None] = ALL_CHANNELS
    product_name: Optional[str] = None
    search_term: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SalesSummary:
    total_sales: Decimal
    total_commission: Decimal
    total_freight: Decimal
    total_net_profit: Decimal
    sales_count: int
    average_ticket: Decimal

    @staticmethod
    def empty() -> "SalesSummary":
        return SalesSummary(ZERO, ZERO, ZERO, ZERO, 0, ZERO)


@dataclass(frozen=True, slots=True)
class ProductSales:
    product_name: str
    amount: Decimal
    sales_count: int


def _in_date_range(sale: Sale, filters: SalesFilter) -> bool:
    sale_day = to_calendar_date(sale.sale_date)
    if filters.start_date is not None and sale_day < to_calendar_date(filters.start_date):
        return False
    if filters.end_date is not None and sale_day > to_calendar_date(filters.end_date):
        return False
    return True


def _matches_channel(sale: Sale, filters: SalesFilter) -> bool:
    if filters.channel is None or filters.channel == ALL_CHANNELS:
        return True
    return sale.channel is not None and sale.channel == SaleChannel(filters.channel)


def _matches_product(sale: Sale, filters: SalesFilter) -> bool:
    if not filters.product_name:
        return True
    return sale.product_name == filters.product_name


def _matches_search(sale: Sale, filters: SalesFilter) -> bool:
    if not filters.search_term:
        return True
    term = filters.search_term.lower()
    return term in sale.client_name.lower() or term in sale.product_name.lower()


def filter_sales(sales: Iterable[Sale], filters: SalesFilter) -> List[Sale]:
    """Apply every filter in `filters`; input order is preserved."""

    return [
        sale
        for sale in sales
        if _in_date_range(sale, filters)
        and _matches_channel(sale, filters)
        and _matches_product(sale, filters)
        and _matches_search(sale, filters)
    ]


def summarize_sales(sales: Iterable[Sale]) -> SalesSummary:
    """
    Reduce sales to totals.

    average_ticket = total_sales / sales_count, or 0 for an empty set.
    """

    total_sales = ZERO
    total_commission = ZERO
    total_freight = ZERO
    total_net_profit = ZERO
    count = 0

    for sale in sales:
        total_sales += sale.amount
        total_commission += sale.commission_value
        total_freight += sale.freight
        total_net_profit += sale.net_profit
        count += 1

    if count == 0:
        return SalesSummary.empty()

    return SalesSummary(
        total_sales=total_sales,
        total_commission=total_commission,
        total_freight=total_freight,
        total_net_profit=total_net_profit,
        sales_count=count,
        average_ticket=total_sales / count,
    )


def product_sales_ranking(sales: Iterable[Sale], filters: SalesFilter) -> List[ProductSales]:
    """
    Gross amount per product, highest first.

    Only the date range and channel of `filters` apply: the product chart is
    what the drill-down selects from, so it is not narrowed by the selected
    product or the search box.
    """

    chart_filters = SalesFilter(
        start_date=filters.start_date,
        end_date=filters.end_date,
        channel=filters.channel,
    )

    totals: Dict[str, List] = {}
    for sale in filter_sales(sales, chart_filters):
        bucket = totals.setdefault(sale.product_name, [ZERO, 0])
        bucket[0] += sale.amount
        bucket[1] += 1

    ranking = [
        ProductSales(product_name=name, amount=amount, sales_count=count)
        for name, (amount, count) in totals.items()
    ]
    ranking.sort(key=lambda row: row.amount, reverse=True)
    return ranking


__all__ = [
    "ALL_CHANNELS",
    "SalesFilter",
    "SalesSummary",
    "ProductSales",
    "filter_sales",
    "summarize_sales",
    "product_sales_ranking",
]
