"""
KPI and time-series aggregation.

Builds the indicator views from an already-filtered sales snapshot:
- modality: gross amount, profit and count per channel
- product_profit: profit and count per product, most profitable first
- time_series: amount, profit and count per day, week or month
- weekday: seven Sunday-first buckets
- best_period / worst_period: the time-series buckets with the highest and
  lowest amount (None when there are no sales)

Weekly labels use a calendar-year-relative week number:

    week = ceil((day_of_year_zero_based + weekday_of_jan_1 + 1) / 7)

with Sunday = 0. This is not ISO-8601 week numbering; the first and last
weeks of a year can be partial and the numbering restarts every January 1st.
Labels are sorted as plain strings, so "Week 10/25" sorts before "Week 2/25".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional

from domain.channel import DEFAULT_KPI_CHANNEL, SaleChannel
from domain.money import ZERO
from domain.sale import Sale
from domain.time import to_calendar_date

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class KpiPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True, slots=True)
class ChannelPerformance:
    channel: SaleChannel
    gross_amount: Decimal
    profit: Decimal
    sales_count: int


@dataclass(frozen=True, slots=True)
class ProductProfit:
    product_name: str
    profit: Decimal
    sales_count: int


@dataclass(frozen=True, slots=True)
class PeriodBucket:
    label: str
    amount: Decimal
    profit: Decimal
    sales_count: int


@dataclass(frozen=True, slots=True)
class WeekdayBucket:
    name: str
    amount: Decimal
    profit: Decimal
    sales_count: int


@dataclass(frozen=True, slots=True)
class KpiReport:
    modality: List[ChannelPerformance]
    product_profit: List[ProductProfit]
    time_series: List[PeriodBucket]
    ranked_periods: List[PeriodBucket]
    weekday: List[WeekdayBucket]
    best_period: Optional[PeriodBucket]
    worst_period: Optional[PeriodBucket]


def sunday_first_weekday(day: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""

    return (day.weekday() + 1) % 7


def week_of_year(day: date) -> int:
    jan_1 = date(day.year, 1, 1)
    day_of_year = (day - jan_1).days
    return math.ceil((day_of_year + sunday_first_weekday(jan_1) + 1) / 7)


def period_label(sale_date: date, period: KpiPeriod) -> str:
    day = to_calendar_date(sale_date)
    if period is KpiPeriod.WEEKLY:
        return f"Week {week_of_year(day)}/{day.year % 100:02d}"
    if period is KpiPeriod.MONTHLY:
        return f"{day.month:02d}/{day.year}"
    return day.isoformat()


class _Tally:
    __slots__ = ("amount", "profit", "count")

    def __init__(self) -> None:
        self.amount = ZERO
        self.profit = ZERO
        self.count = 0

    def add(self, sale: Sale) -> None:
        self.amount += sale.amount
        self.profit += sale.net_profit
        self.count += 1


def compute_kpis(sales: Iterable[Sale], period: KpiPeriod = KpiPeriod.DAILY) -> KpiReport:
    """Aggregate sales into the KPI views for the given period granularity."""

    period = KpiPeriod(period)

    by_channel: Dict[SaleChannel, _Tally] = {}
    by_product: Dict[str, _Tally] = {}
    by_period: Dict[str, _Tally] = {}
    by_weekday = [_Tally() for _ in WEEKDAY_NAMES]

    for sale in sales:
        channel = sale.channel or DEFAULT_KPI_CHANNEL
        by_channel.setdefault(channel, _Tally()).add(sale)
        by_product.setdefault(sale.product_name, _Tally()).add(sale)
        by_period.setdefault(period_label(sale.sale_date, period), _Tally()).add(sale)
        by_weekday[sunday_first_weekday(to_calendar_date(sale.sale_date))].add(sale)

    modality = [
        ChannelPerformance(channel=channel, gross_amount=t.amount, profit=t.profit, sales_count=t.count)
        for channel, t in by_channel.items()
    ]

    product_profit = [
        ProductProfit(product_name=name, profit=t.profit, sales_count=t.count)
        for name, t in by_product.items()
    ]
    product_profit.sort(key=lambda p: p.profit, reverse=True)

    time_series = [
        PeriodBucket(label=label, amount=t.amount, profit=t.profit, sales_count=t.count)
        for label, t in sorted(by_period.items())
    ]
    ranked_periods = sorted(time_series, key=lambda b: b.amount, reverse=True)

    weekday = [
        WeekdayBucket(name=name, amount=t.amount, profit=t.profit, sales_count=t.count)
        for name, t in zip(WEEKDAY_NAMES, by_weekday)
    ]

    return KpiReport(
        modality=modality,
        product_profit=product_profit,
        time_series=time_series,
        ranked_periods=ranked_periods,
        weekday=weekday,
        best_period=ranked_periods[0] if ranked_periods else None,
        worst_period=ranked_periods[-1] if ranked_periods else None,
    )


__all__ = [
    "KpiPeriod",
    "ChannelPerformance",
    "ProductProfit",
    "PeriodBucket",
    "WeekdayBucket",
    "KpiReport",
    "week_of_year",
    "period_label",
    "compute_kpis",
]
