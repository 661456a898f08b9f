"""
Repurchase detection.

Finds clients whose most recent purchase is at least `threshold_days` calendar
days old, so they can be contacted again.

- All sales are considered (no date/channel filter).
- The last sale per client is the one with the latest date; on a tie the
  earliest one in input order is kept.
- Exactly `threshold_days` days qualifies.
- Result is ordered by last sale date, most recent first.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from config import Config
from domain.sale import Sale
from domain.time import days_between, to_calendar_date
from services.economics_service import SaleDraft

DEFAULT_THRESHOLD_DAYS: int = Config.REPURCHASE_THRESHOLD_DAYS


@dataclass(frozen=True, slots=True)
class RepurchaseCandidate:
    client_name: str
    product_name: str
    last_sale_date: date
    days_since: int
    sale_id: str


def last_sale_by_client(sales: Iterable[Sale]) -> Dict[str, Sale]:
    """Most recent sale per client_name (first seen wins on equal dates)."""

    latest: Dict[str, Sale] = {}
    for sale in sales:
        current = latest.get(sale.client_name)
        if current is None or to_calendar_date(sale.sale_date) > to_calendar_date(current.sale_date):
            latest[sale.client_name] = sale
    return latest


def detect_repurchase_candidates(
    sales: Iterable[Sale],
    today: date,
    threshold_days: Optional[int] = None,
) -> List[RepurchaseCandidate]:
    """
    List clients due for a repurchase contact.

    Args:
        sales: full sales snapshot
        today: reference date (explicit; no implicit clock)
        threshold_days: minimum days since the last purchase (default 28)
    """

    if threshold_days is None:
        threshold_days = DEFAULT_THRESHOLD_DAYS

    candidates = []
    for client_name, sale in last_sale_by_client(sales).items():
        elapsed = days_between(sale.sale_date, today)
        if elapsed >= threshold_days:
            candidates.append(
                RepurchaseCandidate(
                    client_name=client_name,
                    product_name=sale.product_name,
                    last_sale_date=to_calendar_date(sale.sale_date),
                    days_since=elapsed,
                    sale_id=sale.sale_id,
                )
            )

    candidates.sort(key=lambda c: c.last_sale_date, reverse=True)
    return candidates


def recontact_draft(candidate: RepurchaseCandidate, sale_date: date) -> SaleDraft:
    """Pre-filled sale draft for contacting a lapsed client again."""

    return SaleDraft(
        client_name=candidate.client_name,
        product_name=candidate.product_name,
        sale_date=sale_date,
    )


__all__ = [
    "DEFAULT_THRESHOLD_DAYS",
    "RepurchaseCandidate",
    "last_sale_by_client",
    "detect_repurchase_candidates",
    "recontact_draft",
]
