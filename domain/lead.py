"""
Domain: Lead entity.

A Lead is a prospective customer who has shown interest but has not bought
yet. The only lifecycle transition handled here is conversion into a Sale,
which removes the lead; status values are stored as given.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from .time import require_utc_timestamp


class LeadStatus(str, Enum):
    PENDING = "Pending"
    CONTACTED = "Contacted"
    CONVERTED = "Converted"
    LOST = "Lost"


@dataclass(frozen=True, slots=True)
class Lead:
    """
    Pure domain entity for a Lead.

    created_at must be a UTC timestamp.
    """

    lead_id: str
    client_name: str
    created_at: datetime
    phone: Optional[str] = None
    product_interest: Optional[str] = None
    expected_date: Optional[date] = None
    notes: Optional[str] = None
    status: LeadStatus = LeadStatus.PENDING

    def __post_init__(self) -> None:
        if not self.client_name.strip():
            raise ValueError("client_name must not be empty")
        require_utc_timestamp("created_at", self.created_at)
