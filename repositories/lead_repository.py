"""
Lead repository (persistence).

This module provides *only* persistence operations for the Lead domain entity.
Conversion into a sale is orchestrated in services/sales_service.py.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from domain.lead import Lead, LeadStatus
from domain.time import require_utc_timestamp, to_calendar_date
from repositories.client import get_client

# Supabase table name for Lead records.
# Keep this aligned with your database schema.
_LEADS_TABLE: str = "leads"


def _to_iso_utc(dt: datetime) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp("created_at", dt)
    return dt.astimezone(timezone.utc).isoformat()


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        # Python's fromisoformat doesn't consistently accept 'Z' across versions.
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    # A naive timestamp from the backend is interpreted as UTC.
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def _lead_to_row(lead: Lead) -> dict[str, Any]:
    """Convert a domain Lead to a Supabase row payload."""

    return {
        "lead_id": lead.lead_id,
        "client_name": lead.client_name,
        "phone": lead.phone or "",
        "product_interest": lead.product_interest or "",
        "expected_date": lead.expected_date.isoformat() if lead.expected_date else None,
        "notes": lead.notes or "",
        "created_at_utc": _to_iso_utc(lead.created_at),
        "status": lead.status.value,
    }


def _row_to_lead(row: Mapping[str, Any]) -> Lead:
    """Convert a Supabase row into a domain Lead."""

    # Empty strings are stored for missing optional text fields.
    def get_optional(key: str) -> str | None:
        value = row.get(key, "")
        return value if value else None

    expected = row.get("expected_date")
    return Lead(
        lead_id=str(row["lead_id"]),
        client_name=str(row["client_name"]),
        created_at=_parse_utc_datetime(row["created_at_utc"]),
        phone=get_optional("phone"),
        product_interest=get_optional("product_interest"),
        expected_date=to_calendar_date(expected) if expected else None,
        notes=get_optional("notes"),
        status=LeadStatus(row.get("status") or LeadStatus.PENDING.value),
    )


def create_lead(lead: Lead) -> Lead:
    """Insert a new lead."""

    response = get_client().table(_LEADS_TABLE).insert(_lead_to_row(lead)).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to insert lead: {error}")
    return lead


def list_leads() -> List[Lead]:
    """
    Fetch all leads, newest first.

    Returns:
        List[Lead] (possibly empty)
    """

    response = (
        get_client()
        .table(_LEADS_TABLE)
        .select("*")
        .order("created_at_utc", desc=True)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list leads: {error}")

    rows = getattr(response, "data", None) or []
    return [_row_to_lead(row) for row in rows]


def get_lead_by_id(lead_id: str) -> Optional[Lead]:
    """Fetch a single lead, or None if not found."""

    response = (
        get_client()
        .table(_LEADS_TABLE)
        .select("*")
        .eq("lead_id", lead_id)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch lead: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_lead(rows[0])


def delete_lead(lead_id: str) -> None:
    """Delete a lead (direct removal or conversion into a sale)."""

    response = get_client().table(_LEADS_TABLE).delete().eq("lead_id", lead_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to delete lead: {error}")


__all__ = [
    "create_lead",
    "list_leads",
    "get_lead_by_id",
    "delete_lead",
]
