"""
Leads API Endpoints.

Endpoints for pending customer interest: list, create, delete, and convert
into a pre-filled sale.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Query, Response

from api.models import LeadCreateRequest, LeadResponse, SaleDraftResponse
from domain.lead import Lead
from repositories.inventory_repository import list_inventory
from repositories.lead_repository import create_lead, delete_lead, get_lead_by_id, list_leads
from services.economics_service import with_suggested_price
from services.sales_service import convert_lead

logger = logging.getLogger(__name__)

router = APIRouter()


def lead_to_response(lead: Lead) -> LeadResponse:
    return LeadResponse(
        lead_id=lead.lead_id,
        client_name=lead.client_name,
        phone=lead.phone,
        product_interest=lead.product_interest,
        expected_date=lead.expected_date,
        notes=lead.notes,
        created_at=lead.created_at,
        status=lead.status.value,
    )


@router.get(
    "/leads",
    response_model=List[LeadResponse],
    summary="List Leads"
)
def get_leads():
    try:
        return [lead_to_response(lead) for lead in list_leads()]
    except Exception as e:
        logger.exception("Failed to list leads")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list leads: {str(e)}"
        )


@router.post(
    "/leads",
    response_model=LeadResponse,
    status_code=201,
    summary="Create Lead"
)
def add_lead(request: LeadCreateRequest):
    try:
        lead = Lead(
            lead_id=str(uuid4()),
            client_name=request.client_name,
            created_at=datetime.now(timezone.utc),
            phone=request.phone,
            product_interest=request.product_interest,
            expected_date=request.expected_date,
            notes=request.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return lead_to_response(create_lead(lead))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create lead: {str(e)}"
        )


@router.post(
    "/leads/{lead_id}/convert",
    response_model=SaleDraftResponse,
    summary="Convert Lead",
    description="Pre-fill a sale from a lead. The lead is removed when that sale is recorded."
)
def convert(
    lead_id: str,
    sale_date: Optional[date] = Query(None, description="Sale date (defaults to today)"),
):
    """
    Build the sale pre-fill for a lead.

    Submit the returned fields to `POST /api/v1/sales` together with
    `converting_lead_id` to record the sale and remove the lead.
    """
    try:
        lead = get_lead_by_id(lead_id)
        if lead is None:
            raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")

        draft = convert_lead(lead, sale_date or date.today())
        draft = with_suggested_price(draft, list_inventory())
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to convert lead: {str(e)}"
        )

    return SaleDraftResponse(
        client_name=draft.client_name,
        product_name=draft.product_name,
        sale_date=draft.sale_date,
        amount=draft.amount,
        converting_lead_id=lead.lead_id,
    )


@router.delete(
    "/leads/{lead_id}",
    status_code=204,
    summary="Delete Lead"
)
def remove_lead(lead_id: str):
    try:
        delete_lead(lead_id)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete lead: {str(e)}"
        )
    return Response(status_code=204)
