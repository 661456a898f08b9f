"""
Sales API Endpoints.

Endpoints for listing (with filters and summary), recording, deleting and
exporting sales.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response

from api.models import (
    SaleCreateRequest,
    SaleItemResponse,
    SaleResponse,
    SalesListResponse,
    SalesSummaryResponse,
)
from domain.channel import SaleChannel
from domain.sale import Sale
from repositories.sale_repository import delete_sale, get_sale_by_id, list_sales
from services.aggregation_service import (
    ALL_CHANNELS,
    SalesFilter,
    SalesSummary,
    filter_sales,
    summarize_sales,
)
from services.csv_export_service import generate_sales_csv
from services.economics_service import SaleDraft
from services.sales_service import PartialWriteError, record_sale

logger = logging.getLogger(__name__)

router = APIRouter()


def sale_to_response(sale: Sale) -> SaleResponse:
    return SaleResponse(
        sale_id=sale.sale_id,
        client_name=sale.client_name,
        product_name=sale.product_name,
        items=[
            SaleItemResponse(product_name=i.product_name, quantity=i.quantity, unit_cost=i.unit_cost)
            for i in sale.items
        ],
        amount=sale.amount,
        cost=sale.cost,
        freight=sale.freight,
        commission_rate=sale.commission_rate,
        commission_value=sale.commission_value,
        ad_cost=sale.ad_cost,
        discount=sale.discount,
        net_profit=sale.net_profit,
        sale_date=sale.sale_date,
        status=sale.status.value,
        sale_type=sale.channel.value if sale.channel is not None else None,
    )


def summary_to_response(summary: SalesSummary) -> SalesSummaryResponse:
    return SalesSummaryResponse(
        total_sales=summary.total_sales,
        total_commission=summary.total_commission,
        total_freight=summary.total_freight,
        total_net_profit=summary.total_net_profit,
        sales_count=summary.sales_count,
        average_ticket=summary.average_ticket,
    )


def build_filters(
    start_date: Optional[date],
    end_date: Optional[date],
    sale_type: Optional[str],
    product_name: Optional[str],
    search: Optional[str],
) -> SalesFilter:
    """Build a SalesFilter from query parameters; invalid sale_type -> 400."""

    channel = ALL_CHANNELS
    if sale_type and sale_type != ALL_CHANNELS:
        try:
            channel = SaleChannel(sale_type)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid sale_type. Got '{sale_type}'"
            )

    return SalesFilter(
        start_date=start_date,
        end_date=end_date,
        channel=channel,
        product_name=product_name or None,
        search_term=search or None,
    )


@router.get(
    "/sales",
    response_model=SalesListResponse,
    summary="List Sales",
    description="List sales with optional date, channel, product and search filters, plus totals."
)
def get_sales(
    start_date: Optional[date] = Query(None, description="Inclusive start date (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Inclusive end date (YYYY-MM-DD)"),
    sale_type: Optional[str] = Query(None, description="Channel, or 'all'"),
    product_name: Optional[str] = Query(None, description="Exact product name"),
    search: Optional[str] = Query(None, description="Substring of client or product name"),
):
    """
    Query sales with filters.

    **Example usage:**
    - All sales: `GET /api/v1/sales`
    - One month of referrals: `GET /api/v1/sales?start_date=2025-03-01&end_date=2025-03-31&sale_type=Referral`
    - Search: `GET /api/v1/sales?search=maria`
    """
    filters = build_filters(start_date, end_date, sale_type, product_name, search)

    try:
        sales = filter_sales(list_sales(), filters)
    except Exception as e:
        logger.exception("Failed to list sales")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list sales: {str(e)}"
        )

    filters_applied = {
        key: str(value)
        for key, value in {
            "start_date": start_date,
            "end_date": end_date,
            "sale_type": sale_type,
            "product_name": product_name,
            "search": search,
        }.items()
        if value
    }

    return SalesListResponse(
        items=[sale_to_response(sale) for sale in sales],
        summary=summary_to_response(summarize_sales(sales)),
        filters_applied=filters_applied,
    )


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=201,
    summary="Record Sale",
    description="Record a sale; cost, commission and profit are resolved from the current inventory."
)
def create_sale(request: SaleCreateRequest):
    """
    Record a new sale.

    **Process:**
    1. Resolves product cost from inventory (sum of components for a combo)
    2. Applies the channel's commission and ad-cost rule
    3. Stores the sale and decrements stock
    4. Removes the converted lead when `converting_lead_id` is given

    A failure after the sale was stored returns 502 with the failed step so
    the client can reload and retry.
    """
    draft = SaleDraft(
        client_name=request.client_name,
        product_name=request.product_name,
        sale_date=request.sale_date,
        amount=request.amount,
        channel=request.sale_type,
        commission_rate=request.commission_rate,
        fixed_commission=request.fixed_commission,
        ad_cost=request.ad_cost,
        freight=request.freight,
        discount=request.discount,
        is_kit=request.is_kit,
        kit_products=tuple(request.kit_products),
    )

    try:
        sale = record_sale(draft, converting_lead_id=request.converting_lead_id)
    except PartialWriteError as e:
        raise HTTPException(
            status_code=502,
            detail={
                "message": str(e),
                "failed_step": e.step,
                "sale_id": e.sale_id,
                "completed_steps": list(e.completed_steps),
            }
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to record sale")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to record sale: {str(e)}"
        )

    return sale_to_response(sale)


@router.get(
    "/sales/export",
    summary="Export Sales CSV",
    description="Download the filtered sales as CSV.",
    response_class=Response
)
def export_sales_csv(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    sale_type: Optional[str] = Query(None),
    product_name: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    """
    Download sales as CSV.

    Text fields are sanitized against CSV injection.
    """
    filters = build_filters(start_date, end_date, sale_type, product_name, search)

    try:
        csv_content = generate_sales_csv(filter_sales(list_sales(), filters))
    except Exception as e:
        logger.exception("Failed to export sales")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate CSV: {str(e)}"
        )

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=sales.csv"}
    )


@router.delete(
    "/sales/{sale_id}",
    status_code=204,
    summary="Delete Sale",
    description="Delete a sale. Stock is not restored."
)
def remove_sale(sale_id: str):
    try:
        if get_sale_by_id(sale_id) is None:
            raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
        delete_sale(sale_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete sale: {str(e)}"
        )
    return Response(status_code=204)
