"""
Analytics API Endpoints.

Read-only projections recomputed from the current sales on every request:
KPIs, the repurchase (recontact) list and the product ranking chart.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from api.models import (
    ChannelPerformanceResponse,
    KpiResponse,
    PeriodBucketResponse,
    ProductProfitResponse,
    ProductSalesResponse,
    RepurchaseCandidateResponse,
    RepurchaseListResponse,
    SaleDraftResponse,
)
from api.routers.sales import build_filters
from domain.time import days_between, to_calendar_date
from repositories.inventory_repository import list_inventory
from repositories.sale_repository import list_sales
from services.aggregation_service import filter_sales, product_sales_ranking
from services.economics_service import with_suggested_price
from services.kpi_service import KpiPeriod, PeriodBucket, compute_kpis
from services.repurchase_service import (
    DEFAULT_THRESHOLD_DAYS,
    RepurchaseCandidate,
    detect_repurchase_candidates,
    last_sale_by_client,
    recontact_draft,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _bucket(bucket: Optional[PeriodBucket]) -> Optional[PeriodBucketResponse]:
    if bucket is None:
        return None
    return PeriodBucketResponse(
        label=bucket.label,
        amount=bucket.amount,
        profit=bucket.profit,
        sales_count=bucket.sales_count,
    )


def _load_sales():
    try:
        return list_sales()
    except Exception as e:
        logger.exception("Failed to load sales for analytics")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load sales: {str(e)}"
        )


@router.get(
    "/analytics/kpis",
    response_model=KpiResponse,
    summary="KPIs",
    description="Per-channel, per-product, per-period and per-weekday performance of the filtered sales."
)
def get_kpis(
    period: KpiPeriod = Query(KpiPeriod.DAILY, description="daily, weekly or monthly"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    sale_type: Optional[str] = Query(None),
    product_name: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    filters = build_filters(start_date, end_date, sale_type, product_name, search)
    report = compute_kpis(filter_sales(_load_sales(), filters), period)

    return KpiResponse(
        period=period,
        modality=[
            ChannelPerformanceResponse(
                sale_type=row.channel.value,
                gross_amount=row.gross_amount,
                profit=row.profit,
                sales_count=row.sales_count,
            )
            for row in report.modality
        ],
        product_profit=[
            ProductProfitResponse(product_name=row.product_name, profit=row.profit, sales_count=row.sales_count)
            for row in report.product_profit
        ],
        time_series=[_bucket(b) for b in report.time_series],
        weekday=[
            PeriodBucketResponse(label=w.name, amount=w.amount, profit=w.profit, sales_count=w.sales_count)
            for w in report.weekday
        ],
        best_period=_bucket(report.best_period),
        worst_period=_bucket(report.worst_period),
    )


@router.get(
    "/analytics/repurchase",
    response_model=RepurchaseListResponse,
    summary="Repurchase List",
    description="Clients whose last purchase is at least `threshold_days` old, most recent first."
)
def get_repurchase_list(
    threshold_days: int = Query(DEFAULT_THRESHOLD_DAYS, ge=0),
    as_of: Optional[date] = Query(None, description="Reference date (defaults to today)"),
):
    today = as_of or date.today()
    candidates = detect_repurchase_candidates(_load_sales(), today, threshold_days)

    return RepurchaseListResponse(
        threshold_days=threshold_days,
        as_of=today,
        items=[
            RepurchaseCandidateResponse(
                client_name=c.client_name,
                product_name=c.product_name,
                last_sale_date=c.last_sale_date,
                days_since=c.days_since,
                sale_id=c.sale_id,
            )
            for c in candidates
        ],
    )


@router.get(
    "/analytics/repurchase/draft",
    response_model=SaleDraftResponse,
    summary="Repurchase Pre-fill",
    description="Pre-filled sale for recontacting a lapsed client. Nothing is written."
)
def get_repurchase_draft(
    client_name: str = Query(..., min_length=1),
    sale_date: Optional[date] = Query(None, description="Sale date (defaults to today)"),
):
    today = sale_date or date.today()
    last_sale = last_sale_by_client(_load_sales()).get(client_name)
    if last_sale is None:
        raise HTTPException(status_code=404, detail=f"No sales found for client: {client_name}")

    match = RepurchaseCandidate(
        client_name=client_name,
        product_name=last_sale.product_name,
        last_sale_date=to_calendar_date(last_sale.sale_date),
        days_since=days_between(last_sale.sale_date, today),
        sale_id=last_sale.sale_id,
    )

    try:
        draft = with_suggested_price(recontact_draft(match, today), list_inventory())
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build repurchase draft: {str(e)}"
        )

    return SaleDraftResponse(
        client_name=draft.client_name,
        product_name=draft.product_name,
        sale_date=draft.sale_date,
        amount=draft.amount,
    )


@router.get(
    "/analytics/products",
    response_model=List[ProductSalesResponse],
    summary="Product Ranking",
    description="Gross amount per product for the date range and channel, highest first."
)
def get_product_ranking(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    sale_type: Optional[str] = Query(None),
):
    filters = build_filters(start_date, end_date, sale_type, None, None)
    return [
        ProductSalesResponse(product_name=row.product_name, amount=row.amount, sales_count=row.sales_count)
        for row in product_sales_ranking(_load_sales(), filters)
    ]
