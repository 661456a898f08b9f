"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Money values are Decimals; numeric request fields also accept strings, and
anything that is not a number is read as 0.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from domain.channel import SaleChannel
from services.kpi_service import KpiPeriod


# ============================================================================
# Sale Models
# ============================================================================

class SaleItemResponse(BaseModel):
    product_name: str
    quantity: int
    unit_cost: Decimal


class SaleResponse(BaseModel):
    """Single sale in API response."""
    sale_id: str
    client_name: str
    product_name: str
    items: List[SaleItemResponse] = []
    amount: Decimal
    cost: Decimal
    freight: Decimal
    commission_rate: Decimal
    commission_value: Decimal
    ad_cost: Decimal
    discount: Decimal
    net_profit: Decimal
    sale_date: date
    status: str
    sale_type: Optional[str] = None


class SalesSummaryResponse(BaseModel):
    total_sales: Decimal
    total_commission: Decimal
    total_freight: Decimal
    total_net_profit: Decimal
    sales_count: int
    average_ticket: Decimal


class SalesListResponse(BaseModel):
    """Response for the filtered sales listing."""
    items: List[SaleResponse]
    summary: SalesSummaryResponse
    filters_applied: dict

    class Config:
        json_schema_extra = {
            "example": {
                "items": [],
                "summary": {
                    "total_sales": "0",
                    "total_commission": "0",
                    "total_freight": "0",
                    "total_net_profit": "0",
                    "sales_count": 0,
                    "average_ticket": "0",
                },
                "filters_applied": {"sale_type": "Instagram"},
            }
        }


class SaleCreateRequest(BaseModel):
    """Request to record a sale. Economics are resolved server-side."""
    client_name: str = Field(..., min_length=1)
    product_name: str = ""
    sale_date: date
    amount: Any = "0"
    sale_type: Optional[SaleChannel] = None
    commission_rate: Any = "0"
    fixed_commission: Any = "0"
    ad_cost: Any = "0"
    freight: Any = "0"
    discount: Any = "0"
    is_kit: bool = False
    kit_products: List[str] = []
    converting_lead_id: Optional[str] = Field(
        None,
        description="Lead to remove once the sale is recorded"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_name": "Maria Silva",
                "product_name": "Vitamin C Serum",
                "sale_date": "2025-03-10",
                "amount": "120.00",
                "sale_type": "Referral",
                "fixed_commission": "15.00",
                "freight": "12.50",
                "discount": "5.00",
            }
        }


# ============================================================================
# Inventory Models
# ============================================================================

class InventoryItemResponse(BaseModel):
    """Single inventory item in API response."""
    item_id: str
    product_name: str
    quantity: int
    cost_price: Decimal
    default_sell_price: Optional[Decimal] = None


class InventoryListResponse(BaseModel):
    items: List[InventoryItemResponse]
    total_count: int


class ProductCreateRequest(BaseModel):
    """First stocking of a product; cost price = total_cost / quantity."""
    product_name: str = Field(..., min_length=1)
    quantity: Any
    total_cost: Any = "0"
    default_sell_price: Any = None

    class Config:
        json_schema_extra = {
            "example": {
                "product_name": "Vitamin C Serum",
                "quantity": 10,
                "total_cost": "100.00",
                "default_sell_price": "59.90",
            }
        }


class RestockRequest(BaseModel):
    """Restock of an existing product (weighted-average cost)."""
    product_name: str = Field(..., min_length=1)
    quantity: Any
    total_cost: Any = "0"


# ============================================================================
# Lead Models
# ============================================================================

class LeadResponse(BaseModel):
    lead_id: str
    client_name: str
    phone: Optional[str] = None
    product_interest: Optional[str] = None
    expected_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    status: str


class LeadCreateRequest(BaseModel):
    client_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    product_interest: Optional[str] = None
    expected_date: Optional[date] = None
    notes: Optional[str] = None


class SaleDraftResponse(BaseModel):
    """Pre-filled fields for a new sale (lead conversion or repurchase)."""
    client_name: str
    product_name: str
    sale_date: date
    amount: Decimal
    converting_lead_id: Optional[str] = None


# ============================================================================
# Analytics Models
# ============================================================================

class ChannelPerformanceResponse(BaseModel):
    sale_type: str
    gross_amount: Decimal
    profit: Decimal
    sales_count: int


class ProductProfitResponse(BaseModel):
    product_name: str
    profit: Decimal
    sales_count: int


class PeriodBucketResponse(BaseModel):
    label: str
    amount: Decimal
    profit: Decimal
    sales_count: int


class KpiResponse(BaseModel):
    period: KpiPeriod
    modality: List[ChannelPerformanceResponse]
    product_profit: List[ProductProfitResponse]
    time_series: List[PeriodBucketResponse]
    weekday: List[PeriodBucketResponse]
    best_period: Optional[PeriodBucketResponse] = None
    worst_period: Optional[PeriodBucketResponse] = None


class RepurchaseCandidateResponse(BaseModel):
    client_name: str
    product_name: str
    last_sale_date: date
    days_since: int
    sale_id: str


class RepurchaseListResponse(BaseModel):
    threshold_days: int
    as_of: date
    items: List[RepurchaseCandidateResponse]


class ProductSalesResponse(BaseModel):
    product_name: str
    amount: Decimal
    sales_count: int


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int
