"""
Inventory API Endpoints.

Endpoints for listing stock, adding products, restocking at weighted-average
cost and removing products.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from api.models import (
    InventoryItemResponse,
    InventoryListResponse,
    ProductCreateRequest,
    RestockRequest,
)
from domain.inventory import InventoryItem
from repositories.inventory_repository import delete_product, list_inventory
from services.sales_service import add_product, restock_product

logger = logging.getLogger(__name__)

router = APIRouter()


def inventory_to_response(items: List[InventoryItem]) -> InventoryListResponse:
    return InventoryListResponse(
        items=[
            InventoryItemResponse(
                item_id=item.item_id,
                product_name=item.product_name,
                quantity=item.quantity,
                cost_price=item.cost_price,
                default_sell_price=item.default_sell_price,
            )
            for item in items
        ],
        total_count=len(items),
    )


@router.get(
    "/inventory",
    response_model=InventoryListResponse,
    summary="List Inventory",
    description="All products with quantity and weighted-average cost price."
)
def get_inventory():
    try:
        return inventory_to_response(list_inventory())
    except Exception as e:
        logger.exception("Failed to query inventory")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to query inventory: {str(e)}"
        )


@router.post(
    "/inventory",
    response_model=InventoryListResponse,
    status_code=201,
    summary="Add Product",
    description="Stock a new product. Its cost price is total_cost / quantity."
)
def create_product(request: ProductCreateRequest):
    """
    Add a product to inventory.

    **Example request:**
    ```json
    {"product_name": "Vitamin C Serum", "quantity": 10, "total_cost": "100.00"}
    ```
    Resulting cost price: 10.00 per unit.
    """
    try:
        items = add_product(
            request.product_name,
            request.quantity,
            request.total_cost,
            request.default_sell_price,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to add product")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to add product: {str(e)}"
        )
    return inventory_to_response(items)


@router.post(
    "/inventory/restock",
    response_model=InventoryListResponse,
    summary="Restock Product",
    description="Add a batch to an existing product and recompute its weighted-average cost."
)
def restock(request: RestockRequest):
    """
    Restock an existing product.

    new cost = (current qty * current cost + batch total cost) / (current qty + batch qty)

    **Example:** 10 units at 10.00, restocked with 10 units for 200.00 -> 15.00
    """
    try:
        items = restock_product(request.product_name, request.quantity, request.total_cost)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to restock product")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to restock product: {str(e)}"
        )
    return inventory_to_response(items)


@router.delete(
    "/inventory/{item_id}",
    response_model=InventoryListResponse,
    summary="Delete Product",
    description="Remove a product from inventory."
)
def remove_product(item_id: str):
    try:
        return inventory_to_response(delete_product(item_id))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete product: {str(e)}"
        )
