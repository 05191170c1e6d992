"""
Orders Router

Endpoints:
- GET /api/orders - List orders, newest first (admin)
- GET /api/orders/export - Download all orders as .xlsx (admin)
- GET /api/orders/restaurant/{restaurant_id} - Orders of one restaurant (admin)
- GET /api/orders/{order_id} - Get an order (public, confirmation page)
- POST /api/orders - Place an order
- PUT /api/orders/{order_id} - Update an order, usually its status (admin)
- DELETE /api/orders/{order_id} - Delete an order (admin)
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import Response

from foodmenu.routers.deps import AdminOnly, NotifierDep, StorageDep
from foodmenu.schemas import Order, OrderCreate, OrderStatusEnum, OrderUpdate, SuccessResponse
from foodmenu.services.excel_manager import ExcelManager
from foodmenu.services.orders import create_order
from foodmenu.storage.base import DuplicateEntityError

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Order not found"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("", response_model=list[Order], summary="List orders")
async def list_orders(
    storage: StorageDep,
    admin: AdminOnly,
    status_filter: Optional[OrderStatusEnum] = Query(None, alias="status"),
) -> list[Order]:
    """All orders, newest first, optionally filtered by status."""
    return await storage.orders.get_all(status=status_filter)


@router.get(
    "/export",
    response_class=Response,
    summary="Export orders to Excel",
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}},
)
async def export_orders(storage: StorageDep, admin: AdminOnly) -> Response:
    orders = await storage.orders.get_all()
    content = await asyncio.to_thread(ExcelManager.build_orders_workbook, orders)

    filename = f"orders-{datetime.now(timezone.utc):%Y%m%d-%H%M%S}.xlsx"
    logger.info(f"Admin '{admin.username}' exported {len(orders)} orders")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/restaurant/{restaurant_id}",
    response_model=list[Order],
    summary="List a restaurant's orders",
)
async def list_orders_by_restaurant(
    restaurant_id: str,
    storage: StorageDep,
    admin: AdminOnly,
) -> list[Order]:
    return await storage.orders.get_by_restaurant(restaurant_id)


@router.get("/{order_id}", response_model=Order, summary="Get order details")
async def get_order(order_id: str, storage: StorageDep) -> Order:
    order = await storage.orders.get_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return order


@router.post(
    "",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
)
async def place_order(
    data: OrderCreate,
    storage: StorageDep,
    notifier: NotifierDep,
) -> Order:
    """
    Store an order, notify staff and queue the ledger export.

    A missing total_amount is computed from the items.
    """
    logger.info(f"Creating order for: {data.customer_name}")
    try:
        return await create_order(storage, data, notifier)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.put("/{order_id}", response_model=Order, summary="Update an order")
async def update_order(
    order_id: str,
    data: OrderUpdate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Order:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    order = await storage.orders.update(order_id, changes)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' updated order #{order_id}: {changes}")
    return order


@router.delete("/{order_id}", response_model=SuccessResponse, summary="Delete an order")
async def delete_order(
    order_id: str,
    storage: StorageDep,
    admin: AdminOnly,
) -> SuccessResponse:
    if not await storage.orders.delete(order_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' deleted order #{order_id}")
    return SuccessResponse()
