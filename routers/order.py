from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.connection import get_db
from routers.auth import get_current_seller
from models.seller import Seller
from schemas.order import (
    OrderCreate, OrderResponse, OrderWithProduct, OrderStatusUpdate,
    BatchOrderStatusRequest, OrderExportRequest, OrderExportRow
)
from services.order import (
    create_order,
    list_seller_orders,
    get_seller_order,
    update_order_status,
    batch_update_order_status,
    export_orders,
    serialize_order
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=OrderResponse)
def place_order(order_data: OrderCreate, db: Session = Depends(get_db)):
    """Place an order from a public landing page."""
    order = create_order(db, order_data)
    return OrderResponse.from_orm(order)

@router.patch("/batch-status")
def batch_order_status(
    request: BatchOrderStatusRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    return batch_update_order_status(db, seller.id, request.order_ids, request.status)

@router.post("/export", response_model=List[OrderExportRow])
def export_seller_orders(
    request: OrderExportRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """Seller's orders flattened into export rows"""
    return export_orders(db, seller.id, request)

@router.get("", response_model=List[OrderWithProduct])
def get_orders(
    product_id: Optional[str] = Query(None, alias="productId"),
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    orders = list_seller_orders(db, seller.id, product_id)
    return [serialize_order(order) for order in orders]

@router.get("/{order_id}", response_model=OrderWithProduct)
def get_order(
    order_id: str,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    return serialize_order(get_seller_order(db, order_id, seller.id))

@router.put("/{order_id}/status", response_model=OrderResponse)
def put_order_status(
    order_id: str,
    request: OrderStatusUpdate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    order = update_order_status(db, order_id, seller.id, request.status)
    return OrderResponse.from_orm(order)
