from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.connection import get_db
from models.seller import Seller
from routers.auth import get_current_seller
from schemas.product_view import ProductViewStats
from services.analytics_service import analytics_service

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/product-views", response_model=List[ProductViewStats])
def get_product_view_stats(
    product_id: Optional[str] = Query(None, alias="productId"),
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """
    Day, week, month and all-time view counts for the seller's products
    """
    return analytics_service.get_seller_view_stats(db, seller.id, product_id)
