from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database.connection import get_db
from core.exceptions import BusinessLogicError
from schemas.rating import RatingCreate, RatingResponse
from services.rating import RatingService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
def submit_rating(rating_data: RatingCreate, db: Session = Depends(get_db)):
    """
    Rate an order's product (1-5 stars).

    Submitting again for the same order replaces the earlier rating.
    """
    rating = RatingService.submit_rating(db, rating_data)
    return RatingResponse.from_orm(rating)

@router.get("")
def get_ratings(
    order_id: Optional[str] = Query(None, alias="orderId"),
    product_id: Optional[str] = Query(None, alias="productId"),
    db: Session = Depends(get_db)
):
    """Rating of one order (or null), or a product's rating stats"""
    if order_id:
        rating = RatingService.get_order_rating(db, order_id)
        return {"rating": RatingResponse.from_orm(rating) if rating else None}

    if product_id:
        return RatingService.get_product_rating_stats(db, product_id)

    raise BusinessLogicError("Order ID or product ID is required")
