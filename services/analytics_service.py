import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import (
    AuthorizationError, BusinessLogicError, ResourceNotFoundError, UpstreamError
)
from models.product import Product
from models.product_view import ProductView
from schemas.product_view import ProductViewStats

logger = logging.getLogger(__name__)

# Look-back window per period; "all" has no lower bound
VIEW_PERIODS: Dict[str, Optional[timedelta]] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "all": None,
}

class AnalyticsService:
    """
    Product page view tracking and the seller-facing view counts built on it.
    """

    def record_view(
        self,
        db: Session,
        product_id: Optional[str],
        viewer_id: Optional[str] = None,
        session_id: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
        ip_address: Optional[str] = None
    ) -> ProductView:
        if not product_id:
            raise BusinessLogicError("Product ID is required")

        if not db.query(Product.id).filter(Product.id == product_id).first():
            raise ResourceNotFoundError("Product", product_id, message="Product not found")

        view = ProductView(
            product_id=product_id,
            viewer_id=viewer_id,
            session_id=None if viewer_id else session_id,
            user_agent=user_agent,
            referrer=referrer,
            ip_address=ip_address
        )

        try:
            db.add(view)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to record view for product {product_id}: {str(e)}")
            raise UpstreamError("Failed to record view")

        logger.info(f"Recorded view of product {product_id} ({'seller ' + viewer_id if viewer_id else 'anonymous'})")
        return view

    def count_views(self, db: Session, product_id: str, period: str = "all", now: Optional[datetime] = None) -> int:
        if period not in VIEW_PERIODS:
            raise BusinessLogicError(
                f"Invalid period. Must be one of: {', '.join(VIEW_PERIODS)}"
            )

        query = db.query(func.count(ProductView.id)).filter(ProductView.product_id == product_id)

        window = VIEW_PERIODS[period]
        if window is not None:
            since = (now or datetime.utcnow()) - window
            query = query.filter(ProductView.viewed_at >= since)

        return query.scalar() or 0

    def get_view_count(self, db: Session, product_id: Optional[str], period: str = "all") -> int:
        """View count of an existing product over one period"""
        if not product_id:
            raise BusinessLogicError("Product ID is required")

        if period not in VIEW_PERIODS:
            raise BusinessLogicError(
                f"Invalid period. Must be one of: {', '.join(VIEW_PERIODS)}"
            )

        if not db.query(Product.id).filter(Product.id == product_id).first():
            raise ResourceNotFoundError("Product", product_id, message="Product not found")

        return self.count_views(db, product_id, period)

    def get_seller_view_stats(self, db: Session, seller_id: str, product_id: Optional[str] = None) -> List[ProductViewStats]:
        """
        View counts for every period, per product of the seller.
        With product_id, only that product; it must belong to the seller.
        """
        if product_id:
            product = db.query(Product).filter(Product.id == product_id).first()
            if not product:
                raise ResourceNotFoundError("Product", product_id, message="Product not found")
            if product.seller_id != seller_id:
                logger.warning(f"Seller {seller_id} requested view stats of product {product_id} they do not own")
                raise AuthorizationError("You do not have permission to view analytics for this product")
            products = [product]
        else:
            products = db.query(Product).filter(
                Product.seller_id == seller_id,
                Product.is_deleted == False
            ).order_by(Product.created_at.desc()).all()

        now = datetime.utcnow()
        return [
            ProductViewStats(
                productId=product.id,
                title=product.title,
                viewCount={period: self.count_views(db, product.id, period, now) for period in VIEW_PERIODS}
            )
            for product in products
        ]

# Global analytics service instance
analytics_service = AnalyticsService()
