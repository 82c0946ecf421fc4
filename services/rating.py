from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import BusinessLogicError, ResourceNotFoundError, UpstreamError
from models.order import Order
from models.product import Product
from models.rating import Rating
from schemas.rating import RatingCreate, ProductRatingStats

logger = logging.getLogger(__name__)

class RatingService:

    @staticmethod
    def submit_rating(db: Session, rating_data: RatingCreate) -> Rating:
        """Create or replace the rating attached to an order"""

        if not rating_data.order_id or not rating_data.product_id:
            raise BusinessLogicError("Order ID and product ID are required")

        order = db.query(Order).filter(Order.id == rating_data.order_id).first()
        if not order:
            raise ResourceNotFoundError("Order", rating_data.order_id, message="Order not found")

        if order.product_id != rating_data.product_id:
            raise BusinessLogicError("Order does not match product")

        try:
            rating = db.query(Rating).filter(Rating.order_id == order.id).first()
            if rating:
                rating.rating = rating_data.rating
                rating.comment = rating_data.comment
            else:
                rating = Rating(
                    order_id=order.id,
                    product_id=order.product_id,
                    rating=rating_data.rating,
                    comment=rating_data.comment
                )
                db.add(rating)

            db.commit()
            db.refresh(rating)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error saving rating for order {order.id}: {str(e)}")
            raise UpstreamError("Failed to save rating")

        logger.info(f"Rating {rating.rating} saved for order {order.id}")

        # The rating itself is already stored; stale aggregates are tolerated
        RatingService._update_product_rating_stats(db, order.product_id)

        return rating

    @staticmethod
    def get_order_rating(db: Session, order_id: str) -> Optional[Rating]:
        return db.query(Rating).filter(Rating.order_id == order_id).first()

    @staticmethod
    def get_product_rating_stats(db: Session, product_id: str) -> ProductRatingStats:
        if not db.query(Product.id).filter(Product.id == product_id).first():
            raise ResourceNotFoundError("Product", product_id, message="Product not found")

        return ProductRatingStats(**Rating.get_product_average_rating(db, product_id))

    @staticmethod
    def _update_product_rating_stats(db: Session, product_id: str):
        """Recompute the product's cached average and count; failures are logged, not raised"""

        try:
            stats = Rating.get_product_average_rating(db, product_id)

            product = db.query(Product).filter(Product.id == product_id).first()
            if product:
                product.average_rating = stats['average_rating']
                product.ratings_count = stats['ratings_count']

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating rating stats for product {product_id}: {str(e)}")
