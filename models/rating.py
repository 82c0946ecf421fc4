import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship, Session
from database.base import Base

class Rating(Base):
    __tablename__ = "ratings"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False, unique=True)
    product_id = Column(String, ForeignKey("products.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    order = relationship("Order", back_populates="rating")
    product = relationship("Product", back_populates="ratings")

    def __repr__(self):
        return f"<Rating(id={self.id}, order_id={self.order_id}, product_id={self.product_id}, rating={self.rating})>"

    @classmethod
    def get_product_average_rating(cls, db: Session, product_id: str):
        """Calculate average rating and count for a product"""
        result = db.query(
            func.avg(cls.rating).label('average'),
            func.count(cls.id).label('total')
        ).filter(
            cls.product_id == product_id
        ).first()

        return {
            'average_rating': round(float(result.average), 2) if result.average is not None else None,
            'ratings_count': result.total or 0
        }
