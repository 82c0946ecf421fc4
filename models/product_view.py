import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Index
from database.base import Base

class ProductView(Base):
    """
    Append-only page view events for product landing pages.
    product_id carries no foreign key so view history outlives deleted products.
    """
    __tablename__ = "product_views"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    product_id = Column(String, nullable=False, index=True)
    viewer_id = Column(String, nullable=True)
    session_id = Column(String, nullable=True)
    user_agent = Column(Text, nullable=True)
    referrer = Column(Text, nullable=True)
    ip_address = Column(String(100), nullable=True)
    viewed_at = Column(DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        Index('idx_product_views_product_time', 'product_id', 'viewed_at'),
    )
