import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database.base import Base

class StandardColor(Base):
    __tablename__ = "standard_colors"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    name = Column(String, nullable=False)
    hex_code = Column(String(7), nullable=False, index=True)
    display_order = Column(Integer, default=0)

    def __repr__(self):
        return f"<StandardColor(name={self.name}, hex_code={self.hex_code})>"

class ProductColor(Base):
    """Links a product to either a standard color or a custom hex override."""
    __tablename__ = "product_colors"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    color_id = Column(String, ForeignKey("standard_colors.id"), nullable=True)
    custom_hex_code = Column(String(7), nullable=True)
    position = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(
            "(color_id IS NULL) <> (custom_hex_code IS NULL)",
            name="ck_product_colors_one_source"
        ),
    )

    product = relationship("Product", back_populates="color_links")
    standard_color = relationship("StandardColor", lazy="joined")

    def __repr__(self):
        return f"<ProductColor(product_id={self.product_id}, color_id={self.color_id}, custom_hex_code={self.custom_hex_code})>"
