import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Numeric, Integer, Text, JSON, Enum
from sqlalchemy.orm import relationship
from database.base import Base
import enum

class ProductStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"

class TemplateType(str, enum.Enum):
    MINIMAL = "minimal"
    STANDARD = "standard"
    PREMIUM = "premium"

class ProductType(str, enum.Enum):
    CLOTHING = "clothing"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    ELECTRONICS = "electronics"
    OTHER = "other"

class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    seller_id = Column(String, ForeignKey("sellers.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    status = Column(Enum(ProductStatus), default=ProductStatus.DRAFT, nullable=False, index=True)
    template_type = Column(Enum(TemplateType), default=TemplateType.STANDARD, nullable=False)
    product_type = Column(Enum(ProductType), default=ProductType.OTHER, nullable=False)
    image_url = Column(String, nullable=True)
    images = Column(JSON, nullable=True)  # Store array of image URLs
    features = Column(JSON, nullable=True)
    slug = Column(String, unique=True, index=True, nullable=False)
    colors = Column(JSON, nullable=True)  # Deprecated: superseded by product_colors
    sizes = Column(JSON, nullable=True)
    size_category_id = Column(String, ForeignKey("size_categories.id"), nullable=True)
    quantity = Column(Integer, default=0, nullable=False)
    min_order_quantity = Column(Integer, default=1, nullable=False)
    max_order_quantity = Column(Integer, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    average_rating = Column(Numeric(3, 2), nullable=True)
    ratings_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    seller = relationship("Seller", back_populates="products")
    orders = relationship("Order", back_populates="product")
    color_links = relationship("ProductColor", back_populates="product", cascade="all, delete-orphan")
    ratings = relationship("Rating", back_populates="product")

    @property
    def is_public(self) -> bool:
        return self.status == ProductStatus.ACTIVE and not self.is_deleted
