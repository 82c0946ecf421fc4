import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
from database.base import Base
import enum

class Theme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"

class Seller(Base):
    __tablename__ = "sellers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    products = relationship("Product", back_populates="seller")
    settings = relationship("SellerSettings", uselist=False, back_populates="seller", cascade="all, delete-orphan")

class SellerSettings(Base):
    __tablename__ = "seller_settings"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    seller_id = Column(String, ForeignKey("sellers.id"), nullable=False, unique=True)

    # Store
    store_name = Column(String, nullable=True)
    store_description = Column(Text, nullable=True)
    contact_email = Column(String, nullable=True)
    support_phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    logo_url = Column(String, nullable=True)
    currency = Column(String(3), default="USD")

    # Notifications
    email_notifications = Column(Boolean, default=True)
    order_updates = Column(Boolean, default=True)
    marketing_emails = Column(Boolean, default=False)
    new_sales = Column(Boolean, default=True)
    low_stock_alerts = Column(Boolean, default=True)

    # Appearance
    theme = Column(Enum(Theme), default=Theme.SYSTEM)
    reduced_animations = Column(Boolean, default=False)
    compact_mode = Column(Boolean, default=False)
    high_contrast_mode = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    seller = relationship("Seller", back_populates="settings")
