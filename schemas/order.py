from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional, List
from datetime import datetime
from models.order import OrderStatus, PaymentStatus

class OrderCreate(BaseModel):
    """Order form submitted from a product landing page"""
    product_id: str = Field(..., alias="productId")
    full_name: str = Field(..., alias="fullName", min_length=2, description="Full name must be at least 2 characters")
    email: EmailStr
    phone: str = Field(..., min_length=10, description="Phone number must be at least 10 digits")
    shipping_address: str = Field(..., alias="shippingAddress", min_length=10)
    notes: Optional[str] = None
    # Bounds are enforced against the product's own order limits
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None

    class Config:
        populate_by_name = True

    @validator('full_name', 'shipping_address')
    def strip_text(cls, v):
        return v.strip()

class OrderResponse(BaseModel):
    id: str
    product_id: str
    user_id: Optional[str]
    full_name: str
    email: str
    phone: str
    shipping_address: str
    notes: Optional[str]
    quantity: int
    size: Optional[str]
    color: Optional[str]
    total_amount: float
    currency: str
    status: OrderStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class OrderProductSummary(BaseModel):
    title: str
    price: float
    currency: str
    seller_id: str
    quantity: int
    min_order_quantity: int
    max_order_quantity: Optional[int]

    class Config:
        from_attributes = True

class OrderWithProduct(OrderResponse):
    products: Optional[OrderProductSummary] = None

class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None

class BatchOrderStatusRequest(BaseModel):
    order_ids: Optional[List[str]] = Field(None, alias="orderIds")
    status: Optional[str] = None

    class Config:
        populate_by_name = True

class DateRange(BaseModel):
    from_: Optional[datetime] = Field(None, alias="from")
    to: Optional[datetime] = None

    class Config:
        populate_by_name = True

class OrderExportRequest(BaseModel):
    order_ids: Optional[List[str]] = Field(None, alias="orderIds")
    date_range: Optional[DateRange] = Field(None, alias="dateRange")
    status: Optional[str] = None

    class Config:
        populate_by_name = True

class OrderExportRow(BaseModel):
    order_id: str
    order_date: datetime
    customer_name: str
    customer_email: str
    product_title: str
    product_template: str
    quantity: int
    status: str
    total_amount: float
    currency: str
    shipping_address: str
    notes: str
    updated_at: datetime
