from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from models.product import ProductStatus, TemplateType, ProductType
from schemas.color import ColorInput, ColorDescriptor

class ProductBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100, description="Product title")
    description: str = Field(..., min_length=1, max_length=1000, description="Product description")
    price: Decimal = Field(..., ge=0, description="Price must be non-negative")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    status: ProductStatus = ProductStatus.DRAFT
    template_type: TemplateType = TemplateType.STANDARD
    product_type: ProductType = ProductType.OTHER
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    features: List[str] = Field(default_factory=list)
    size_category_id: Optional[str] = None
    sizes: Optional[List[str]] = None
    quantity: int = Field(default=0, ge=0, description="Stock must be non-negative")
    min_order_quantity: int = Field(default=1, ge=1)
    max_order_quantity: Optional[int] = Field(None, ge=1)

    @validator('title')
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError('Title is required')
        return v.strip()

    @validator('currency')
    def validate_currency(cls, v):
        return v.upper()

    @validator('max_order_quantity')
    def validate_max_order_quantity(cls, v, values):
        minimum = values.get('min_order_quantity')
        if v is not None and minimum is not None and v < minimum:
            raise ValueError('Maximum order quantity cannot be below the minimum order quantity')
        return v

class ProductCreate(ProductBase):
    colors: Optional[List[ColorInput]] = None

class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[ProductStatus] = None
    template_type: Optional[TemplateType] = None
    product_type: Optional[ProductType] = None
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None
    size_category_id: Optional[str] = None
    sizes: Optional[List[str]] = None
    quantity: Optional[int] = Field(None, ge=0)
    min_order_quantity: Optional[int] = Field(None, ge=1)
    max_order_quantity: Optional[int] = Field(None, ge=1)
    colors: Optional[List[ColorInput]] = None

    @validator('title')
    def validate_title(cls, v):
        if v is not None and (not v or not v.strip()):
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v

    @validator('currency')
    def validate_currency(cls, v):
        return v.upper() if v else v

    # Omit a field to leave it alone; these columns cannot be cleared
    @validator('title', 'price', 'currency', 'status', 'template_type', 'product_type',
               'quantity', 'min_order_quantity')
    def reject_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v

class ProductStatusUpdate(BaseModel):
    status: str

class ProductResponse(BaseModel):
    id: str
    seller_id: str
    title: str
    description: Optional[str]
    price: float
    currency: str
    status: ProductStatus
    template_type: TemplateType
    product_type: ProductType
    image_url: Optional[str]
    images: Optional[List[str]] = []
    features: Optional[List[str]] = []
    slug: str
    sizes: Optional[List[str]] = []
    size_category_id: Optional[str]
    quantity: int
    min_order_quantity: int
    max_order_quantity: Optional[int]
    is_deleted: bool
    average_rating: Optional[float]
    ratings_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ProductDetailResponse(ProductResponse):
    colors: List[ColorDescriptor] = []

class PublicProductResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    price: float
    currency: str
    status: ProductStatus
    template_type: TemplateType
    image_url: Optional[str]
    images: Optional[List[str]] = []
    features: Optional[List[str]] = []
    slug: str
    sizes: Optional[List[str]] = []
    quantity: int
    min_order_quantity: int
    max_order_quantity: Optional[int]
    average_rating: Optional[float]
    ratings_count: int
    colors: List[ColorDescriptor] = []

    class Config:
        from_attributes = True

class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    pagination: dict

# Bulk and archive operations take camelCase bodies from the dashboard
class ProductIdsRequest(BaseModel):
    product_ids: Optional[List[str]] = Field(None, alias="productIds")

    class Config:
        populate_by_name = True

class BatchStatusRequest(ProductIdsRequest):
    status: Optional[str] = None

class BatchArchiveRequest(ProductIdsRequest):
    action: Optional[str] = None

class ArchiveRequest(BaseModel):
    product_id: Optional[str] = Field(None, alias="productId")
    action: Optional[str] = None

    class Config:
        populate_by_name = True
