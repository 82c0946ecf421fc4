from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

# Rating Schemas
class RatingCreate(BaseModel):
    order_id: Optional[str] = Field(None, alias="orderId")
    product_id: Optional[str] = Field(None, alias="productId")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, max_length=2000, description="Optional review text")

    class Config:
        populate_by_name = True

class RatingResponse(BaseModel):
    id: str
    order_id: str
    product_id: str
    rating: int
    comment: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ProductRatingStats(BaseModel):
    average_rating: Optional[float]
    ratings_count: int
