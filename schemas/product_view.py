from typing import Dict, Optional
from pydantic import BaseModel

class ProductViewCreate(BaseModel):
    product_id: Optional[str] = None

class ViewCountResponse(BaseModel):
    count: int

class ProductViewStats(BaseModel):
    productId: str
    title: str
    viewCount: Dict[str, int]
