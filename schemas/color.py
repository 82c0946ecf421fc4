from pydantic import BaseModel, Field
from typing import Optional, List

HEX_COLOR_PATTERN = r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$'

class ColorDescriptor(BaseModel):
    """Normalized color as served to landing pages and the dashboard"""
    id: str
    name: str
    hex_code: str
    custom: bool = False

class ColorInput(BaseModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=50)
    hex_code: str = Field(..., pattern=HEX_COLOR_PATTERN, description="Hex color code, e.g. #FF0000")
    custom: bool = False

class StandardColorResponse(BaseModel):
    id: str
    name: str
    hex_code: str
    display_order: int

    class Config:
        from_attributes = True

class SizeCategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True

class StandardSizeResponse(BaseModel):
    id: str
    value: str
    display_order: int

    class Config:
        from_attributes = True

class ProductOptionsResponse(BaseModel):
    sizeCategories: List[SizeCategoryResponse]
    sizes: List[StandardSizeResponse]
    colors: List[StandardColorResponse]
