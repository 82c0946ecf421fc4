from pydantic import BaseModel, EmailStr, validator, Field
from typing import Optional
from datetime import datetime
from models.seller import Theme

# Seller Registration Schema
class SellerRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    full_name: Optional[str] = Field(None, max_length=100)

    @validator('password')
    def validate_password(cls, v):
        if not any(c.isalpha() for c in v):
            raise ValueError('Password must contain at least one letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one digit')
        return v

    @validator('full_name')
    def validate_full_name(cls, v):
        if v is not None:
            return v.strip() or None
        return v

# Seller Login Schema
class SellerLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# Seller Response Schema
class SellerResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str]
    phone: Optional[str]
    bio: Optional[str]
    avatar_url: Optional[str]
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True

# Token Schema
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    seller: SellerResponse

# Token Data Schema
class TokenData(BaseModel):
    email: Optional[str] = None
    seller_id: Optional[str] = None

# Settings
class SellerSettingsResponse(BaseModel):
    store_name: Optional[str]
    store_description: Optional[str]
    contact_email: Optional[str]
    support_phone: Optional[str]
    address: Optional[str]
    logo_url: Optional[str]
    currency: str
    email_notifications: bool
    order_updates: bool
    marketing_emails: bool
    new_sales: bool
    low_stock_alerts: bool
    theme: Theme
    reduced_animations: bool
    compact_mode: bool
    high_contrast_mode: bool
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    bio: Optional[str] = Field(None, max_length=1000)
    avatar_url: Optional[str] = None

class SellerSettingsUpdate(BaseModel):
    store_name: Optional[str] = Field(None, max_length=100)
    store_description: Optional[str] = Field(None, max_length=1000)
    contact_email: Optional[EmailStr] = None
    support_phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)
    logo_url: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    email_notifications: Optional[bool] = None
    order_updates: Optional[bool] = None
    marketing_emails: Optional[bool] = None
    new_sales: Optional[bool] = None
    low_stock_alerts: Optional[bool] = None
    theme: Optional[Theme] = None
    reduced_animations: Optional[bool] = None
    compact_mode: Optional[bool] = None
    high_contrast_mode: Optional[bool] = None

    @validator('currency')
    def validate_currency(cls, v):
        return v.upper() if v else v

class SettingsUpdateRequest(BaseModel):
    profile: Optional[ProfileUpdate] = None
    settings: Optional[SellerSettingsUpdate] = None

class SettingsResponse(BaseModel):
    profile: SellerResponse
    settings: SellerSettingsResponse
