from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from database.connection import get_db
from core.response import success_response
from models.seller import Seller
from routers.auth import get_current_seller
from schemas.seller import SettingsResponse, SettingsUpdateRequest
from services.settings import build_settings_response, get_or_create_settings, update_settings

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=SettingsResponse)
def get_settings(seller: Seller = Depends(get_current_seller), db: Session = Depends(get_db)):
    """Profile and store settings; defaults are created on first read"""
    seller_settings = get_or_create_settings(db, seller)
    return build_settings_response(seller, seller_settings)

@router.put("")
def put_settings(
    update: SettingsUpdateRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    result = update_settings(db, seller, update)
    return success_response(data=result.model_dump(mode="json"), message="Settings updated successfully")
