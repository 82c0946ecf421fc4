import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import UpstreamError
from models.seller import Seller, SellerSettings
from schemas.seller import SellerResponse, SellerSettingsResponse, SettingsResponse, SettingsUpdateRequest

logger = logging.getLogger(__name__)

def get_or_create_settings(db: Session, seller: Seller) -> SellerSettings:
    if seller.settings:
        return seller.settings

    seller_settings = SellerSettings(seller_id=seller.id, contact_email=seller.email)
    try:
        db.add(seller_settings)
        db.commit()
        db.refresh(seller_settings)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating settings for seller {seller.id}: {str(e)}")
        raise UpstreamError("Failed to load settings")

    logger.info(f"Created default settings for seller {seller.id}")
    return seller_settings

def build_settings_response(seller: Seller, seller_settings: SellerSettings) -> SettingsResponse:
    return SettingsResponse(
        profile=SellerResponse.from_orm(seller),
        settings=SellerSettingsResponse.from_orm(seller_settings)
    )

def update_settings(db: Session, seller: Seller, update: SettingsUpdateRequest) -> SettingsResponse:
    """Apply the fields present in the request to the seller profile and settings"""
    seller_settings = get_or_create_settings(db, seller)

    profile_changes = update.profile.model_dump(exclude_unset=True) if update.profile else {}
    settings_changes = update.settings.model_dump(exclude_unset=True) if update.settings else {}

    try:
        for field, value in profile_changes.items():
            setattr(seller, field, value)
        for field, value in settings_changes.items():
            setattr(seller_settings, field, value)
        db.commit()
        db.refresh(seller)
        db.refresh(seller_settings)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating settings for seller {seller.id}: {str(e)}")
        raise UpstreamError("Failed to update settings")

    logger.info(
        f"Seller {seller.id} updated settings: {', '.join(list(profile_changes) + list(settings_changes)) or 'nothing'}"
    )
    return build_settings_response(seller, seller_settings)
