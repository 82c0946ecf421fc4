from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from database.connection import get_db
from schemas.product import PublicProductResponse
from services.product import get_public_product_by_id, get_public_product_by_slug

logger = logging.getLogger(__name__)

router = APIRouter()

# Landing pages load products without a session; only active, non-archived products are served

@router.get("/products-by-slug/{slug}/public", response_model=PublicProductResponse)
def get_public_product_from_slug(slug: str, db: Session = Depends(get_db)):
    return get_public_product_by_slug(db, slug)

@router.get("/products/{product_id}/public", response_model=PublicProductResponse)
def get_public_product(product_id: str, db: Session = Depends(get_db)):
    return get_public_product_by_id(db, product_id)
