from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session
from typing import Optional
import logging
import uuid

from database.connection import get_db
from core.config import settings
from core.middleware import get_client_ip
from models.seller import Seller
from routers.auth import get_optional_seller
from schemas.product_view import ProductViewCreate, ViewCountResponse
from services.analytics_service import analytics_service

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("")
def record_product_view(
    view: ProductViewCreate,
    request: Request,
    response: Response,
    seller: Optional[Seller] = Depends(get_optional_seller),
    db: Session = Depends(get_db)
):
    """
    Record one landing page view.

    Signed-in sellers are recorded by id. Anonymous visitors get a session
    cookie on their first view so repeat visits can be told apart.
    """
    session_id = None
    new_session = False
    if not seller:
        session_id = request.cookies.get(settings.VIEW_SESSION_COOKIE_NAME)
        if not session_id:
            session_id = str(uuid.uuid4())
            new_session = True

    analytics_service.record_view(
        db,
        product_id=view.product_id,
        viewer_id=seller.id if seller else None,
        session_id=session_id,
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
        ip_address=get_client_ip(request)
    )

    if new_session:
        response.set_cookie(
            key=settings.VIEW_SESSION_COOKIE_NAME,
            value=session_id,
            max_age=settings.VIEW_SESSION_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=settings.is_production
        )

    return {"success": True}

@router.get("/count", response_model=ViewCountResponse)
def get_product_view_count(
    product_id: Optional[str] = Query(None, alias="productId"),
    period: str = Query("all"),
    db: Session = Depends(get_db)
):
    count = analytics_service.get_view_count(db, product_id, period)
    return ViewCountResponse(count=count)
