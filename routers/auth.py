from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database.connection import get_db
from services.auth import (
    authenticate_seller,
    create_seller,
    issue_session_token,
    verify_token,
    update_last_login,
    get_seller_by_id
)
from schemas.seller import SellerLogin, SellerRegister, SellerResponse, Token
from models.seller import Seller
from core.config import settings
from core.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

def _session_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Session cookie first, then an Authorization: Bearer header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None

# Dependency to get current seller
def get_current_seller(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Seller:
    """Seller behind the session; 401 without a valid session, 403 for deactivated accounts."""
    token = _session_token(request, credentials)
    if not token:
        raise AuthenticationError("Unauthorized")

    token_data = verify_token(token)
    if token_data is None:
        raise AuthenticationError("Could not validate credentials")

    seller = get_seller_by_id(db, token_data.seller_id)
    if seller is None:
        logger.warning(f"Token valid but seller not found: {token_data.email}")
        raise AuthenticationError("Seller not found")

    if not seller.is_active:
        logger.warning(f"Token valid but seller inactive: {token_data.email}")
        raise AuthorizationError("Account is inactive")

    request.state.seller_id = seller.id
    return seller

def get_optional_seller(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[Seller]:
    token = _session_token(request, credentials)
    if not token:
        return None

    token_data = verify_token(token)
    if token_data is None:
        return None

    seller = get_seller_by_id(db, token_data.seller_id)
    if seller is None or not seller.is_active:
        return None
    request.state.seller_id = seller.id
    return seller

def _set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production
    )

@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(seller_data: SellerRegister, response: Response, db: Session = Depends(get_db)):
    """Register a new seller and open a session for them."""
    logger.info(f"Registration attempt for email: {seller_data.email}")

    seller = create_seller(
        db=db,
        email=seller_data.email,
        password=seller_data.password,
        full_name=seller_data.full_name
    )

    access_token = issue_session_token(seller)
    _set_session_cookie(response, access_token)

    logger.info(f"Seller registered successfully: {seller.email}")
    return Token(access_token=access_token, seller=SellerResponse.from_orm(seller))

@router.post("/login", response_model=Token)
def login(credentials: SellerLogin, response: Response, db: Session = Depends(get_db)):
    """Verify credentials and issue a session token, as a cookie and in the body."""
    logger.info(f"Login attempt for email: {credentials.email}")

    seller = authenticate_seller(db, credentials.email, credentials.password)
    if not seller:
        raise AuthenticationError("Incorrect email or password")

    update_last_login(db, seller)

    access_token = issue_session_token(seller)
    _set_session_cookie(response, access_token)

    logger.info(f"Seller logged in successfully: {seller.email}")
    return Token(access_token=access_token, seller=SellerResponse.from_orm(seller))

@router.post("/signout")
def signout(response: Response, seller: Optional[Seller] = Depends(get_optional_seller)):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    if seller:
        logger.info(f"Seller signed out: {seller.email}")
    return {"message": "Signed out successfully"}

@router.get("/me", response_model=SellerResponse)
def get_current_seller_info(seller: Seller = Depends(get_current_seller)):
    return SellerResponse.from_orm(seller)
