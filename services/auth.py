from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from models.seller import Seller
from schemas.seller import TokenData
from core.config import settings
from core.exceptions import BusinessLogicError
import logging

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT settings
ALGORITHM = "HS256"
TOKEN_ISSUER = "storefront"

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token for a seller."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "iat": datetime.utcnow(),
        "iss": TOKEN_ISSUER,
        "type": "access"
    })

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    logger.info(f"Access token created for seller: {data.get('sub')}")

    return encoded_jwt

def verify_token(token: str) -> Optional[TokenData]:
    """Decode a session token; returns None for anything that does not verify."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=TOKEN_ISSUER
        )
        email: str = payload.get("sub")
        seller_id: str = payload.get("seller_id")

        if email is None or seller_id is None:
            logger.warning("Token missing required claims")
            return None

        return TokenData(email=email, seller_id=seller_id)

    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        return None

def get_seller_by_email(db: Session, email: str) -> Optional[Seller]:
    email = email.lower().strip()
    return db.query(Seller).filter(Seller.email == email).first()

def get_seller_by_id(db: Session, seller_id: str) -> Optional[Seller]:
    return db.query(Seller).filter(Seller.id == seller_id).first()

def authenticate_seller(db: Session, email: str, password: str) -> Optional[Seller]:
    """Authenticate a seller with email and password."""
    email = email.lower().strip()

    seller = get_seller_by_email(db, email)
    if not seller:
        logger.warning(f"Authentication attempt with non-existent email: {email}")
        return None

    if not seller.is_active:
        logger.warning(f"Authentication attempt with inactive seller: {email}")
        return None

    if not verify_password(password, seller.password_hash):
        logger.warning(f"Authentication attempt with invalid password for seller: {email}")
        return None

    logger.info(f"Successful authentication for seller: {email}")
    return seller

def create_seller(db: Session, email: str, password: str, full_name: Optional[str] = None) -> Seller:
    """Create a new seller account."""
    if get_seller_by_email(db, email):
        logger.warning(f"Attempt to create seller with existing email: {email}")
        raise BusinessLogicError("Seller with this email already exists")

    seller = Seller(
        email=email.lower().strip(),
        password_hash=get_password_hash(password),
        full_name=full_name,
        is_active=True
    )

    try:
        db.add(seller)
        db.commit()
        db.refresh(seller)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error creating seller {email}: {str(e)}")
        raise BusinessLogicError("Seller with this email already exists")

    logger.info(f"Seller created successfully: {seller.email}")
    return seller

def issue_session_token(seller: Seller) -> str:
    return create_access_token(data={"sub": seller.email, "seller_id": seller.id})

def update_last_login(db: Session, seller: Seller):
    seller.last_login = datetime.utcnow()
    db.commit()
    db.refresh(seller)
    logger.info(f"Updated last login for seller: {seller.email}")
