from datetime import datetime
from typing import List, Optional, Tuple
import logging
import re
import secrets
import string

from sqlalchemy import and_, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import (
    AuthorizationError, BusinessLogicError, ResourceNotFoundError, UpstreamError
)
from models.color import ProductColor
from models.order import Order
from models.product import Product, ProductStatus
from schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductDetailResponse, PublicProductResponse
)
from services.color import replace_product_colors, resolve_product_colors

logger = logging.getLogger(__name__)

SLUG_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SLUG_SUFFIX_LENGTH = 10
ARCHIVE_ACTIONS = ("archive", "unarchive")

def slugify(value: str) -> str:
    """URL-friendly form of a title: lowercase words joined by single hyphens"""
    value = value.lower().strip()
    value = re.sub(r'[^\w\s-]', '', value)
    value = re.sub(r'[\s_-]+', '-', value)
    return value.strip('-')

def generate_slug_suffix() -> str:
    return ''.join(secrets.choice(SLUG_SUFFIX_ALPHABET) for _ in range(SLUG_SUFFIX_LENGTH))

def build_slug(title: str, suffix: Optional[str] = None) -> str:
    base = slugify(title)
    suffix = suffix or generate_slug_suffix()
    return f"{base}-{suffix}" if base else suffix

def parse_product_status(value: Optional[str]) -> ProductStatus:
    try:
        return ProductStatus(value)
    except ValueError:
        raise BusinessLogicError("Invalid status")

def _unique(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))

def _require_ids(product_ids: Optional[List[str]]) -> List[str]:
    if not product_ids:
        raise BusinessLogicError("Invalid product IDs")
    return _unique(product_ids)

# Serialization

def serialize_product(db: Session, product: Product) -> ProductDetailResponse:
    colors = resolve_product_colors(db, product.id, legacy_colors=product.colors)
    return ProductDetailResponse(**ProductResponse.from_orm(product).model_dump(), colors=colors)

def serialize_public_product(db: Session, product: Product) -> PublicProductResponse:
    colors = resolve_product_colors(db, product.id, legacy_colors=product.colors)
    # products.colors holds the legacy array, so the descriptors are passed in explicitly
    fields = ProductResponse.from_orm(product).model_dump(
        include=set(PublicProductResponse.model_fields) - {"colors"}
    )
    return PublicProductResponse(**fields, colors=colors)

# Reads

def get_seller_product(db: Session, product_id: str, seller_id: str) -> Product:
    """Product owned by the seller; anything else is reported as not found."""
    product = db.query(Product).filter(
        and_(Product.id == product_id, Product.seller_id == seller_id)
    ).first()

    if not product:
        raise ResourceNotFoundError("Product", product_id, message="Product not found or unauthorized")

    return product

def list_seller_products(
    db: Session,
    seller_id: str,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    search: Optional[str] = None
) -> Tuple[List[Product], int]:
    query = db.query(Product).filter(Product.seller_id == seller_id)

    if status:
        query = query.filter(Product.status == parse_product_status(status))
    if search:
        query = query.filter(Product.title.ilike(f"%{search}%"))

    total = query.count()
    products = query.order_by(desc(Product.created_at)).offset((page - 1) * limit).limit(limit).all()
    return products, total

def filter_owned_product_ids(
    db: Session,
    seller_id: str,
    product_ids: List[str],
    include_archived: bool = True
) -> List[str]:
    """Subset of product_ids owned by the seller, in request order."""
    query = db.query(Product.id).filter(
        Product.seller_id == seller_id,
        Product.id.in_(product_ids)
    )
    if not include_archived:
        query = query.filter(Product.is_deleted == False)

    owned = {product_id for (product_id,) in query.all()}
    return [product_id for product_id in _unique(product_ids) if product_id in owned]

def _get_public_product(db: Session, product: Optional[Product], identifier: str) -> PublicProductResponse:
    if not product:
        logger.info(f"Public product '{identifier}' not found")
        raise ResourceNotFoundError("Product", identifier, message="Product not found")

    if not product.is_public:
        logger.info(f"Public product '{identifier}' is not available (status: {product.status.value}, archived: {product.is_deleted})")
        raise AuthorizationError(
            "Product not available",
            details={"status": product.status.value, "archived": product.is_deleted}
        )

    return serialize_public_product(db, product)

def get_public_product_by_slug(db: Session, slug: str) -> PublicProductResponse:
    product = db.query(Product).filter(Product.slug == slug).first()
    return _get_public_product(db, product, slug)

def get_public_product_by_id(db: Session, product_id: str) -> PublicProductResponse:
    product = db.query(Product).filter(Product.id == product_id).first()
    return _get_public_product(db, product, product_id)

# Writes

def create_product(db: Session, product_data: ProductCreate, seller_id: str) -> Product:
    """Create a new product for a seller"""
    slug = build_slug(product_data.title)
    while db.query(Product.id).filter(Product.slug == slug).first():
        slug = build_slug(product_data.title)

    fields = product_data.model_dump(exclude={"colors"})
    product = Product(**fields, seller_id=seller_id, slug=slug)

    try:
        db.add(product)
        db.flush()
        if product_data.colors:
            replace_product_colors(db, product.id, product_data.colors)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating product for seller {seller_id}: {str(e)}")
        raise UpstreamError("Failed to create product")

    logger.info(f"Product created: {product.title} ({product.slug}) by seller {seller_id}")
    return product

def update_product(db: Session, product_id: str, product_data: ProductUpdate, seller_id: str) -> Product:
    """Partial update; colors are replaced only when the field is present."""
    product = get_seller_product(db, product_id, seller_id)

    changes = product_data.model_dump(exclude_unset=True, exclude={"colors"})

    new_title = changes.get("title")
    if new_title and new_title != product.title:
        suffix = product.slug.split('-')[-1]
        changes["slug"] = build_slug(new_title, suffix)

    minimum = changes.get("min_order_quantity", product.min_order_quantity)
    maximum = changes.get("max_order_quantity", product.max_order_quantity)
    if maximum is not None and maximum < minimum:
        raise BusinessLogicError("Maximum order quantity cannot be below the minimum order quantity")

    try:
        for field, value in changes.items():
            setattr(product, field, value)

        if "colors" in product_data.model_fields_set:
            replace_product_colors(db, product.id, product_data.colors or [])

        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating product {product_id}: {str(e)}")
        raise UpstreamError("Failed to update product")

    logger.info(f"Product updated: {product_id} by seller {seller_id} ({', '.join(changes) or 'colors'})")
    return product

def update_product_status(db: Session, product_id: str, seller_id: str, status: Optional[str]) -> Product:
    new_status = parse_product_status(status)
    product = get_seller_product(db, product_id, seller_id)

    try:
        product.status = new_status
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating status of product {product_id}: {str(e)}")
        raise UpstreamError("Failed to update product status")

    logger.info(f"Product {product_id} status set to {new_status.value}")
    return product

def batch_update_status(db: Session, seller_id: str, product_ids: Optional[List[str]], status: Optional[str]) -> dict:
    product_ids = _require_ids(product_ids)
    new_status = parse_product_status(status)

    valid_ids = filter_owned_product_ids(db, seller_id, product_ids, include_archived=False)
    if not valid_ids:
        raise BusinessLogicError("No valid products found")

    try:
        db.query(Product).filter(Product.id.in_(valid_ids)).update(
            {Product.status: new_status, Product.updated_at: datetime.utcnow()},
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in batch status update for seller {seller_id}: {str(e)}")
        raise UpstreamError("Failed to update product status")

    products = db.query(Product).filter(Product.id.in_(valid_ids)).all()
    logger.info(f"Seller {seller_id} set {len(valid_ids)} products to {new_status.value}")

    return {
        "message": f"Successfully updated {len(valid_ids)} products to {new_status.value}",
        "products": [{"id": p.id, "title": p.title, "status": p.status.value} for p in products],
        "updatedCount": len(valid_ids)
    }

def _validate_archive_action(action: Optional[str]) -> str:
    if action not in ARCHIVE_ACTIONS:
        raise BusinessLogicError('Invalid action. Must be either "archive" or "unarchive"')
    return action

def set_product_archived(db: Session, seller_id: str, product_id: Optional[str], action: Optional[str]) -> dict:
    """
    Archive or restore a single product.

    Archiving also deactivates the product; restoring puts it back in draft
    so it does not go live again without the seller's say-so.
    """
    if not product_id:
        raise BusinessLogicError("Product ID is required")
    action = _validate_archive_action(action)

    product = db.query(Product).filter(
        and_(Product.id == product_id, Product.seller_id == seller_id)
    ).first()
    if not product:
        raise ResourceNotFoundError(
            "Product", product_id,
            message="Product not found or you do not have permission to modify it"
        )

    archive = action == "archive"
    if product.is_deleted == archive:
        return {
            "message": "Product already archived" if archive else "Product already active",
            "archived": archive,
            "productId": product_id
        }

    try:
        product.is_deleted = archive
        product.status = ProductStatus.INACTIVE if archive else ProductStatus.DRAFT
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error trying to {action} product {product_id}: {str(e)}")
        raise UpstreamError(f"Failed to {action} product")

    logger.info(f"Product {product_id} {action}d by seller {seller_id}")
    return {
        "message": f"Product {action}d successfully",
        "archived": archive,
        "productId": product_id
    }

def batch_set_archived(db: Session, seller_id: str, product_ids: Optional[List[str]], action: Optional[str]) -> dict:
    product_ids = _require_ids(product_ids)
    if action not in ARCHIVE_ACTIONS:
        raise BusinessLogicError("Invalid action")

    valid_ids = filter_owned_product_ids(db, seller_id, product_ids)
    if not valid_ids:
        raise BusinessLogicError("No valid products found")

    try:
        db.query(Product).filter(Product.id.in_(valid_ids)).update(
            {Product.is_deleted: action == "archive", Product.updated_at: datetime.utcnow()},
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in batch {action} for seller {seller_id}: {str(e)}")
        raise UpstreamError(f"Failed to {action} products")

    products = db.query(Product).filter(Product.id.in_(valid_ids)).all()
    past_tense = "archived" if action == "archive" else "unarchived"
    logger.info(f"Seller {seller_id} {past_tense} {len(valid_ids)} products")

    return {
        "message": f"Successfully {past_tense} {len(valid_ids)} products",
        "products": [ProductResponse.from_orm(p) for p in products]
    }

# Archive/delete reconciliation

def _remove_products(db: Session, product_ids: List[str], deactivate: bool) -> Tuple[List[str], List[str]]:
    """
    Archive every product some order references and hard-delete the rest.

    Both partitions are written in the caller's transaction, so either all
    of it lands or none of it does. Returns (archived_ids, deleted_ids).
    """
    referenced = {
        product_id for (product_id,) in
        db.query(Order.product_id).filter(Order.product_id.in_(product_ids)).distinct().all()
    }
    archive_ids = [product_id for product_id in product_ids if product_id in referenced]
    delete_ids = [product_id for product_id in product_ids if product_id not in referenced]

    if archive_ids:
        values = {Product.is_deleted: True, Product.updated_at: datetime.utcnow()}
        if deactivate:
            values[Product.status] = ProductStatus.INACTIVE
        db.query(Product).filter(Product.id.in_(archive_ids)).update(values, synchronize_session=False)

    if delete_ids:
        db.query(ProductColor).filter(ProductColor.product_id.in_(delete_ids)).delete(synchronize_session=False)
        db.query(Product).filter(Product.id.in_(delete_ids)).delete(synchronize_session=False)

    return archive_ids, delete_ids

def batch_delete_products(db: Session, seller_id: str, product_ids: Optional[List[str]]) -> dict:
    """
    Remove products from circulation, archiving those with order history.

    Ids the seller does not own are dropped without being reported.
    """
    product_ids = _require_ids(product_ids)

    valid_ids = filter_owned_product_ids(db, seller_id, product_ids)
    if not valid_ids:
        raise BusinessLogicError("No valid products found")

    try:
        archived_ids, deleted_ids = _remove_products(db, valid_ids, deactivate=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in batch delete for seller {seller_id}: {str(e)}")
        raise UpstreamError("Failed to delete products")

    logger.info(
        f"Seller {seller_id} batch delete: deleted {len(deleted_ids)}, archived {len(archived_ids)}"
    )
    return {
        "message": f"Processed {len(valid_ids)} products: deleted {len(deleted_ids)}, archived {len(archived_ids)}",
        "deletedIds": deleted_ids,
        "archivedIds": archived_ids,
        "deletedCount": len(deleted_ids),
        "archivedCount": len(archived_ids)
    }

def delete_product(db: Session, product_id: str, seller_id: str) -> dict:
    """Delete one product, or archive and deactivate it when orders reference it"""
    get_seller_product(db, product_id, seller_id)

    try:
        archived_ids, _ = _remove_products(db, [product_id], deactivate=True)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting product {product_id}: {str(e)}")
        raise UpstreamError("Failed to delete product")

    if archived_ids:
        logger.info(f"Product {product_id} has orders, archived instead of deleted")
        return {
            "message": "Product archived successfully due to existing orders",
            "archived": True,
            "deleted": False
        }

    logger.info(f"Product {product_id} deleted by seller {seller_id}")
    return {
        "message": "Product deleted successfully",
        "archived": False,
        "deleted": True
    }
