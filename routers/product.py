from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database.connection import get_db
from core.response import pagination_meta
from services.product import (
    create_product,
    get_seller_product,
    list_seller_products,
    update_product,
    update_product_status,
    delete_product,
    batch_update_status,
    batch_set_archived,
    set_product_archived,
    batch_delete_products,
    serialize_product
)
from services.options import get_product_options
from schemas.color import ProductOptionsResponse
from schemas.product import (
    ProductCreate, ProductUpdate, ProductStatusUpdate, ProductDetailResponse, ProductResponse,
    ProductListResponse, ProductIdsRequest, BatchStatusRequest, BatchArchiveRequest, ArchiveRequest
)
from models.seller import Seller
from routers.auth import get_current_seller

logger = logging.getLogger(__name__)

router = APIRouter()

# Fixed paths are registered before /{product_id} so they are not captured by it

@router.get("/options", response_model=ProductOptionsResponse)
def get_options(
    size_category_id: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Size categories, sizes for one category and standard colors for the product form"""
    return get_product_options(db, size_category_id)

@router.patch("/batch-status")
def batch_status(
    request: BatchStatusRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    return batch_update_status(db, seller.id, request.product_ids, request.status)

@router.post("/batch-archive")
def batch_archive(
    request: BatchArchiveRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    return batch_set_archived(db, seller.id, request.product_ids, request.action)

@router.post("/archive")
def archive_product(
    request: ArchiveRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """Archive or restore one product"""
    return set_product_archived(db, seller.id, request.product_id, request.action)

@router.delete("/batch-delete")
def batch_delete(
    request: ProductIdsRequest,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """Delete products without orders; archive the ones customers have ordered"""
    return batch_delete_products(db, seller.id, request.product_ids)

@router.get("", response_model=ProductListResponse)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """Seller's products, newest first"""
    products, total = list_seller_products(
        db=db,
        seller_id=seller.id,
        page=page,
        limit=limit,
        status=status,
        search=search
    )

    return ProductListResponse(
        products=[ProductResponse.from_orm(p) for p in products],
        pagination=pagination_meta(page, limit, total)
    )

@router.post("", response_model=ProductDetailResponse, status_code=status.HTTP_201_CREATED)
def create_seller_product(
    product_data: ProductCreate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product = create_product(db=db, product_data=product_data, seller_id=seller.id)
    return serialize_product(db, product)

@router.get("/{product_id}", response_model=ProductDetailResponse)
def get_product(
    product_id: str,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product = get_seller_product(db, product_id, seller.id)
    return serialize_product(db, product)

@router.patch("/{product_id}", response_model=ProductDetailResponse)
def patch_product(
    product_id: str,
    product_data: ProductUpdate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product = update_product(db=db, product_id=product_id, product_data=product_data, seller_id=seller.id)
    return serialize_product(db, product)

@router.patch("/{product_id}/status", response_model=ProductResponse)
def patch_product_status(
    product_id: str,
    request: ProductStatusUpdate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product = update_product_status(db, product_id, seller.id, request.status)
    return ProductResponse.from_orm(product)

@router.delete("/{product_id}")
def remove_product(
    product_id: str,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """Delete the product, or archive it when it has orders"""
    return delete_product(db=db, product_id=product_id, seller_id=seller.id)
