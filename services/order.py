from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from core.exceptions import (
    AuthorizationError, BusinessLogicError, ResourceNotFoundError, UpstreamError
)
from models.order import Order, OrderStatus
from models.product import Product
from schemas.order import (
    OrderCreate, OrderExportRequest, OrderExportRow, OrderProductSummary,
    OrderResponse, OrderWithProduct
)

logger = logging.getLogger(__name__)

def parse_order_status(value: Optional[str]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise BusinessLogicError("Invalid status")

def validate_order_quantity(product: Product, quantity: int):
    """Check a requested quantity against the product's order limits and stock, in that order."""
    if quantity < product.min_order_quantity:
        raise BusinessLogicError(f"Minimum order quantity is {product.min_order_quantity}")

    if product.max_order_quantity is not None and quantity > product.max_order_quantity:
        raise BusinessLogicError(f"Maximum order quantity is {product.max_order_quantity}")

    if quantity > product.quantity:
        raise BusinessLogicError(f"Only {product.quantity} items available in stock")

def decrement_stock(db: Session, product_id: str, quantity: int):
    """
    Take quantity units out of stock.

    The update only matches while enough stock remains, so two concurrent
    orders can never drive stock negative; the loser gets a 400.
    """
    updated = db.query(Product).filter(
        Product.id == product_id,
        Product.quantity >= quantity
    ).update(
        {Product.quantity: Product.quantity - quantity, Product.updated_at: datetime.utcnow()},
        synchronize_session=False
    )

    if updated != 1:
        logger.warning(f"Stock decrement of {quantity} failed for product {product_id}")
        raise BusinessLogicError("Not enough stock left to fulfil this order")

def serialize_order(order: Order) -> OrderWithProduct:
    summary = OrderProductSummary.from_orm(order.product) if order.product else None
    return OrderWithProduct(**OrderResponse.from_orm(order).model_dump(), products=summary)

def create_order(db: Session, order_data: OrderCreate, user_id: Optional[str] = None) -> Order:
    """
    Place an order from a landing page.

    The order row and the stock decrement share one transaction: if the
    decrement does not go through, the order is rolled back with it.
    """
    product = db.query(Product).filter(Product.id == order_data.product_id).first()
    if not product:
        raise ResourceNotFoundError("Product", order_data.product_id, message="Product not found")

    if not product.is_public:
        logger.info(f"Order attempt on unavailable product {product.id}")
        raise AuthorizationError("Product is not available for ordering")

    validate_order_quantity(product, order_data.quantity)

    order = Order(
        product_id=product.id,
        user_id=user_id,
        full_name=order_data.full_name,
        email=order_data.email,
        phone=order_data.phone,
        shipping_address=order_data.shipping_address,
        notes=order_data.notes,
        quantity=order_data.quantity,
        size=order_data.size,
        color=order_data.color,
        total_amount=product.price * order_data.quantity,
        currency=product.currency,
        status=OrderStatus.PENDING
    )

    try:
        db.add(order)
        db.flush()
        decrement_stock(db, product.id, order_data.quantity)
        db.commit()
    except BusinessLogicError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating order for product {product.id}: {str(e)}")
        raise UpstreamError("Failed to create order")

    db.refresh(order)
    logger.info(f"Order created: {order.id} for product {product.id} (quantity {order.quantity})")
    return order

def list_seller_orders(db: Session, seller_id: str, product_id: Optional[str] = None) -> List[Order]:
    query = db.query(Order).join(Product, Order.product_id == Product.id).options(
        joinedload(Order.product)
    ).filter(Product.seller_id == seller_id)

    if product_id:
        query = query.filter(Order.product_id == product_id)

    return query.order_by(desc(Order.created_at)).all()

def get_seller_order(db: Session, order_id: str, seller_id: str) -> Order:
    """Order whose product belongs to the seller: 404 when missing, 403 when someone else's."""
    order = db.query(Order).options(joinedload(Order.product)).filter(Order.id == order_id).first()
    if not order:
        raise ResourceNotFoundError("Order", order_id, message="Order not found")

    if not order.product or order.product.seller_id != seller_id:
        logger.warning(f"Seller {seller_id} tried to access order {order_id} of another seller")
        raise AuthorizationError("Unauthorized to access this order")

    return order

def update_order_status(db: Session, order_id: str, seller_id: str, status: Optional[str]) -> Order:
    order = get_seller_order(db, order_id, seller_id)
    new_status = parse_order_status(status)

    try:
        order.status = new_status
        db.commit()
        db.refresh(order)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating status of order {order_id}: {str(e)}")
        raise UpstreamError("Failed to update order status")

    logger.info(f"Order {order_id} status set to {new_status.value} by seller {seller_id}")
    return order

def _owned_order_ids(db: Session, seller_id: str, order_ids: List[str]) -> List[str]:
    owned = {
        order_id for (order_id,) in
        db.query(Order.id).join(Product, Order.product_id == Product.id).filter(
            Order.id.in_(order_ids),
            Product.seller_id == seller_id
        ).all()
    }
    return [order_id for order_id in dict.fromkeys(order_ids) if order_id in owned]

def batch_update_order_status(db: Session, seller_id: str, order_ids: Optional[List[str]], status: Optional[str]) -> dict:
    if not order_ids:
        raise BusinessLogicError("Invalid order IDs")
    new_status = parse_order_status(status)

    valid_ids = _owned_order_ids(db, seller_id, order_ids)
    if not valid_ids:
        raise BusinessLogicError("No valid orders found")

    try:
        db.query(Order).filter(Order.id.in_(valid_ids)).update(
            {Order.status: new_status, Order.updated_at: datetime.utcnow()},
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in batch order status update for seller {seller_id}: {str(e)}")
        raise UpstreamError("Failed to update orders")

    orders = db.query(Order).filter(Order.id.in_(valid_ids)).all()
    logger.info(f"Seller {seller_id} set {len(orders)} orders to {new_status.value}")

    return {
        "message": f"Successfully updated {len(orders)} orders to {new_status.value}",
        "updatedOrders": [OrderResponse.from_orm(o) for o in orders],
        "updatedCount": len(orders)
    }

def export_orders(db: Session, seller_id: str, export_request: OrderExportRequest) -> List[OrderExportRow]:
    """Flatten the seller's orders into export rows, optionally filtered by ids, date range and status."""
    query = db.query(Order).join(Product, Order.product_id == Product.id).options(
        joinedload(Order.product)
    ).filter(Product.seller_id == seller_id)

    if export_request.order_ids:
        query = query.filter(Order.id.in_(export_request.order_ids))

    date_range = export_request.date_range
    if date_range and date_range.from_:
        query = query.filter(Order.created_at >= date_range.from_)
    if date_range and date_range.to:
        query = query.filter(Order.created_at <= date_range.to)

    if export_request.status and export_request.status != "all":
        query = query.filter(Order.status == parse_order_status(export_request.status))

    orders = query.order_by(desc(Order.created_at)).all()
    if not orders:
        raise ResourceNotFoundError("Order", seller_id, message="No orders found")

    logger.info(f"Seller {seller_id} exported {len(orders)} orders")
    return [
        OrderExportRow(
            order_id=order.id,
            order_date=order.created_at,
            customer_name=order.full_name,
            customer_email=order.email,
            product_title=order.product.title,
            product_template=order.product.template_type.value,
            quantity=order.quantity,
            status=order.status.value,
            total_amount=float(order.total_amount),
            currency=order.currency,
            shipping_address=order.shipping_address,
            notes=order.notes or "",
            updated_at=order.updated_at
        )
        for order in orders
    ]
