"""Product stock checks and conditional stock updates."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from livemart.models import Order, Product

logger = logging.getLogger(__name__)


class ProductUnavailableError(Exception):
    """Raised when a product is missing, inactive or soft-deleted."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} is not available")
        self.product_id = product_id


class InsufficientStockError(Exception):
    """Raised when the requested quantity exceeds the product stock."""

    def __init__(self, product_id: int, requested: int, available: int) -> None:
        super().__init__(f"Product {product_id}: requested {requested}, only {available} in stock")
        self.product_id = product_id
        self.requested = requested
        self.available = available


def check_stock(db: Session, product_id: int, quantity: int) -> Product:
    """Return the product if it can be ordered in the given quantity."""
    product: Product | None = db.get(Product, product_id)
    if product is None or product.deleted_at is not None or not product.is_active:
        raise ProductUnavailableError(product_id)
    if quantity > product.stock:
        raise InsufficientStockError(product_id, quantity, product.stock)
    return product


def decrement_stock(db: Session, product_id: int, quantity: int) -> None:
    """Subtract quantity in a single conditional UPDATE.

    The row is only touched while ``stock >= quantity``, so two checkouts racing
    for the last units cannot both succeed. The caller owns the transaction.
    """
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
    )
    if result.rowcount != 1:
        available: int | None = db.scalar(select(Product.stock).where(Product.id == product_id))
        raise InsufficientStockError(product_id, quantity, available or 0)


def restore_stock(db: Session, order: Order) -> None:
    """Give the order's quantities back to their products."""
    for item in order.items:
        if item.product_id is None:
            continue
        db.execute(
            update(Product)
            .where(Product.id == item.product_id)
            .values(stock=Product.stock + item.quantity)
        )
        logger.debug("[STOCK] Restored %s units of product_id=%s from order_id=%s", item.quantity, item.product_id, order.id)


def set_stock(db: Session, product_id: int, stock: int) -> Product:
    """Overwrite stock from a seller's manual inventory edit."""
    if stock < 0:
        raise ValueError("Stock cannot be negative")
    product: Product | None = db.get(Product, product_id)
    if product is None or product.deleted_at is not None:
        raise ProductUnavailableError(product_id)
    product.stock = stock
    db.commit()
    db.refresh(product)
    return product
