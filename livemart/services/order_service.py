"""Checkout, pricing and order reads."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from livemart.core.config import settings
from livemart.models import Order, OrderItem, Product, User
from livemart.services.audit_service import log_action
from livemart.services.order_lifecycle import InvalidTransitionError, OrderNotFoundError, get_order
from livemart.services.order_status import ACTIVE_DELIVERY_STATUSES, PAYMENT_METHODS, status_snapshot
from livemart.services.stock_service import InsufficientStockError, check_stock, decrement_stock, restore_stock
from livemart.utils.time import scheduled_delivery_date, utcnow

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class CheckoutValidationError(Exception):
    """Raised for a checkout request that fails validation before any write."""


class InvalidCouponError(Exception):
    """Raised when a coupon code does not match the configured one."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Coupon {code} is not valid")
        self.code = code


class OrderNumberConflictError(Exception):
    """Raised when a concurrent checkout took the same order number."""

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order number {order_number} is already taken; please retry")
        self.order_number = order_number


def merge_cart_lines(items: list[tuple[int, int]]) -> dict[int, int]:
    """Sum quantities of repeated products, keeping first-seen order."""
    merged: dict[int, int] = {}
    for product_id, quantity in items:
        if quantity < 1:
            raise CheckoutValidationError("Quantity must be >= 1")
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def resolve_discount(coupon_code: str | None, subtotal: Decimal) -> tuple[str | None, Decimal]:
    """Return the normalised coupon and its discount for this subtotal."""
    if coupon_code is None or not coupon_code.strip():
        return None, Decimal("0.00")
    normalized = coupon_code.strip().upper()
    if normalized != settings.coupon_code.strip().upper():
        raise InvalidCouponError(coupon_code)
    discount = (subtotal * settings.coupon_percent / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return normalized, min(discount, subtotal)


def order_total(subtotal: Decimal, delivery_fee: Decimal, discount: Decimal) -> Decimal:
    total = subtotal + delivery_fee - discount
    return max(total, Decimal("0.00")).quantize(CENTS)


def format_order_number(order_date: date, seq: int) -> str:
    return f"ORD-{order_date:%Y%m%d}-{seq:04d}"


def next_order_sequence(db: Session, order_date: date) -> int:
    current: int | None = db.scalar(select(func.max(Order.order_seq)).where(Order.order_date == order_date))
    return (current or 0) + 1


def place_order(
    db: Session,
    *,
    customer: User,
    items: list[tuple[int, int]],
    delivery_address: str,
    phone: str,
    payment_method: str,
    coupon_code: str | None = None,
    now: datetime | None = None,
) -> Order:
    """Create an order with its items and take the stock in one transaction.

    Stock is pre-checked for a clear error and then decremented with a
    conditional UPDATE; if any decrement loses a race the whole order rolls
    back.
    """
    if not items:
        raise CheckoutValidationError("Cart is empty")
    if payment_method not in PAYMENT_METHODS:
        raise CheckoutValidationError(f"Unsupported payment method: {payment_method}")
    if not delivery_address.strip() or not phone.strip():
        raise CheckoutValidationError("Delivery address and phone are required")

    lines = merge_cart_lines(items)
    products: dict[int, Product] = {
        product_id: check_stock(db, product_id, quantity) for product_id, quantity in lines.items()
    }

    subtotal = sum(
        (Decimal(products[product_id].price) * quantity for product_id, quantity in lines.items()),
        Decimal("0.00"),
    ).quantize(CENTS)
    coupon, discount = resolve_discount(coupon_code, subtotal)
    delivery_fee = settings.delivery_fee.quantize(CENTS)

    now = now or utcnow()
    order_date = now.date()
    order_seq = next_order_sequence(db, order_date)
    order_number = format_order_number(order_date, order_seq)

    order = Order(
        order_number=order_number,
        order_seq=order_seq,
        order_date=order_date,
        customer_id=customer.id,
        subtotal_amount=subtotal,
        delivery_fee=delivery_fee,
        discount_amount=discount,
        total_price=order_total(subtotal, delivery_fee, discount),
        coupon_code=coupon,
        delivery_address=delivery_address.strip(),
        phone=phone.strip(),
        payment_method=payment_method,
        payment_status="pending",
        status="pending",
        delivery_status="pending",
        created_at=now,
        delivery_date=scheduled_delivery_date(now, settings.delivery_lead_days, settings.delivery_hour),
        items=[
            OrderItem(
                product_id=product_id,
                product_name=products[product_id].name,
                quantity=quantity,
                unit_price=Decimal(products[product_id].price),
            )
            for product_id, quantity in lines.items()
        ],
    )

    try:
        db.add(order)
        db.flush()
        for product_id, quantity in lines.items():
            decrement_stock(db, product_id, quantity)
        log_action(
            db,
            actor=customer,
            action_type="ORDER_PLACED",
            order_id=order.id,
            after_snapshot=status_snapshot(order),
        )
        db.commit()
    except InsufficientStockError as exc:
        db.rollback()
        logger.warning("[CHECKOUT] Stock ran out during checkout for product_id=%s", exc.product_id)
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("[CHECKOUT] Order number collision on %s", order_number)
        raise OrderNumberConflictError(order_number) from exc

    db.refresh(order)
    logger.info(
        "[CHECKOUT] order_id=%s number=%s placed by user_id=%s total=%s",
        order.id,
        order.order_number,
        customer.id,
        order.total_price,
    )
    return order


def abandon_checkout(db: Session, order_id: int, *, customer: User) -> None:
    """Delete an unpaid online order when the customer leaves the payment step."""
    order = get_order(db, order_id)
    if order.customer_id != customer.id:
        raise OrderNotFoundError(order_id)
    if not (
        order.payment_method == "online"
        and order.payment_status == "pending"
        and order.status == "pending"
        and order.delivery_status == "pending"
    ):
        raise InvalidTransitionError(
            order_id,
            order.status,
            "abandoned",
            reason="only unpaid online orders awaiting payment can be abandoned",
        )

    before = status_snapshot(order)
    restore_stock(db, order)
    db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
    result = db.execute(
        delete(Order).where(
            Order.id == order_id,
            Order.payment_status == "pending",
            Order.status == "pending",
            Order.delivery_status == "pending",
        )
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("[CHECKOUT] order_id=%s changed while being abandoned; kept", order_id)
        raise InvalidTransitionError(order_id, "pending", "abandoned", reason="order was modified concurrently")

    log_action(db, actor=customer, action_type="CHECKOUT_ABANDONED", order_id=order_id, before_snapshot=before)
    db.commit()
    logger.info("[CHECKOUT] order_id=%s abandoned before payment", order_id)


def list_customer_orders(db: Session, customer: User) -> list[Order]:
    return list(
        db.scalars(
            select(Order)
            .options(joinedload(Order.items), joinedload(Order.delivery_partner))
            .where(Order.customer_id == customer.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        .unique()
        .all()
    )


def list_active_orders(db: Session) -> list[Order]:
    """Orders still in flight, newest first, for the seller dashboard."""
    return list(
        db.scalars(
            select(Order)
            .options(joinedload(Order.items), joinedload(Order.delivery_partner))
            .where(
                Order.delivery_status.in_(ACTIVE_DELIVERY_STATUSES),
                Order.status.not_in(["cancelled", "payment_failed"]),
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        .unique()
        .all()
    )
