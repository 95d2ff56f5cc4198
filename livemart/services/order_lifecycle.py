"""Order lifecycle controller.

Each operation validates the order's current status pair and then applies the
change with a conditional UPDATE on the prior state. When another caller moved
the order first, the UPDATE matches no row and the operation fails the same
way a plain invalid transition does. Nothing is retried automatically.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from livemart.models import DeliveryPartner, Order, User
from livemart.services.audit_service import log_action
from livemart.services.order_status import (
    can_transition,
    delivery_status_values,
    is_closed,
    is_compatible,
    status_snapshot,
)
from livemart.services.stock_service import restore_stock
from livemart.utils.time import utcnow

logger = logging.getLogger(__name__)

CANCELLABLE_DELIVERY_STATUSES: list[str] = ["pending", "confirmed"]
PAYMENT_OUTCOMES: dict[str, str] = {"paid": "confirmed", "failed": "payment_failed"}


class OrderNotFoundError(Exception):
    """Raised when an order id does not exist or is not visible to the caller."""

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class InvalidTransitionError(Exception):
    """Raised when an order cannot move to the requested state."""

    def __init__(self, order_id: int, current: str, target: str, reason: str | None = None) -> None:
        message = f"Order {order_id} cannot move from {current} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.order_id = order_id
        self.current = current
        self.target = target
        self.reason = reason


class PartnerMismatchError(Exception):
    """Raised when a courier acts on an order assigned to someone else."""

    def __init__(self, order_id: int, partner_id: int) -> None:
        super().__init__(f"Order {order_id} is not assigned to delivery partner {partner_id}")
        self.order_id = order_id
        self.partner_id = partner_id


def get_order(db: Session, order_id: int) -> Order:
    order: Order | None = db.get(Order, order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


def _release_partner(db: Session, partner_id: int | None) -> None:
    if partner_id is None:
        return
    db.execute(update(DeliveryPartner).where(DeliveryPartner.id == partner_id).values(is_available=True))
    logger.info("[DELIVERY] Delivery partner_id=%s is available again", partner_id)


def _finish(
    db: Session,
    order: Order,
    *,
    actor: User | None,
    action_type: str,
    before: dict[str, Any],
) -> Order:
    db.refresh(order)
    log_action(
        db,
        actor=actor,
        action_type=action_type,
        order_id=order.id,
        before_snapshot=before,
        after_snapshot=status_snapshot(order),
    )
    db.commit()
    db.refresh(order)
    return order


def _apply_delivery_transition(
    db: Session,
    order_id: int,
    target: str,
    *,
    actor: User | None,
    action_type: str,
    require_partner: bool = False,
) -> Order:
    order = get_order(db, order_id)
    current = order.delivery_status

    if is_closed(order):
        raise InvalidTransitionError(order_id, current, target, reason=f"order is {order.status}")
    if not can_transition(current, target):
        raise InvalidTransitionError(order_id, current, target)
    if require_partner and order.delivery_partner_id is None:
        raise InvalidTransitionError(order_id, current, target, reason="no delivery partner assigned")
    if not is_compatible(order.status, target):
        raise InvalidTransitionError(order_id, current, target, reason=f"not allowed while order is {order.status}")

    before = status_snapshot(order)
    conditions = [Order.id == order_id, Order.delivery_status == current, Order.status == order.status]
    if require_partner:
        conditions.append(Order.delivery_partner_id.is_not(None))

    result = db.execute(update(Order).where(*conditions).values(**delivery_status_values(target, utcnow())))
    if result.rowcount != 1:
        db.rollback()
        logger.warning("[ORDERS] Concurrent update lost for order_id=%s (%s -> %s)", order_id, current, target)
        raise InvalidTransitionError(order_id, current, target, reason="order was modified concurrently")

    order = _finish(db, order, actor=actor, action_type=action_type, before=before)
    logger.info("[ORDERS] order_id=%s delivery_status %s -> %s", order_id, current, target)
    return order


def accept(db: Session, order_id: int, *, actor: User | None = None) -> Order:
    """Seller accepts a new order: pending -> confirmed."""
    return _apply_delivery_transition(db, order_id, "confirmed", actor=actor, action_type="ORDER_ACCEPTED")


def mark_preparing(db: Session, order_id: int, *, actor: User | None = None) -> Order:
    """confirmed -> preparing, only once a courier is assigned."""
    return _apply_delivery_transition(
        db,
        order_id,
        "preparing",
        actor=actor,
        action_type="ORDER_PREPARING",
        require_partner=True,
    )


def dispatch(db: Session, order_id: int, *, actor: User | None = None) -> Order:
    """preparing -> out_for_delivery."""
    return _apply_delivery_transition(db, order_id, "out_for_delivery", actor=actor, action_type="ORDER_DISPATCHED")


def complete(db: Session, order_id: int, partner_id: int, *, actor: User | None = None) -> Order:
    """Mark an order delivered on behalf of its courier.

    Not gated by delivery_status. Completing an order that is already delivered
    returns it unchanged. The courier becomes available again in the same
    transaction.
    """
    order = get_order(db, order_id)
    if order.delivery_partner_id != partner_id:
        raise PartnerMismatchError(order_id, partner_id)
    if order.delivery_status == "delivered":
        logger.info("[DELIVERY] order_id=%s already delivered; nothing to do", order_id)
        return order
    if order.status in {"cancelled", "payment_failed"}:
        raise InvalidTransitionError(order_id, order.delivery_status, "delivered", reason=f"order is {order.status}")

    before = status_snapshot(order)
    values = delivery_status_values("delivered", utcnow())
    values["status"] = "delivered"
    result = db.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.delivery_partner_id == partner_id,
            Order.delivery_status != "delivered",
            Order.status.not_in(["cancelled", "payment_failed"]),
        )
        .values(**values)
    )
    if result.rowcount != 1:
        db.rollback()
        order = get_order(db, order_id)
        if order.delivery_status == "delivered":
            return order
        raise InvalidTransitionError(order_id, order.delivery_status, "delivered", reason="order was modified concurrently")

    _release_partner(db, partner_id)
    order = _finish(db, order, actor=actor, action_type="ORDER_DELIVERED", before=before)
    logger.info("[DELIVERY] order_id=%s delivered by partner_id=%s", order_id, partner_id)
    return order


def cancel(db: Session, order_id: int, *, actor: User | None = None) -> Order:
    """Cancel an order that has not started preparation.

    Ordered stock goes back to the products and an assigned courier is
    released.
    """
    order = get_order(db, order_id)
    current_status = order.status
    if current_status not in {"pending", "confirmed"} or order.delivery_status not in CANCELLABLE_DELIVERY_STATUSES:
        raise InvalidTransitionError(
            order_id,
            f"{current_status}/{order.delivery_status}",
            "cancelled",
            reason="only orders not yet in preparation can be cancelled",
        )

    before = status_snapshot(order)
    now = utcnow()
    result = db.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.status == current_status,
            Order.delivery_status.in_(CANCELLABLE_DELIVERY_STATUSES),
        )
        .values(status="cancelled", cancelled_at=now, status_updated_at=now)
    )
    if result.rowcount != 1:
        db.rollback()
        raise InvalidTransitionError(order_id, current_status, "cancelled", reason="order was modified concurrently")

    restore_stock(db, order)
    _release_partner(db, order.delivery_partner_id)
    order = _finish(db, order, actor=actor, action_type="ORDER_CANCELLED", before=before)
    logger.info("[ORDERS] order_id=%s cancelled", order_id)
    return order


def record_payment(db: Session, order_id: int, outcome: str, *, actor: User | None = None) -> Order:
    """Apply the payment processor's verdict to an online order."""
    if outcome not in PAYMENT_OUTCOMES:
        raise ValueError(f"Unknown payment outcome: {outcome}")

    order = get_order(db, order_id)
    if order.payment_method != "online" or order.payment_status != "pending" or order.status != "pending":
        raise InvalidTransitionError(
            order_id,
            order.payment_status,
            outcome,
            reason="payment already settled or not an online order",
        )

    before = status_snapshot(order)
    now = utcnow()
    new_status = PAYMENT_OUTCOMES[outcome]
    result = db.execute(
        update(Order)
        .where(Order.id == order_id, Order.payment_status == "pending", Order.status == "pending")
        .values(payment_status=outcome, status=new_status, status_updated_at=now)
    )
    if result.rowcount != 1:
        db.rollback()
        raise InvalidTransitionError(order_id, "pending", outcome, reason="order was modified concurrently")

    if outcome == "failed":
        restore_stock(db, order)
        _release_partner(db, order.delivery_partner_id)
        logger.warning("[ORDERS] Payment failed for order_id=%s; stock restored", order_id)

    return _finish(db, order, actor=actor, action_type=f"PAYMENT_{outcome.upper()}", before=before)
