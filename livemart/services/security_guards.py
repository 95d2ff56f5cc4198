"""Centralized access guards for order operations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from livemart.models import DeliveryPartner, Order, User
from livemart.models.user import STAFF_ROLES
from livemart.services.order_lifecycle import OrderNotFoundError


def ensure_can_access_order(user: User, order: Order, db: Session) -> None:
    """Apply IDOR-safe ownership/role checks; raise not-found to avoid leaking."""
    if user.role in STAFF_ROLES:
        return
    if user.role == "CUSTOMER" and order.customer_id == user.id:
        return
    if user.role == "DELIVERY_PARTNER" and order.delivery_partner_id is not None:
        partner_id = db.scalar(select(DeliveryPartner.id).where(DeliveryPartner.user_id == user.id).limit(1))
        if partner_id == order.delivery_partner_id:
            return
    raise OrderNotFoundError(order.id)
