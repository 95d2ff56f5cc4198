"""Delivery partner profile, dashboard reads and location pings."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from livemart.core.config import settings
from livemart.models import DeliveryPartner, DeliveryTracking, Order, User
from livemart.models.delivery import VEHICLE_TYPES
from livemart.services.delivery_assignment import PartnerNotFoundError
from livemart.services.order_lifecycle import InvalidTransitionError, PartnerMismatchError, get_order
from livemart.services.order_status import PARTNER_VISIBLE_STATUSES, is_closed

logger = logging.getLogger(__name__)


class PartnerProfileExistsError(Exception):
    """Raised when a courier account registers a second profile."""


class PartnerHasActiveOrderError(Exception):
    """Raised when a courier still carrying an order tries to go available."""

    def __init__(self, partner_id: int, order_id: int) -> None:
        super().__init__(f"Delivery partner {partner_id} still has undelivered order {order_id}")
        self.partner_id = partner_id
        self.order_id = order_id


def register_partner(db: Session, *, user: User, name: str, phone: str, vehicle_type: str) -> DeliveryPartner:
    """Create the partner profile for a DELIVERY_PARTNER account."""
    canonical_vehicle = vehicle_type.strip().lower()
    if canonical_vehicle not in VEHICLE_TYPES:
        raise ValueError(f"Unsupported vehicle type: {vehicle_type}")
    existing = db.scalar(select(DeliveryPartner).where(DeliveryPartner.user_id == user.id).limit(1))
    if existing is not None:
        raise PartnerProfileExistsError(f"User {user.id} already has a delivery partner profile")

    partner = DeliveryPartner(
        user_id=user.id,
        name=name.strip(),
        phone=phone.strip(),
        vehicle_type=canonical_vehicle,
        is_available=True,
    )
    db.add(partner)
    db.commit()
    db.refresh(partner)
    logger.info("[DELIVERY] Registered partner_id=%s for user_id=%s", partner.id, user.id)
    return partner


def get_partner_for_user(db: Session, user: User) -> DeliveryPartner:
    partner = db.scalar(select(DeliveryPartner).where(DeliveryPartner.user_id == user.id).limit(1))
    if partner is None:
        raise PartnerNotFoundError()
    return partner


def set_availability(db: Session, partner: DeliveryPartner, is_available: bool) -> DeliveryPartner:
    """Manual availability toggle from the partner's own dashboard.

    Going available is refused while an assigned order is still undelivered.
    """
    if is_available and not partner.is_available:
        active = [order for order in partner_orders(db, partner) if order.delivery_status != "delivered"]
        if active:
            logger.warning(
                "[DELIVERY] partner_id=%s asked to go available while carrying order_id=%s",
                partner.id,
                active[0].id,
            )
            raise PartnerHasActiveOrderError(partner.id, active[0].id)
    partner.is_available = is_available
    db.commit()
    db.refresh(partner)
    logger.info("[DELIVERY] partner_id=%s availability set to %s", partner.id, is_available)
    return partner


def partner_orders(db: Session, partner: DeliveryPartner) -> list[Order]:
    return list(
        db.scalars(
            select(Order)
            .where(
                Order.delivery_partner_id == partner.id,
                Order.delivery_status.in_(PARTNER_VISIBLE_STATUSES),
                Order.status.not_in(["cancelled", "payment_failed"]),
            )
            .order_by(Order.id.asc())
        ).all()
    )


def partner_summary(db: Session, partner: DeliveryPartner) -> dict[str, int | Decimal | bool]:
    """Active/completed counts and earnings at the flat per-delivery rate."""
    orders = partner_orders(db, partner)
    completed = sum(1 for order in orders if order.delivery_status == "delivered")
    return {
        "partner_id": partner.id,
        "is_available": partner.is_available,
        "active_orders": len(orders) - completed,
        "completed_orders": completed,
        "earnings_per_delivery": settings.earnings_per_delivery,
        "total_earnings": settings.earnings_per_delivery * completed,
    }


def record_location(
    db: Session,
    *,
    order_id: int,
    partner: DeliveryPartner,
    latitude: float,
    longitude: float,
) -> DeliveryTracking:
    """Store a location ping for an order the courier is carrying."""
    order = get_order(db, order_id)
    if order.delivery_partner_id != partner.id:
        raise PartnerMismatchError(order_id, partner.id)
    if is_closed(order):
        raise InvalidTransitionError(order_id, order.delivery_status, "tracking", reason=f"order is {order.status}")

    ping = DeliveryTracking(
        order_id=order_id,
        delivery_partner_id=partner.id,
        latitude=latitude,
        longitude=longitude,
        delivery_status=order.delivery_status,
    )
    db.add(ping)
    db.commit()
    db.refresh(ping)
    return ping


def latest_location(db: Session, order_id: int) -> DeliveryTracking | None:
    return db.scalar(
        select(DeliveryTracking)
        .where(DeliveryTracking.order_id == order_id)
        .order_by(DeliveryTracking.recorded_at.desc(), DeliveryTracking.id.desc())
        .limit(1)
    )
