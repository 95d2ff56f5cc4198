"""Binding available delivery partners to orders."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from livemart.models import DeliveryPartner, Order, User
from livemart.services.audit_service import log_action
from livemart.services.order_lifecycle import InvalidTransitionError, get_order
from livemart.services.order_status import CLOSED_ORDER_STATUSES, delivery_status_values, is_closed, status_snapshot
from livemart.utils.time import utcnow

logger = logging.getLogger(__name__)


class PartnerNotFoundError(Exception):
    """Raised when a delivery partner id does not exist."""

    def __init__(self, partner_id: int | None = None) -> None:
        super().__init__("Delivery partner not found" if partner_id is None else f"Delivery partner {partner_id} not found")
        self.partner_id = partner_id


class NoPartnersAvailableError(Exception):
    """Raised when no courier is currently available."""

    def __init__(self) -> None:
        super().__init__("No delivery partners available")


class PartnerUnavailableError(Exception):
    """Raised when the chosen courier is already busy."""

    def __init__(self, partner_id: int) -> None:
        super().__init__(f"Delivery partner {partner_id} is not available")
        self.partner_id = partner_id


class OrderAlreadyAssignedError(Exception):
    """Raised on a second assignment attempt for the same order."""

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} already has a delivery partner")
        self.order_id = order_id


def list_available_partners(db: Session) -> list[DeliveryPartner]:
    """Return available partners in store order; no ranking is applied."""
    return list(
        db.scalars(
            select(DeliveryPartner).where(DeliveryPartner.is_available.is_(True)).order_by(DeliveryPartner.id.asc())
        ).all()
    )


def _count_available(db: Session) -> int:
    return int(
        db.scalar(select(func.count()).select_from(DeliveryPartner).where(DeliveryPartner.is_available.is_(True))) or 0
    )


def assign_partner(db: Session, order_id: int, partner_id: int, *, actor: User | None = None) -> Order:
    """Bind a partner to an unassigned order and mark the partner busy.

    Gated only by the absence of a prior assignment, so an order still at
    ``pending`` is confirmed by the assignment itself, and an order already past
    ``confirmed`` is moved back to it. The order update and the availability
    flip commit together or not at all.
    """
    order = get_order(db, order_id)
    if order.delivery_partner_id is not None:
        raise OrderAlreadyAssignedError(order_id)
    if is_closed(order):
        raise InvalidTransitionError(order_id, order.delivery_status, "confirmed", reason=f"order is {order.status}")
    if _count_available(db) == 0:
        raise NoPartnersAvailableError()

    partner: DeliveryPartner | None = db.get(DeliveryPartner, partner_id)
    if partner is None:
        raise PartnerNotFoundError(partner_id)
    if not partner.is_available:
        raise PartnerUnavailableError(partner_id)

    before = status_snapshot(order)
    values = delivery_status_values("confirmed", utcnow())
    if order.confirmed_at is not None:
        values.pop("confirmed_at")
    values["delivery_partner_id"] = partner_id

    order_result = db.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.delivery_partner_id.is_(None),
            Order.status.not_in(sorted(CLOSED_ORDER_STATUSES)),
        )
        .values(**values)
    )
    if order_result.rowcount != 1:
        db.rollback()
        raise OrderAlreadyAssignedError(order_id)

    partner_result = db.execute(
        update(DeliveryPartner)
        .where(DeliveryPartner.id == partner_id, DeliveryPartner.is_available.is_(True))
        .values(is_available=False)
    )
    if partner_result.rowcount != 1:
        db.rollback()
        logger.warning("[DELIVERY] partner_id=%s was claimed concurrently; assignment to order_id=%s rolled back", partner_id, order_id)
        raise PartnerUnavailableError(partner_id)

    db.refresh(order)
    log_action(
        db,
        actor=actor,
        action_type="PARTNER_ASSIGNED",
        order_id=order_id,
        before_snapshot=before,
        after_snapshot=status_snapshot(order),
    )
    db.commit()
    db.refresh(order)
    logger.info("[DELIVERY] partner_id=%s assigned to order_id=%s", partner_id, order_id)
    return order
