"""Order status vocabulary and transition helpers.

An order carries two independent status fields. ``status`` tracks the
commercial side (payment, cancellation, fulfilment) and ``delivery_status``
tracks the physical side. ``COMPATIBLE_DELIVERY_STATUSES`` is the joint
validity table: every write must leave the pair inside it.
"""

from __future__ import annotations

from datetime import datetime

from livemart.models.order import Order

ORDER_STATUSES: list[str] = ["pending", "confirmed", "payment_failed", "cancelled", "delivered"]
DELIVERY_STATUSES: list[str] = ["pending", "confirmed", "preparing", "out_for_delivery", "delivered"]
PAYMENT_METHODS: set[str] = {"online", "offline"}
PAYMENT_STATUSES: set[str] = {"pending", "paid", "failed"}

ACTIVE_DELIVERY_STATUSES: list[str] = ["pending", "confirmed", "preparing", "out_for_delivery"]
PARTNER_VISIBLE_STATUSES: list[str] = ["confirmed", "preparing", "out_for_delivery", "delivered"]
CLOSED_ORDER_STATUSES: set[str] = {"payment_failed", "cancelled", "delivered"}

ALLOWED_DELIVERY_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed"},
    "confirmed": {"preparing"},
    "preparing": {"out_for_delivery"},
    "out_for_delivery": {"delivered"},
    "delivered": set(),
}

_IN_FLIGHT: set[str] = {"pending", "confirmed", "preparing", "out_for_delivery"}

COMPATIBLE_DELIVERY_STATUSES: dict[str, set[str]] = {
    "pending": _IN_FLIGHT,
    "confirmed": _IN_FLIGHT,
    "payment_failed": _IN_FLIGHT,
    "cancelled": {"pending", "confirmed"},
    "delivered": {"delivered"},
}


def can_transition(current: str, new: str) -> bool:
    """Return whether delivery status can move from current to new."""
    return new in ALLOWED_DELIVERY_TRANSITIONS.get(current, set())


def is_compatible(status: str, delivery_status: str) -> bool:
    """Return whether the status pair is listed in the joint validity table."""
    return delivery_status in COMPATIBLE_DELIVERY_STATUSES.get(status, set())


def is_closed(order: Order) -> bool:
    return order.status in CLOSED_ORDER_STATUSES


def status_snapshot(order: Order) -> dict[str, str | int | None]:
    """Return the fields recorded in audit before/after snapshots."""
    return {
        "status": order.status,
        "delivery_status": order.delivery_status,
        "payment_status": order.payment_status,
        "delivery_partner_id": order.delivery_partner_id,
    }


def delivery_status_values(new_status: str, now: datetime) -> dict[str, object]:
    """Column values for moving to new_status, including its timestamp."""
    values: dict[str, object] = {"delivery_status": new_status, "status_updated_at": now}
    if new_status == "confirmed":
        values["confirmed_at"] = now
    elif new_status == "preparing":
        values["preparing_at"] = now
    elif new_status == "out_for_delivery":
        values["dispatched_at"] = now
    elif new_status == "delivered":
        values["delivered_at"] = now
    return values
