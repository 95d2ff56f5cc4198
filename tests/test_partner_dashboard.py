"""Delivery partner dashboard reads and location pings."""

from decimal import Decimal

import pytest

from livemart.models import DeliveryPartner
from livemart.services import order_lifecycle
from livemart.services.delivery_assignment import PartnerNotFoundError, assign_partner
from livemart.services.order_lifecycle import InvalidTransitionError, PartnerMismatchError
from livemart.services.order_service import place_order
from livemart.services.partner_service import (
    PartnerHasActiveOrderError,
    PartnerProfileExistsError,
    get_partner_for_user,
    latest_location,
    partner_orders,
    partner_summary,
    record_location,
    register_partner,
    set_availability,
)


def _place(db, customer, product):
    return place_order(
        db,
        customer=customer,
        items=[(product.id, 1)],
        delivery_address="21 Anna Salai, Chennai",
        phone="9000011111",
        payment_method="offline",
    )


def test_register_partner_profile_once(db, make_user) -> None:
    courier = make_user("courier@example.com", role="DELIVERY_PARTNER")

    partner = register_partner(db, user=courier, name="Ravi", phone="9000000001", vehicle_type="Scooter")

    assert partner.vehicle_type == "scooter"
    assert partner.is_available is True
    assert get_partner_for_user(db, courier).id == partner.id
    with pytest.raises(PartnerProfileExistsError):
        register_partner(db, user=courier, name="Ravi", phone="9000000001", vehicle_type="bike")


def test_unknown_vehicle_type_is_rejected(db, make_user) -> None:
    courier = make_user("truck@example.com", role="DELIVERY_PARTNER")

    with pytest.raises(ValueError):
        register_partner(db, user=courier, name="Ravi", phone="9000000001", vehicle_type="truck")


def test_user_without_profile_has_no_partner(db, make_user) -> None:
    courier = make_user("noprofile@example.com", role="DELIVERY_PARTNER")

    with pytest.raises(PartnerNotFoundError):
        get_partner_for_user(db, courier)


def test_summary_counts_and_earnings(db, make_user, make_product, make_partner) -> None:
    customer = make_user("shopper@example.com")
    product = make_product(stock=10)
    partner = make_partner()
    delivered = _place(db, customer, product)
    assign_partner(db, delivered.id, partner.id)
    order_lifecycle.complete(db, delivered.id, partner.id)
    active = _place(db, customer, product)
    assign_partner(db, active.id, partner.id)
    _place(db, customer, product)

    summary = partner_summary(db, partner)

    assert summary["active_orders"] == 1
    assert summary["completed_orders"] == 1
    assert summary["total_earnings"] == Decimal("500.00")
    assert summary["is_available"] is False
    assert [order.id for order in partner_orders(db, partner)] == [delivered.id, active.id]


def test_manual_availability_toggle(db, make_partner) -> None:
    partner = make_partner()

    partner = set_availability(db, partner, False)

    assert partner.is_available is False


def test_location_ping_only_from_assigned_partner(db, make_user, make_product, make_partner) -> None:
    customer = make_user("tracked@example.com")
    product = make_product()
    carrier = make_partner("Asha")
    stranger = make_partner("Vikram")
    order = _place(db, customer, product)
    assign_partner(db, order.id, carrier.id)

    ping = record_location(db, order_id=order.id, partner=carrier, latitude=12.97, longitude=77.59)

    assert ping.delivery_status == "confirmed"
    assert latest_location(db, order.id).id == ping.id
    with pytest.raises(PartnerMismatchError):
        record_location(db, order_id=order.id, partner=stranger, latitude=0.0, longitude=0.0)


def test_no_pings_after_delivery(db, make_user, make_product, make_partner) -> None:
    customer = make_user("done@example.com")
    product = make_product()
    partner = make_partner()
    order = _place(db, customer, product)
    assign_partner(db, order.id, partner.id)
    order_lifecycle.complete(db, order.id, partner.id)

    with pytest.raises(InvalidTransitionError):
        record_location(db, order_id=order.id, partner=partner, latitude=12.97, longitude=77.59)
    assert latest_location(db, order.id) is None


def test_cancelled_order_leaves_partner_dashboard(db, make_user, make_product, make_partner) -> None:
    customer = make_user("changed-mind@example.com")
    product = make_product()
    partner = make_partner()
    order = _place(db, customer, product)
    assign_partner(db, order.id, partner.id)

    order_lifecycle.cancel(db, order.id)

    db.expire_all()
    assert partner_orders(db, partner) == []
    summary = partner_summary(db, partner)
    assert summary["active_orders"] == 0
    assert summary["is_available"] is True
    with pytest.raises(InvalidTransitionError):
        record_location(db, order_id=order.id, partner=partner, latitude=12.97, longitude=77.59)
    assert latest_location(db, order.id) is None


def test_failed_payment_order_leaves_partner_dashboard(db, make_user, make_product, make_partner) -> None:
    customer = make_user("card-declined@example.com")
    product = make_product()
    partner = make_partner()
    order = place_order(
        db,
        customer=customer,
        items=[(product.id, 1)],
        delivery_address="21 Anna Salai, Chennai",
        phone="9000011111",
        payment_method="online",
    )
    assign_partner(db, order.id, partner.id)

    order_lifecycle.record_payment(db, order.id, "failed")

    db.expire_all()
    assert partner_orders(db, partner) == []
    assert partner_summary(db, partner)["active_orders"] == 0
    with pytest.raises(InvalidTransitionError):
        record_location(db, order_id=order.id, partner=partner, latitude=12.97, longitude=77.59)


def test_freed_partner_carries_only_the_new_order(db, make_user, make_product, make_partner) -> None:
    customer = make_user("reassigned@example.com")
    product = make_product()
    partner = make_partner()
    cancelled = _place(db, customer, product)
    assign_partner(db, cancelled.id, partner.id)
    order_lifecycle.cancel(db, cancelled.id)
    current = _place(db, customer, product)

    assign_partner(db, current.id, partner.id)

    assert [order.id for order in partner_orders(db, partner)] == [current.id]
    assert partner_summary(db, partner)["active_orders"] == 1


def test_partner_carrying_an_order_cannot_go_available(db, make_user, make_product, make_partner) -> None:
    customer = make_user("busy-courier@example.com")
    product = make_product()
    partner = make_partner()
    order = _place(db, customer, product)
    assign_partner(db, order.id, partner.id)
    db.expire_all()

    with pytest.raises(PartnerHasActiveOrderError):
        set_availability(db, partner, True)

    db.expire_all()
    assert db.get(DeliveryPartner, partner.id).is_available is False
    order_lifecycle.complete(db, order.id, partner.id)
    partner = set_availability(db, partner, False)
    assert set_availability(db, partner, True).is_available is True
