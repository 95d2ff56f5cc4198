"""Partner assignment and the availability flag."""

import pytest

from livemart.models import DeliveryPartner, Order
from livemart.services import order_lifecycle
from livemart.services.delivery_assignment import (
    NoPartnersAvailableError,
    OrderAlreadyAssignedError,
    PartnerNotFoundError,
    PartnerUnavailableError,
    assign_partner,
    list_available_partners,
)
from livemart.services.order_lifecycle import InvalidTransitionError
from livemart.services.order_service import place_order


@pytest.fixture
def new_order(db, make_user, make_product):
    counter = {"n": 0}

    def _place() -> Order:
        counter["n"] += 1
        customer = make_user(f"assign{counter['n']}@example.com")
        product = make_product(stock=5)
        return place_order(
            db,
            customer=customer,
            items=[(product.id, 1)],
            delivery_address="3 Residency Road, Bengaluru",
            phone="9988776655",
            payment_method="offline",
        )

    return _place


def test_assignment_confirms_pending_order_and_marks_partner_busy(db, new_order, make_partner) -> None:
    order = new_order()
    partner = make_partner()

    order = assign_partner(db, order.id, partner.id)

    assert order.delivery_partner_id == partner.id
    assert order.delivery_status == "confirmed"
    assert order.confirmed_at is not None
    db.expire_all()
    assert db.get(DeliveryPartner, partner.id).is_available is False
    assert list_available_partners(db) == []


def test_second_assignment_is_rejected(db, new_order, make_partner) -> None:
    order = new_order()
    first = make_partner("Asha")
    second = make_partner("Vikram")
    assign_partner(db, order.id, first.id)

    with pytest.raises(OrderAlreadyAssignedError):
        assign_partner(db, order.id, second.id)

    db.expire_all()
    assert db.get(Order, order.id).delivery_partner_id == first.id
    assert db.get(DeliveryPartner, second.id).is_available is True


def test_busy_partner_cannot_take_a_second_order(db, new_order, make_partner) -> None:
    first_order = new_order()
    second_order = new_order()
    partner = make_partner()
    make_partner("Spare")
    assign_partner(db, first_order.id, partner.id)

    with pytest.raises(PartnerUnavailableError):
        assign_partner(db, second_order.id, partner.id)

    db.expire_all()
    assert db.get(Order, second_order.id).delivery_partner_id is None


def test_no_available_partners(db, new_order, make_partner) -> None:
    order = new_order()
    make_partner(is_available=False)

    with pytest.raises(NoPartnersAvailableError):
        assign_partner(db, order.id, 1)


def test_unknown_partner(db, new_order, make_partner) -> None:
    order = new_order()
    make_partner()

    with pytest.raises(PartnerNotFoundError):
        assign_partner(db, order.id, 404)


def test_closed_order_cannot_be_assigned(db, new_order, make_partner) -> None:
    order = new_order()
    partner = make_partner()
    order_lifecycle.cancel(db, order.id)

    with pytest.raises(InvalidTransitionError):
        assign_partner(db, order.id, partner.id)

    db.expire_all()
    assert db.get(DeliveryPartner, partner.id).is_available is True


def test_assignment_keeps_first_confirmation_time(db, new_order, make_partner) -> None:
    order = order_lifecycle.accept(db, new_order().id)
    confirmed_at = order.confirmed_at
    partner = make_partner()

    order = assign_partner(db, order.id, partner.id)

    assert order.confirmed_at == confirmed_at


def test_completion_frees_partner_for_next_order(db, new_order, make_partner) -> None:
    first_order = new_order()
    second_order = new_order()
    partner = make_partner()
    assign_partner(db, first_order.id, partner.id)
    order_lifecycle.complete(db, first_order.id, partner.id)

    order = assign_partner(db, second_order.id, partner.id)

    assert order.delivery_partner_id == partner.id


def test_available_partners_in_store_order(db, make_partner) -> None:
    first = make_partner("Asha")
    make_partner("Busy", is_available=False)
    third = make_partner("Chetan")

    assert [partner.id for partner in list_available_partners(db)] == [first.id, third.id]
