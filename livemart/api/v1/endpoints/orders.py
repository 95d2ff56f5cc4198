"""Order endpoints: checkout, lifecycle transitions and tracking."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from livemart.api.errors import DOMAIN_ERRORS, to_http_exception
from livemart.core.security import get_current_user, require_roles
from livemart.db.session import get_db
from livemart.models import User
from livemart.models.user import STAFF_ROLES
from livemart.schemas.order import (
    AssignPartnerRequest,
    CheckoutRequest,
    OrderHistoryEntry,
    OrderResponse,
    PaymentResultRequest,
    TrackingPingRequest,
    TrackingPingResponse,
)
from livemart.services import order_lifecycle
from livemart.services.audit_service import order_history
from livemart.services.delivery_assignment import assign_partner
from livemart.services.order_service import abandon_checkout, list_active_orders, list_customer_orders, place_order
from livemart.services.partner_service import get_partner_for_user, latest_location, record_location
from livemart.services.security_guards import ensure_can_access_order

router: APIRouter = APIRouter()
_require_customer = require_roles("CUSTOMER")
_require_staff = require_roles(*STAFF_ROLES)
_require_partner = require_roles("DELIVERY_PARTNER")


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_customer),
) -> OrderResponse:
    """Place an order for the current customer's cart."""
    try:
        order = place_order(
            db,
            customer=current_user,
            items=[(line.product_id, line.quantity) for line in payload.items],
            delivery_address=payload.delivery_address,
            phone=payload.phone,
            payment_method=payload.payment_method,
            coupon_code=payload.coupon_code,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.get("/me", response_model=list[OrderResponse])
def get_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_customer),
) -> list[OrderResponse]:
    return [OrderResponse.model_validate(order) for order in list_customer_orders(db, current_user)]


@router.get("/active", response_model=list[OrderResponse])
def get_active_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> list[OrderResponse]:
    """Orders still awaiting delivery, newest first."""
    return [OrderResponse.model_validate(order) for order in list_active_orders(db)]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrderResponse:
    try:
        order = order_lifecycle.get_order(db, order_id)
        ensure_can_access_order(current_user, order, db)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.get("/{order_id}/history", response_model=list[OrderHistoryEntry])
def get_order_history(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> list[OrderHistoryEntry]:
    try:
        order_lifecycle.get_order(db, order_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return [OrderHistoryEntry.model_validate(entry) for entry in order_history(db, order_id)]


@router.post("/{order_id}/payment", response_model=OrderResponse)
def report_payment(
    order_id: int,
    payload: PaymentResultRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_customer),
) -> OrderResponse:
    try:
        ensure_can_access_order(current_user, order_lifecycle.get_order(db, order_id), db)
        order = order_lifecycle.record_payment(db, order_id, payload.outcome, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def abandon_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_customer),
) -> Response:
    """Drop an unpaid online order when the customer backs out of payment."""
    try:
        abandon_checkout(db, order_id, customer=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{order_id}/accept", response_model=OrderResponse)
def accept_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> OrderResponse:
    try:
        order = order_lifecycle.accept(db, order_id, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/assign", response_model=OrderResponse)
def assign_order_partner(
    order_id: int,
    payload: AssignPartnerRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> OrderResponse:
    try:
        order = assign_partner(db, order_id, payload.partner_id, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/prepare", response_model=OrderResponse)
def prepare_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> OrderResponse:
    try:
        order = order_lifecycle.mark_preparing(db, order_id, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/dispatch", response_model=OrderResponse)
def dispatch_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> OrderResponse:
    try:
        order = order_lifecycle.dispatch(db, order_id, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrderResponse:
    """Cancel before preparation; staff or the ordering customer."""
    if current_user.role not in STAFF_ROLES and current_user.role != "CUSTOMER":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    try:
        ensure_can_access_order(current_user, order_lifecycle.get_order(db, order_id), db)
        order = order_lifecycle.cancel(db, order_id, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/complete", response_model=OrderResponse)
def complete_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_partner),
) -> OrderResponse:
    try:
        partner = get_partner_for_user(db, current_user)
        order = order_lifecycle.complete(db, order_id, partner.id, actor=current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/tracking", response_model=TrackingPingResponse, status_code=status.HTTP_201_CREATED)
def post_location(
    order_id: int,
    payload: TrackingPingRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_partner),
) -> TrackingPingResponse:
    try:
        partner = get_partner_for_user(db, current_user)
        ping = record_location(
            db,
            order_id=order_id,
            partner=partner,
            latitude=payload.latitude,
            longitude=payload.longitude,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return TrackingPingResponse.model_validate(ping)


@router.get("/{order_id}/tracking", response_model=TrackingPingResponse)
def get_location(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TrackingPingResponse:
    try:
        ensure_can_access_order(current_user, order_lifecycle.get_order(db, order_id), db)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    ping = latest_location(db, order_id)
    if ping is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No location reported yet")
    return TrackingPingResponse.model_validate(ping)
