"""Delivery partner endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from livemart.api.errors import DOMAIN_ERRORS, to_http_exception
from livemart.core.security import require_roles
from livemart.db.session import get_db
from livemart.models import User
from livemart.models.user import STAFF_ROLES
from livemart.schemas.delivery import AvailabilityUpdate, PartnerCreate, PartnerResponse, PartnerSummaryResponse
from livemart.schemas.order import OrderResponse
from livemart.services.delivery_assignment import list_available_partners
from livemart.services.partner_service import (
    get_partner_for_user,
    partner_orders,
    partner_summary,
    register_partner,
    set_availability,
)

router: APIRouter = APIRouter()
_require_staff = require_roles(*STAFF_ROLES)
_require_partner = require_roles("DELIVERY_PARTNER")


@router.get("", response_model=list[PartnerResponse])
def get_available_partners(
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_staff),
) -> list[PartnerResponse]:
    return [PartnerResponse.model_validate(partner) for partner in list_available_partners(db)]


@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
def create_partner_profile(
    payload: PartnerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_partner),
) -> PartnerResponse:
    try:
        partner = register_partner(
            db,
            user=current_user,
            name=payload.name,
            phone=payload.phone,
            vehicle_type=payload.vehicle_type,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PartnerResponse.model_validate(partner)


@router.patch("/me/availability", response_model=PartnerResponse)
def update_my_availability(
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_partner),
) -> PartnerResponse:
    try:
        partner = set_availability(db, get_partner_for_user(db, current_user), payload.is_available)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PartnerResponse.model_validate(partner)


@router.get("/me/orders", response_model=list[OrderResponse])
def get_my_deliveries(
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_partner),
) -> list[OrderResponse]:
    try:
        partner = get_partner_for_user(db, current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return [OrderResponse.model_validate(order) for order in partner_orders(db, partner)]


@router.get("/me/summary", response_model=PartnerSummaryResponse)
def get_my_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_partner),
) -> PartnerSummaryResponse:
    try:
        partner = get_partner_for_user(db, current_user)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PartnerSummaryResponse(**partner_summary(db, partner))
