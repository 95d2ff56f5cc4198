"""Translation of service exceptions into HTTP errors."""

from fastapi import HTTPException, status

from livemart.services.delivery_assignment import (
    NoPartnersAvailableError,
    OrderAlreadyAssignedError,
    PartnerNotFoundError,
    PartnerUnavailableError,
)
from livemart.services.order_lifecycle import InvalidTransitionError, OrderNotFoundError, PartnerMismatchError
from livemart.services.order_service import CheckoutValidationError, InvalidCouponError, OrderNumberConflictError
from livemart.services.partner_service import PartnerHasActiveOrderError, PartnerProfileExistsError
from livemart.services.stock_service import InsufficientStockError, ProductUnavailableError

NOT_FOUND_ERRORS = (OrderNotFoundError, PartnerNotFoundError)
CONFLICT_ERRORS = (
    InvalidTransitionError,
    OrderAlreadyAssignedError,
    PartnerUnavailableError,
    NoPartnersAvailableError,
    InsufficientStockError,
    ProductUnavailableError,
    OrderNumberConflictError,
    PartnerProfileExistsError,
    PartnerHasActiveOrderError,
)
BAD_REQUEST_ERRORS = (CheckoutValidationError, InvalidCouponError, ValueError)
DOMAIN_ERRORS = NOT_FOUND_ERRORS + CONFLICT_ERRORS + BAD_REQUEST_ERRORS + (PartnerMismatchError,)


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, NOT_FOUND_ERRORS):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PartnerMismatchError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, CONFLICT_ERRORS):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
