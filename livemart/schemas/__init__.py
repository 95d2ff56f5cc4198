"""Schema exports."""

from livemart.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse
from livemart.schemas.delivery import AvailabilityUpdate, PartnerCreate, PartnerResponse, PartnerSummaryResponse
from livemart.schemas.order import (
    AssignPartnerRequest,
    CartLine,
    CheckoutRequest,
    OrderHistoryEntry,
    OrderItemResponse,
    OrderPartnerResponse,
    OrderResponse,
    PaymentResultRequest,
    TrackingPingRequest,
    TrackingPingResponse,
)
from livemart.schemas.product import ProductCreate, ProductResponse, ProductStockUpdate

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "AvailabilityUpdate",
    "PartnerCreate",
    "PartnerResponse",
    "PartnerSummaryResponse",
    "AssignPartnerRequest",
    "CartLine",
    "CheckoutRequest",
    "OrderHistoryEntry",
    "OrderItemResponse",
    "OrderPartnerResponse",
    "OrderResponse",
    "PaymentResultRequest",
    "TrackingPingRequest",
    "TrackingPingResponse",
    "ProductCreate",
    "ProductResponse",
    "ProductStockUpdate",
]
