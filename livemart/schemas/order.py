"""Order API schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CartLine(BaseModel):
    """Single cart line submitted at checkout."""

    product_id: int
    quantity: int = Field(default=1, ge=1)


class CheckoutRequest(BaseModel):
    """Checkout form: cart contents plus delivery and payment details."""

    items: list[CartLine] = Field(min_length=1)
    delivery_address: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    payment_method: Literal["online", "offline"]
    coupon_code: str | None = None


class PaymentResultRequest(BaseModel):
    """Verdict reported back from the payment processor."""

    outcome: Literal["paid", "failed"]


class AssignPartnerRequest(BaseModel):
    partner_id: int


class OrderItemResponse(BaseModel):
    """Serialized order item."""

    product_id: int | None
    product_name: str
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderPartnerResponse(BaseModel):
    """Courier details shown next to an order."""

    id: int
    name: str
    phone: str
    vehicle_type: str

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Serialized order."""

    id: int
    order_number: str
    order_date: date
    customer_id: int
    subtotal_amount: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    total_price: Decimal
    coupon_code: str | None
    delivery_address: str
    phone: str
    payment_method: str
    payment_status: str
    status: str
    delivery_status: str
    delivery_partner_id: int | None
    delivery_partner: OrderPartnerResponse | None = None
    created_at: datetime
    delivery_date: datetime | None
    items: list[OrderItemResponse]

    model_config = ConfigDict(from_attributes=True)


class OrderHistoryEntry(BaseModel):
    """One audited lifecycle action."""

    timestamp: datetime
    actor_identifier: str
    action_type: str
    before_snapshot: dict | None
    after_snapshot: dict | None

    model_config = ConfigDict(from_attributes=True)


class TrackingPingRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class TrackingPingResponse(BaseModel):
    order_id: int
    delivery_partner_id: int
    latitude: float
    longitude: float
    delivery_status: str
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)
