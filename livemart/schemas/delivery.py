"""Delivery partner schemas."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PartnerCreate(BaseModel):
    """Courier signup details."""

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    vehicle_type: Literal["bike", "scooter", "motorcycle", "car", "van", "bicycle"]


class AvailabilityUpdate(BaseModel):
    is_available: bool


class PartnerResponse(BaseModel):
    id: int
    user_id: int | None
    name: str
    phone: str
    vehicle_type: str
    is_available: bool

    model_config = ConfigDict(from_attributes=True)


class PartnerSummaryResponse(BaseModel):
    """Delivery dashboard header figures."""

    partner_id: int
    is_available: bool
    active_orders: int
    completed_orders: int
    earnings_per_delivery: Decimal
    total_earnings: Decimal
