"""Product schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = "general"
    description: str | None = None
    price: Decimal = Field(gt=0)
    stock: int = Field(default=0, ge=0)


class ProductStockUpdate(BaseModel):
    stock: int = Field(ge=0)


class ProductResponse(BaseModel):
    id: int
    name: str
    category: str
    description: str | None
    price: Decimal
    stock: int
    retailer_id: int | None
    wholesaler_id: int | None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
