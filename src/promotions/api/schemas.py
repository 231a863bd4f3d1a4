"""Pydantic request/response schemas for the Promotions API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class DiscountTypeSchema(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------
class ApiResponse(BaseModel, Generic[DataT]):
    status_code: int = 200
    data: DataT
    message: str
    success: bool = True


class ApiError(BaseModel):
    status_code: int
    error: str
    message: str
    errors: dict = Field(default_factory=dict)
    success: bool = False


# ---------------------------------------------------------------------------
# Coupon Request Schemas
# ---------------------------------------------------------------------------
class CreateCouponRequest(BaseModel):
    code: str
    discount_type: DiscountTypeSchema
    discount_value: float
    product_ids: list[str] = Field(default_factory=list)
    valid_from: datetime
    valid_until: datetime
    usage_limit: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "SPRING20",
                    "discount_type": "percentage",
                    "discount_value": 20,
                    "product_ids": ["3f2b8a9e-6f7c-4d1e-9a51-0c2f1d4b7e88"],
                    "valid_from": "2026-03-01T00:00:00Z",
                    "valid_until": "2026-06-01T00:00:00Z",
                    "usage_limit": 500,
                }
            ]
        }
    }


class EditCouponRequest(BaseModel):
    """Any subset of the editable fields; only fields present in the body are applied."""

    code: str | None = None
    discount_value: float | None = None
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    usage_limit: int | None = None
    product_ids: list[str] | None = None


class ApplyCouponRequest(BaseModel):
    coupon_code: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductSummarySchema(BaseModel):
    id: str
    name: str


class CouponSchema(BaseModel):
    id: str
    code: str
    discount_type: str
    discount_value: float
    product_ids: list[str]
    products: list[ProductSummarySchema]
    valid_from: datetime
    valid_until: datetime
    usage_limit: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CartItemSchema(BaseModel):
    product_id: str
    price: float
    quantity: int
    discounted_price: float | None = None
    name: str | None = None
    sku: str | None = None


class AppliedCouponSchema(BaseModel):
    coupon_id: str
    code: str
    discount_value: float
    discount_type: str
    applied_at: datetime | None = None


class CartSchema(BaseModel):
    id: str
    customer_id: str
    items: list[CartItemSchema]
    applied_coupons: list[AppliedCouponSchema]
    total_price: float
    discounted_total: float
