"""FastAPI routes for the Promotions domain: coupons and cart coupon application.

Writes go through Protean commands; reads use the registry queries directly.
Every response is wrapped in an ``ApiResponse`` envelope.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from protean.utils.globals import current_domain

from promotions.api.schemas import (
    ApiResponse,
    ApplyCouponRequest,
    CartSchema,
    CouponSchema,
    CreateCouponRequest,
    EditCouponRequest,
)
from promotions.cart.cart import ShoppingCart
from promotions.cart.coupons import ApplyCouponToCart
from promotions.coupon.creation import CreateCoupon
from promotions.coupon.deletion import DeleteCoupon
from promotions.coupon.editing import EditCoupon
from promotions.coupon.lifecycle import ActivateCoupon, DeactivateCoupon
from promotions.coupon.queries import get_coupon, list_coupons
from promotions.coupon.verification import verify_coupon


async def current_customer_id(x_customer_id: str = Header(default="")) -> str:
    """Identity of the authenticated customer, forwarded by the gateway."""
    if not x_customer_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_customer_id


def _cart_payload(cart: ShoppingCart) -> CartSchema:
    return CartSchema(
        id=str(cart.id),
        customer_id=str(cart.customer_id),
        items=[
            {
                "product_id": str(item.product_id),
                "price": item.price,
                "quantity": item.quantity,
                "discounted_price": item.discounted_price,
                "name": item.name,
                "sku": item.sku,
            }
            for item in cart.items
        ],
        applied_coupons=[
            {
                "coupon_id": str(applied.coupon_id),
                "code": applied.code,
                "discount_value": applied.discount_value,
                "discount_type": applied.discount_type,
                "applied_at": applied.applied_at,
            }
            for applied in cart.applied_coupons
        ],
        total_price=cart.total_price or 0.0,
        discounted_total=cart.discounted_total or 0.0,
    )


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.post("", status_code=201, response_model=ApiResponse[CouponSchema])
async def create_coupon(body: CreateCouponRequest) -> ApiResponse[CouponSchema]:
    command = CreateCoupon(
        code=body.code,
        discount_type=body.discount_type.value,
        discount_value=body.discount_value,
        product_ids=body.product_ids,
        valid_from=body.valid_from,
        valid_until=body.valid_until,
        usage_limit=body.usage_limit,
    )
    coupon_id = current_domain.process(command, asynchronous=False)
    return ApiResponse(
        status_code=201,
        data=get_coupon(coupon_id),
        message="Coupon created successfully",
    )


@coupon_router.get("", response_model=ApiResponse[list[CouponSchema]])
async def get_coupons() -> ApiResponse[list[CouponSchema]]:
    return ApiResponse(data=list_coupons(), message="Coupons fetched successfully")


@coupon_router.get("/verify", response_model=ApiResponse[dict])
async def verify(
    coupon_code: str | None = Query(default=None),
    product_id: str | None = Query(default=None),
) -> ApiResponse[dict]:
    """Check whether a coupon can currently be used on a product."""
    verify_coupon(coupon_code, product_id)
    return ApiResponse(data={}, message="Coupon verified successfully")


@coupon_router.get("/{coupon_id}", response_model=ApiResponse[CouponSchema])
async def get_coupon_by_id(coupon_id: str) -> ApiResponse[CouponSchema]:
    return ApiResponse(data=get_coupon(coupon_id), message="Coupon fetched successfully")


@coupon_router.put("/{coupon_id}", response_model=ApiResponse[CouponSchema])
async def edit_coupon(coupon_id: str, body: EditCouponRequest) -> ApiResponse[CouponSchema]:
    provided = sorted(body.model_fields_set)
    command = EditCoupon(
        coupon_id=coupon_id,
        provided_fields=provided,
        **body.model_dump(include=body.model_fields_set),
    )
    current_domain.process(command, asynchronous=False)
    return ApiResponse(data=get_coupon(coupon_id), message="Coupon updated successfully")


@coupon_router.delete("/{coupon_id}", response_model=ApiResponse[dict])
async def delete_coupon(coupon_id: str) -> ApiResponse[dict]:
    current_domain.process(DeleteCoupon(coupon_id=coupon_id), asynchronous=False)
    return ApiResponse(data={}, message="Coupon deleted successfully")


@coupon_router.put("/{coupon_id}/activate", response_model=ApiResponse[CouponSchema])
async def activate_coupon(coupon_id: str) -> ApiResponse[CouponSchema]:
    current_domain.process(ActivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return ApiResponse(data=get_coupon(coupon_id), message="Coupon activated successfully")


@coupon_router.put("/{coupon_id}/deactivate", response_model=ApiResponse[CouponSchema])
async def deactivate_coupon(coupon_id: str) -> ApiResponse[CouponSchema]:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return ApiResponse(data=get_coupon(coupon_id), message="Coupon deactivated successfully")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("/coupons", response_model=ApiResponse[CartSchema])
async def apply_coupon(
    body: ApplyCouponRequest,
    customer_id: str = Depends(current_customer_id),
) -> ApiResponse[CartSchema]:
    """Apply a coupon to the authenticated customer's cart and return the updated cart."""
    command = ApplyCouponToCart(
        customer_id=customer_id,
        coupon_code=body.coupon_code,
    )
    cart_id = current_domain.process(command, asynchronous=False)
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    return ApiResponse(data=_cart_payload(cart), message="Coupon applied successfully")
