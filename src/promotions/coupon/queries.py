"""Read side of the coupon registry: listing and fetching coupons.

Reads go straight to the repositories; they do not run in a unit of work.
Each coupon is returned with its applicable products resolved to their
display names.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon
from promotions.coupon.editing import load_coupon
from promotions.product.product import Product


def _resolve_products(coupon: Coupon) -> list[dict]:
    repo = current_domain.repository_for(Product)
    products = []
    for product_id in coupon.product_ids or []:
        try:
            product = repo.get(product_id)
        except ObjectNotFoundError:
            # Dangling references are left out rather than failing the read
            continue
        products.append({"id": str(product.id), "name": product.name})
    return products


def coupon_detail(coupon: Coupon) -> dict:
    return {
        "id": str(coupon.id),
        "code": coupon.code,
        "discount_type": coupon.discount_type,
        "discount_value": coupon.discount_value,
        "product_ids": [str(product_id) for product_id in coupon.product_ids or []],
        "products": _resolve_products(coupon),
        "valid_from": coupon.valid_from,
        "valid_until": coupon.valid_until,
        "usage_limit": coupon.usage_limit,
        "is_active": coupon.is_active,
        "created_at": coupon.created_at,
        "updated_at": coupon.updated_at,
    }


def list_coupons() -> list[dict]:
    return [coupon_detail(coupon) for coupon in current_domain.repository_for(Coupon).list_all()]


def get_coupon(coupon_id) -> dict:
    return coupon_detail(load_coupon(coupon_id))
