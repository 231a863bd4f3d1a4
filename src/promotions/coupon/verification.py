"""Coupon verification: a read-only compatibility check.

Lets a client find out, before trying to apply a coupon, whether it exists,
covers a given product and is inside its validity window right now. Both
ends of the window are checked here; applying a coupon to a cart only
checks the end.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon
from promotions.product.product import Product
from promotions.shared.clock import utc_now
from promotions.shared.identifiers import ensure_valid_id


def verify_coupon(coupon_code, product_id, at=None) -> None:
    """Raise if ``coupon_code`` cannot be used on ``product_id`` at ``at`` (default: now)."""
    if not coupon_code or not product_id:
        raise ValidationError({"coupon": ["Coupon code and product ID are required"]})

    product_id = ensure_valid_id(product_id, "product_id", "Invalid product ID")

    coupon = current_domain.repository_for(Coupon).get_by_code(coupon_code)
    if coupon is None:
        raise ObjectNotFoundError({"coupon": ["Coupon not found"]})

    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"product": ["Product not found"]}) from None

    if not coupon.applies_to(product.id):
        raise ValidationError({"product_id": ["Coupon is not applicable to this product"]})

    if not coupon.is_within_window(at or utc_now()):
        raise ValidationError({"coupon": ["Coupon is not valid in the current date range"]})
