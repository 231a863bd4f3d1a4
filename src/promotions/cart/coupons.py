"""Applying a coupon to a customer's cart: command and handler.

The handler is the whole transaction: it reads the cart, the coupon and the
covered products, discounts the cart and saves it. It runs inside the unit
of work that ``@handle`` opens for the duration of the call, so every
repository call below joins the same transaction. Returning commits it;
raising anything rolls it back and nothing is persisted.

Usage limits are not checked or consumed here, and a coupon can be applied
to the same cart more than once (each application compounds the discount
and appends another audit entry). Callers must not retry blindly.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from promotions.cart.cart import ShoppingCart
from promotions.coupon.coupon import Coupon
from promotions.domain import promotions
from promotions.product.product import Product
from promotions.shared.clock import utc_now
from promotions.utils.logging import get_logger

logger = get_logger(__name__)


@promotions.command(part_of="ShoppingCart")
class ApplyCouponToCart:
    """Apply a coupon code to the cart owned by ``customer_id``."""

    customer_id = Identifier(required=True)
    coupon_code = String(max_length=100)


def _covered_products(cart, coupon) -> dict:
    repo = current_domain.repository_for(Product)
    products = {}
    for item in cart.items:
        product_id = str(item.product_id)
        if product_id in products or not coupon.applies_to(product_id):
            continue
        try:
            products[product_id] = repo.get(product_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"product": [f"Product {product_id} not found"]}) from None
    return products


@promotions.command_handler(part_of=ShoppingCart)
class ApplyCouponHandler:
    @handle(ApplyCouponToCart)
    def apply_coupon(self, command):
        if not command.coupon_code:
            raise ValidationError({"coupon_code": ["Coupon code is required"]})

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.get_for_customer(command.customer_id)
        if cart is None:
            raise ObjectNotFoundError({"cart": ["Cart not found"]})

        coupon = current_domain.repository_for(Coupon).get_by_code(command.coupon_code)
        if coupon is None:
            raise ValidationError({"coupon_code": ["Invalid coupon code"]})

        # Only the end of the window is enforced here
        if not coupon.is_active or coupon.has_ended(utc_now()):
            logger.info(
                "Coupon rejected",
                customer_id=str(command.customer_id),
                coupon_code=coupon.code,
                is_active=coupon.is_active,
                valid_until=str(coupon.valid_until),
            )
            raise ValidationError({"coupon_code": ["Coupon is no longer valid"]})

        products = _covered_products(cart, coupon)
        discounted_items = cart.apply_coupon(coupon, products)
        cart_repo.add(cart)

        logger.info(
            "Coupon applied",
            cart_id=str(cart.id),
            customer_id=str(command.customer_id),
            coupon_code=coupon.code,
            discounted_items=discounted_items,
            total_price=cart.total_price,
            discounted_total=cart.discounted_total,
        )
        return str(cart.id)
