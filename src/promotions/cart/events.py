"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from promotions.domain import promotions


@promotions.event(part_of="ShoppingCart")
class CartCouponApplied:
    """A coupon was applied to a shopping cart and its totals recomputed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    coupon_id = Identifier(required=True)
    coupon_code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    discounted_items = Integer(required=True)
    total_price = Float(required=True)
    discounted_total = Float(required=True)
