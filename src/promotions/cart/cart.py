"""Shopping Cart aggregate: line items, applied coupons and derived totals.

``total_price`` and ``discounted_total`` are derived from the items and are
recomputed in full whenever the cart changes; they are never adjusted
incrementally. ``applied_coupons`` is an append-only audit trail.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from promotions.cart.events import CartCouponApplied
from promotions.domain import promotions


def _money(amount: float) -> float:
    return round(amount, 2)


@promotions.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    discounted_price = Float(min_value=0.0)
    name = String(max_length=255)
    sku = String(max_length=50)

    @property
    def effective_price(self) -> float:
        return self.discounted_price if self.discounted_price is not None else self.price


@promotions.entity(part_of="ShoppingCart")
class AppliedCoupon:
    coupon_id = Identifier(required=True)
    code = String(required=True, max_length=100)
    discount_value = Float(required=True)
    discount_type = String(required=True, max_length=20)
    applied_at = DateTime()


@promotions.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    applied_coupons = HasMany(AppliedCoupon)
    total_price = Float(default=0.0)
    discounted_total = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discounted_total_cannot_exceed_total_price(self):
        if (self.discounted_total or 0.0) > (self.total_price or 0.0):
            raise ValidationError({"discounted_total": ["Discounted total cannot exceed the total price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            total_price=0.0,
            discounted_total=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add_item(self, product_id, price, quantity=1):
        """Add a line item at the given unit price."""
        with atomic_change(self):
            self.add_items(CartItem(product_id=product_id, price=price, quantity=quantity))
            self.recompute_totals()
            self.updated_at = datetime.now(UTC)

    def recompute_totals(self):
        self.total_price = _money(sum(item.price * item.quantity for item in self.items))
        self.discounted_total = _money(sum(item.effective_price * item.quantity for item in self.items))

    # -------------------------------------------------------------------
    # Coupons
    # -------------------------------------------------------------------
    def apply_coupon(self, coupon, products):
        """Discount every item the coupon covers and record the application.

        ``products`` maps product id to the resolved Product for each covered
        item; its name and SKU are copied onto the discounted line. The
        discount is taken from the item's current effective price, so
        applying a coupon again compounds it.
        """
        discounted_items = 0

        with atomic_change(self):
            for item in self.items:
                if not coupon.applies_to(item.product_id):
                    continue

                product = products[str(item.product_id)]
                item.discounted_price = coupon.discounted_price(item.effective_price)
                item.name = product.name
                item.sku = product.sku
                discounted_items += 1

            self.add_applied_coupons(
                AppliedCoupon(
                    coupon_id=str(coupon.id),
                    code=coupon.code,
                    discount_value=coupon.discount_value,
                    discount_type=coupon.discount_type,
                    applied_at=datetime.now(UTC),
                )
            )

            self.recompute_totals()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCouponApplied(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                coupon_id=str(coupon.id),
                coupon_code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                discounted_items=discounted_items,
                total_price=self.total_price,
                discounted_total=self.discounted_total,
            )
        )
        return discounted_items
