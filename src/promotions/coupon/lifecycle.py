"""Coupon lifecycle: activation and deactivation commands and handler.

Deactivating a coupon stops it from being applied to carts while keeping
the record (and its code) in the registry.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon
from promotions.coupon.editing import load_coupon
from promotions.domain import promotions


@promotions.command(part_of="Coupon")
class ActivateCoupon:
    coupon_id = Identifier(required=True)


@promotions.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


@promotions.command_handler(part_of=Coupon)
class CouponLifecycleHandler:
    @handle(ActivateCoupon)
    def activate_coupon(self, command):
        coupon = load_coupon(command.coupon_id)
        coupon.activate()
        current_domain.repository_for(Coupon).add(coupon)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        coupon = load_coupon(command.coupon_id)
        coupon.deactivate()
        current_domain.repository_for(Coupon).add(coupon)
