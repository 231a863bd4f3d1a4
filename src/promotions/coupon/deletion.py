"""Coupon deletion: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon
from promotions.coupon.editing import load_coupon
from promotions.domain import promotions
from promotions.utils.logging import get_logger

logger = get_logger(__name__)


@promotions.command(part_of="Coupon")
class DeleteCoupon:
    coupon_id = Identifier(required=True)


@promotions.command_handler(part_of=Coupon)
class DeleteCouponHandler:
    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        coupon = load_coupon(command.coupon_id)
        current_domain.repository_for(Coupon).remove(coupon)

        logger.info("Coupon deleted", coupon_id=str(coupon.id), code=coupon.code)
