"""Coupon creation: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, List, String
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon, DiscountType
from promotions.domain import promotions
from promotions.shared.identifiers import ensure_valid_id
from promotions.utils.logging import get_logger

logger = get_logger(__name__)


@promotions.command(part_of="Coupon")
class CreateCoupon:
    """Register a new coupon. Every field except ``product_ids`` is mandatory."""

    code = String(required=True, max_length=100)
    discount_type = String(required=True, max_length=20, choices=DiscountType)
    discount_value = Float(required=True)
    product_ids = List(content_type=String)
    valid_from = DateTime(required=True)
    valid_until = DateTime(required=True)
    usage_limit = Integer(required=True, min_value=0)


@promotions.command_handler(part_of=Coupon)
class CreateCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)

        if repo.code_taken(command.code):
            raise ValidationError({"code": ["Coupon code already exists"]})

        product_ids = [
            ensure_valid_id(product_id, "product_ids", "Invalid product ID") for product_id in command.product_ids or []
        ]

        coupon = Coupon.create(
            code=command.code,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
            usage_limit=command.usage_limit,
            product_ids=product_ids,
        )
        repo.add(coupon)

        logger.info(
            "Coupon created",
            coupon_id=str(coupon.id),
            code=coupon.code,
            discount_type=coupon.discount_type,
            discount_value=coupon.discount_value,
        )
        return str(coupon.id)
