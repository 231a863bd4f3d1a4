"""Coupon editing: partial update command and handler.

Request bodies may legitimately carry falsy values (a usage limit of 0, an
empty product list), so the command lists which fields the caller actually
supplied in ``provided_fields`` instead of relying on truthiness.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, List, String
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon
from promotions.domain import promotions
from promotions.shared.identifiers import ensure_valid_id
from promotions.utils.logging import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("code", "discount_value", "valid_from", "valid_until", "usage_limit", "product_ids")


@promotions.command(part_of="Coupon")
class EditCoupon:
    coupon_id = Identifier(required=True)
    code = String(max_length=100)
    discount_value = Float()
    valid_from = DateTime()
    valid_until = DateTime()
    usage_limit = Integer(min_value=0)
    product_ids = List(content_type=String)
    provided_fields = List(content_type=String)


def load_coupon(coupon_id) -> Coupon:
    """Fetch a coupon by id, validating the id format first."""
    coupon_id = ensure_valid_id(coupon_id, "coupon_id", "Invalid coupon ID")
    try:
        return current_domain.repository_for(Coupon).get(coupon_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"coupon": ["Coupon not found"]}) from None


@promotions.command_handler(part_of=Coupon)
class EditCouponHandler:
    @handle(EditCoupon)
    def edit_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = load_coupon(command.coupon_id)

        provided = set(command.provided_fields or []) & set(EDITABLE_FIELDS)
        changes = {}

        if "code" in provided and command.code:
            if repo.code_taken(command.code, exclude_id=coupon.id):
                raise ValidationError({"code": ["Coupon code already exists"]})
            changes["code"] = command.code

        # The window only moves as a pair; a lone bound is ignored
        if {"valid_from", "valid_until"} <= provided and command.valid_from and command.valid_until:
            changes["valid_from"] = command.valid_from
            changes["valid_until"] = command.valid_until

        if "discount_value" in provided:
            changes["discount_value"] = command.discount_value
        if "usage_limit" in provided:
            changes["usage_limit"] = command.usage_limit
        if "product_ids" in provided:
            changes["product_ids"] = [
                ensure_valid_id(product_id, "product_ids", "Invalid product ID")
                for product_id in command.product_ids or []
            ]

        coupon.revise(**changes)
        repo.add(coupon)

        logger.info(
            "Coupon edited",
            coupon_id=str(coupon.id),
            revised_fields=sorted(changes),
            ignored_fields=sorted(provided - set(changes)),
        )
        return str(coupon.id)
