"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, List, String

from promotions.domain import promotions


@promotions.event(part_of="Coupon")
class CouponCreated:
    """A new coupon was added to the registry."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    valid_from = DateTime(required=True)
    valid_until = DateTime(required=True)
    usage_limit = Integer()


@promotions.event(part_of="Coupon")
class CouponRevised:
    """One or more coupon fields were overwritten by an edit."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    revised_fields = List(content_type=String)


@promotions.event(part_of="Coupon")
class CouponActivated:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)


@promotions.event(part_of="Coupon")
class CouponDeactivated:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
