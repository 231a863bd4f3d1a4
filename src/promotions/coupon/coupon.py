"""Coupon aggregate root: a named discount rule with a validity window.

A coupon discounts the products listed in ``product_ids`` (its applicability
set), either by a percentage or by a fixed amount per unit. It is active by
default and can be switched off without being deleted.

``usage_limit`` is recorded but not enforced anywhere in this domain.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, List, String

from promotions.coupon.events import (
    CouponActivated,
    CouponCreated,
    CouponDeactivated,
    CouponRevised,
)
from promotions.domain import promotions
from promotions.shared.clock import as_utc

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_WINDOW_ERROR = "Valid Until must be later than Valid From"


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


def _window_is_ordered(valid_from, valid_until):
    return as_utc(valid_from) < as_utc(valid_until)


def _check_discount(discount_type, discount_value):
    if discount_value <= 0:
        raise ValidationError({"discount_value": ["Discount value must be greater than zero"]})
    if discount_type == DiscountType.PERCENTAGE.value and discount_value > 100:
        raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})


@promotions.aggregate
class Coupon:
    code = String(required=True, max_length=100)
    discount_type = String(required=True, max_length=20, choices=DiscountType)
    discount_value = Float(required=True)
    product_ids = List(content_type=String)
    valid_from = DateTime(required=True)
    valid_until = DateTime(required=True)
    usage_limit = Integer(required=True, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from is None or self.valid_until is None:
            return
        if not _window_is_ordered(self.valid_from, self.valid_until):
            raise ValidationError({"valid_until": [_WINDOW_ERROR]})

    @invariant.post
    def discount_value_must_fit_discount_type(self):
        if self.discount_value is None:
            return
        _check_discount(self.discount_type, self.discount_value)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        valid_from,
        valid_until,
        usage_limit,
        product_ids=None,
    ):
        if not _window_is_ordered(valid_from, valid_until):
            raise ValidationError({"valid_until": [_WINDOW_ERROR]})
        if discount_value is not None:
            _check_discount(discount_type, discount_value)

        now = datetime.now(UTC)
        coupon = cls(
            code=code,
            discount_type=discount_type,
            discount_value=discount_value,
            product_ids=[str(product_id) for product_id in product_ids or []],
            valid_from=valid_from,
            valid_until=valid_until,
            usage_limit=usage_limit,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

        coupon.raise_(
            CouponCreated(
                coupon_id=str(coupon.id),
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                valid_from=coupon.valid_from,
                valid_until=coupon.valid_until,
                usage_limit=coupon.usage_limit,
            )
        )
        return coupon

    # -------------------------------------------------------------------
    # Applicability and validity
    # -------------------------------------------------------------------
    @property
    def applicable_products(self) -> set[str]:
        return {str(product_id) for product_id in self.product_ids or []}

    def applies_to(self, product_id) -> bool:
        return str(product_id) in self.applicable_products

    def has_started(self, at: datetime) -> bool:
        return as_utc(self.valid_from) <= as_utc(at)

    def has_ended(self, at: datetime) -> bool:
        return as_utc(self.valid_until) < as_utc(at)

    def is_within_window(self, at: datetime) -> bool:
        return self.has_started(at) and not self.has_ended(at)

    def discounted_price(self, price: float) -> float:
        """Price of one unit after this coupon's discount, never below zero."""
        if self.discount_type == DiscountType.PERCENTAGE.value:
            discounted = price * (1 - self.discount_value / 100)
        else:
            discounted = price - self.discount_value
        return round(max(discounted, 0.0), 2)

    # -------------------------------------------------------------------
    # Revision
    # -------------------------------------------------------------------
    def revise(
        self,
        code=_UNSET,
        discount_value=_UNSET,
        valid_from=_UNSET,
        valid_until=_UNSET,
        usage_limit=_UNSET,
        product_ids=_UNSET,
    ):
        """Overwrite the supplied fields; omitted ones are left as they are.

        The validity window only moves when both of its bounds are supplied.
        """
        changes = {}
        if code is not _UNSET:
            changes["code"] = code
        if valid_from is not _UNSET and valid_until is not _UNSET:
            if not _window_is_ordered(valid_from, valid_until):
                raise ValidationError({"valid_until": [_WINDOW_ERROR]})
            changes["valid_from"] = valid_from
            changes["valid_until"] = valid_until
        if discount_value is not _UNSET:
            if discount_value is not None:
                _check_discount(self.discount_type, discount_value)
            changes["discount_value"] = discount_value
        if usage_limit is not _UNSET:
            changes["usage_limit"] = usage_limit
        if product_ids is not _UNSET:
            changes["product_ids"] = [str(product_id) for product_id in product_ids or []]

        if not changes:
            return

        with atomic_change(self):
            for field, value in changes.items():
                setattr(self, field, value)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CouponRevised(
                coupon_id=str(self.id),
                code=self.code,
                revised_fields=sorted(changes),
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def activate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Coupon is already active"]})

        self.is_active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(CouponActivated(coupon_id=str(self.id), code=self.code))

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Coupon is already inactive"]})

        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(CouponDeactivated(coupon_id=str(self.id), code=self.code))
