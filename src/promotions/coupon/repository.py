"""Repository for the Coupon aggregate."""

from promotions.coupon.coupon import Coupon
from promotions.domain import promotions


@promotions.repository(part_of=Coupon)
class CouponRepository:
    def get_by_code(self, code: str) -> Coupon | None:
        """Find a coupon by its exact, case-sensitive code."""
        coupons = self._dao.query.filter(code=code).all().items
        return coupons[0] if coupons else None

    def code_taken(self, code: str, exclude_id=None) -> bool:
        existing = self.get_by_code(code)
        if existing is None:
            return False
        return exclude_id is None or str(existing.id) != str(exclude_id)

    def list_all(self) -> list[Coupon]:
        return self._dao.query.order_by("code").all().items

    def remove(self, coupon: Coupon) -> None:
        self._dao.delete(coupon)
