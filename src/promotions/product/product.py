"""Product aggregate: the catalogue data a coupon transaction reads.

Only the fields needed to resolve coupon applicability and to denormalize
discounted cart lines are kept here.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, String

from promotions.domain import promotions


@promotions.aggregate
class Product:
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    created_at = DateTime()

    @classmethod
    def create(cls, name, sku, price):
        return cls(
            name=name,
            sku=sku,
            price=price,
            created_at=datetime.now(UTC),
        )
