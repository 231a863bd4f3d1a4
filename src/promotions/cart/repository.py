"""Repository for the ShoppingCart aggregate."""

from promotions.cart.cart import ShoppingCart
from promotions.domain import promotions


@promotions.repository(part_of=ShoppingCart)
class CartRepository:
    def get_for_customer(self, customer_id) -> ShoppingCart | None:
        """Return the customer's cart with its items loaded, or None."""
        carts = self._dao.query.filter(customer_id=str(customer_id)).all().items
        if not carts:
            return None
        return self.get(carts[0].id)
