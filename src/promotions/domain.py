"""Promotions bounded context: Coupons and their application to carts.

Owns the coupon registry (create, edit, delete, verify) and the coupon
application transaction that discounts a customer's shopping cart.
"""

from protean.domain import Domain

from promotions.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir="logs", log_file_prefix="promotions")

logger = get_logger(__name__)

# Domain Composition Root
promotions = Domain(name="promotions")
