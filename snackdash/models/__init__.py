"""SQLAlchemy models."""
from snackdash.models.tenant import Tenant
from snackdash.models.product import Product
from snackdash.models.order import Order

__all__ = ["Tenant", "Product", "Order"]
