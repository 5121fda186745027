"""Enum definitions for the application."""
from enum import Enum


class OrderStatus(str, Enum):
    """Order fulfillment status."""
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class DeliveryMethod(str, Enum):
    """How the customer receives the order."""
    DINE_IN = "DINE_IN"
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"


class TenantPlan(str, Enum):
    """Tenant subscription plan options."""
    TRIAL = "TRIAL"
    BASIC = "BASIC"
    PRO = "PRO"


class AuthScope(str, Enum):
    """Credential scopes. Never shared between each other."""
    MASTER = "MASTER"
    TENANT_ADMIN = "TENANT_ADMIN"


DEFAULT_CATEGORIES = [
    "Burgers",
    "Hot Dogs",
    "Sides",
    "Drinks",
    "Desserts",
    "Combos",
]
