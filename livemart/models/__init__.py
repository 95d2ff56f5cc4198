"""Application models package."""

from livemart.models.audit_log import AuditLog
from livemart.models.delivery import DeliveryPartner, DeliveryTracking
from livemart.models.order import Order, OrderItem
from livemart.models.product import Product
from livemart.models.user import User

__all__ = [
    "AuditLog", "DeliveryPartner", "DeliveryTracking", "Order", "OrderItem", "Product", "User",
]
