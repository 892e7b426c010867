# Overview: Model registry; importing this package registers every table with SQLAlchemy.

from .users import User, Role, ApplicationStatus
from .inventory import InventoryItem
from .orders import Order, OrderItem, OrderStatus, Payment, PaymentStatus, ShippingAddress
from .reviews import Review
from .security import RevokedToken

__all__ = [
    'User', 'Role', 'ApplicationStatus',
    'InventoryItem',
    'Order', 'OrderItem', 'OrderStatus', 'Payment', 'PaymentStatus', 'ShippingAddress',
    'Review',
    'RevokedToken',
]
