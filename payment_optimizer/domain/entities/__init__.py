"""Domain entities - core business objects."""
from payment_optimizer.domain.entities.order import Order, OrderItem, Fee

__all__ = [
    "Order",
    "OrderItem",
    "Fee",
]
