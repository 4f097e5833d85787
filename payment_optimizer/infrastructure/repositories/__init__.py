"""Repository implementations (Infrastructure Layer).

Repository implementations for data persistence.
These implement domain interfaces defined in payment_optimizer.domain.interfaces.
"""
from payment_optimizer.infrastructure.repositories.order_repository import InMemoryOrderRepository

__all__ = [
    "InMemoryOrderRepository",
]
