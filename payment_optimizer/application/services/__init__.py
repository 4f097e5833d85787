"""Application services module.

Order lifecycle orchestration and provider queries.
"""
from payment_optimizer.application.services.order_service import OrderService
from payment_optimizer.application.services.provider_service import ProviderService

__all__ = [
    "OrderService",
    "ProviderService",
]
