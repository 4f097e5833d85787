"""Registries that coordinate infrastructure components."""
from payment_optimizer.infrastructure.managers.provider_selector import PaymentProviderSelector

__all__ = [
    "PaymentProviderSelector",
]
