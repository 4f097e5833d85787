"""Factories for creating provider instances (Factory Pattern)."""

from payment_optimizer.infrastructure.factories.provider_factory import ProviderFactory

__all__ = [
    "ProviderFactory",
]
