"""API endpoints module.

This module contains all HTTP API endpoints organized by domain.
"""

from payment_optimizer.api.orders import orders_blueprint
from payment_optimizer.api.providers import providers_blueprint
from payment_optimizer.api.health import health_blueprint

__all__ = [
    "orders_blueprint",
    "providers_blueprint",
    "health_blueprint",
]
