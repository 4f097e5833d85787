"""Domain exceptions.

Raised by entities, the provider selector and the order service when
business rules are violated. The API layer translates them into HTTP
responses (see ``payment_optimizer.middleware.error_handler``).
"""
from typing import Dict, Optional


class PaymentOptimizerError(Exception):
    """Base class for all errors raised by the payment optimizer."""


class ValidationError(PaymentOptimizerError):
    """Malformed input to a domain operation."""


class IllegalStateError(PaymentOptimizerError):
    """Operation attempted from an order status that forbids it."""


class NotFoundError(PaymentOptimizerError):
    """The requested order does not exist."""


class NoCapableProviderError(PaymentOptimizerError):
    """No registered provider supports the requested payment method."""


class NoEvaluableProviderError(PaymentOptimizerError):
    """Every capable provider failed to produce a commission quote."""

    def __init__(self, message: str, failures: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.failures = failures or {}


class ProviderOperationError(PaymentOptimizerError):
    """A remote create/cancel/pay call on a provider reported failure."""

    def __init__(self, message: str, provider_name: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.provider_name = provider_name
        self.operation = operation
