"""Domain interfaces following Dependency Inversion Principle."""

from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider, PaymentProviderResponse
from payment_optimizer.domain.interfaces.order_repository import IOrderRepository
from payment_optimizer.domain.interfaces.provider_selector import IPaymentProviderSelector, QuoteResult

__all__ = [
    "IPaymentProvider",
    "PaymentProviderResponse",
    "IOrderRepository",
    "IPaymentProviderSelector",
    "QuoteResult",
]
