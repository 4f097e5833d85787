"""Interface for the cost-optimal provider selector."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider


@dataclass(frozen=True)
class QuoteResult:
    """Outcome of asking one provider for a commission quote."""

    provider: IPaymentProvider
    commission: Optional[Decimal] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.commission is not None


class IPaymentProviderSelector(ABC):
    """Selects the provider that charges the lowest commission for an order."""

    @abstractmethod
    async def select_optimal_provider(self, order: Order) -> Tuple[IPaymentProvider, Decimal]:
        """
        Pick the cheapest capable provider.

        Returns:
            Tuple of (provider, quoted commission)

        Raises:
            NoCapableProviderError: If no provider supports the payment method
            NoEvaluableProviderError: If every capable provider failed to quote
        """
        pass

    @abstractmethod
    async def evaluate_providers(self, order: Order) -> List[QuoteResult]:
        """Quote every capable provider, in registration order."""
        pass

    @abstractmethod
    def get_provider_by_name(self, name: str) -> Optional[IPaymentProvider]:
        """Case-insensitive lookup; None when no provider has that name."""
        pass

    @abstractmethod
    def list_providers(self) -> List[IPaymentProvider]:
        """Return every registered provider in registration order."""
        pass
