"""Interface for payment providers (Strategy Pattern).

Every integrated payment provider (PagaFacil, CazaPagos, the in-process
mock, ...) implements this contract. The order service and the provider
selector only ever talk to providers through it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.enums import OrderStatus, PaymentMethod


@dataclass
class PaymentProviderResponse:
    """Uniform response returned by every remote provider operation."""

    success: bool
    message: str = ""
    provider_order_reference: Optional[str] = None
    amount: Decimal = Decimal("0")
    status: OrderStatus = OrderStatus.CREATED
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payload: Optional[Any] = None

    @classmethod
    def failure(cls, message: str, provider_order_reference: Optional[str] = None) -> "PaymentProviderResponse":
        return cls(
            success=False,
            message=message,
            provider_order_reference=provider_order_reference,
            status=OrderStatus.FAILED,
        )


class IPaymentProvider(ABC):
    """
    Interface for payment providers following Strategy Pattern.

    Implementations can be swapped without changing business logic.
    Remote operations (create/get/cancel/pay/list) report failures through
    ``PaymentProviderResponse.success`` instead of raising.
    ``calculate_commission`` may raise; callers decide how to absorb it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable provider name (e.g. ``"PagaFacil"``)."""
        pass

    @abstractmethod
    def supports_payment_method(self, method: PaymentMethod) -> bool:
        """
        Check whether this provider accepts a payment method.

        Args:
            method: Payment method to check

        Returns:
            True if the provider can process orders paid with ``method``
        """
        pass

    @abstractmethod
    async def calculate_commission(self, order: Order) -> Decimal:
        """
        Quote the commission this provider would charge for an order.

        Quoting has no side effects on the provider.

        Args:
            order: Order to quote

        Returns:
            Commission amount

        Raises:
            Exception: If the quote cannot be produced
        """
        pass

    @abstractmethod
    async def create_order(self, order: Order) -> PaymentProviderResponse:
        """
        Create the order on the provider side.

        Args:
            order: Order to create remotely

        Returns:
            Response carrying the provider order reference on success
        """
        pass

    @abstractmethod
    async def get_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        """Fetch a provider-side order by its reference."""
        pass

    @abstractmethod
    async def cancel_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        """Cancel a provider-side order."""
        pass

    @abstractmethod
    async def pay_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        """Mark a provider-side order as paid."""
        pass

    @abstractmethod
    async def list_orders(self) -> List[PaymentProviderResponse]:
        """List every order known to the provider."""
        pass
