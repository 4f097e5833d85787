"""Test doubles and builders shared by the test modules."""
from decimal import Decimal
from typing import Iterable, List, Optional

from payment_optimizer.application.dto import CreateOrderRequest, OrderItemRequest
from payment_optimizer.domain.entities.order import Order, OrderItem
from payment_optimizer.domain.enums import OrderStatus, PaymentMethod
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider, PaymentProviderResponse


class StubProvider(IPaymentProvider):
    """Provider double with a fixed quote and scripted remote responses."""

    def __init__(
        self,
        name: str,
        commission: Optional[Decimal] = None,
        quote_error: Optional[Exception] = None,
        methods: Iterable[PaymentMethod] = (PaymentMethod.CASH, PaymentMethod.CREDIT_CARD),
        create_success: bool = True,
        cancel_success: bool = True,
        pay_success: bool = True,
    ):
        self._name = name
        self.commission = commission
        self.quote_error = quote_error
        self.methods = set(methods)
        self.create_success = create_success
        self.cancel_success = cancel_success
        self.pay_success = pay_success
        self.created: List[Order] = []
        self.cancelled: List[str] = []
        self.paid: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    def supports_payment_method(self, method: PaymentMethod) -> bool:
        return method in self.methods

    async def calculate_commission(self, order: Order) -> Decimal:
        if self.quote_error is not None:
            raise self.quote_error
        return self.commission

    async def create_order(self, order: Order) -> PaymentProviderResponse:
        self.created.append(order)
        if not self.create_success:
            return PaymentProviderResponse.failure(f"{self._name} rejected the order")
        return PaymentProviderResponse(
            success=True,
            provider_order_reference=f"{self._name}-{len(self.created)}",
            amount=order.amount,
        )

    async def get_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        return PaymentProviderResponse(success=True, provider_order_reference=provider_order_reference)

    async def cancel_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        self.cancelled.append(provider_order_reference)
        if not self.cancel_success:
            return PaymentProviderResponse.failure(f"{self._name} refused to cancel", provider_order_reference)
        return PaymentProviderResponse(
            success=True, provider_order_reference=provider_order_reference, status=OrderStatus.CANCELLED
        )

    async def pay_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        self.paid.append(provider_order_reference)
        if not self.pay_success:
            return PaymentProviderResponse.failure(f"{self._name} refused to pay", provider_order_reference)
        return PaymentProviderResponse(
            success=True, provider_order_reference=provider_order_reference, status=OrderStatus.PAID
        )

    async def list_orders(self) -> List[PaymentProviderResponse]:
        return []


def make_order(
    payment_method: PaymentMethod = PaymentMethod.CASH,
    price: str = "1200.00",
    quantity: int = 1,
) -> Order:
    return Order.create(payment_method, [OrderItem(name="Laptop", unit_price=Decimal(price), quantity=quantity)])


def make_request(
    payment_method: PaymentMethod = PaymentMethod.CASH,
    price: str = "1200.00",
    quantity: int = 1,
) -> CreateOrderRequest:
    return CreateOrderRequest(
        payment_method=payment_method,
        products=[OrderItemRequest(name="Laptop", unit_price=Decimal(price), quantity=quantity)],
    )
