"""In-process mock payment provider for development and testing."""
import asyncio
import logging
import random
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.enums import OrderStatus, PaymentMethod
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider, PaymentProviderResponse
from payment_optimizer.utils.money import round_money


logger = logging.getLogger(__name__)


class MockPaymentProvider(IPaymentProvider):
    """
    Mock implementation of a payment provider.

    Supports every payment method and keeps an in-memory order book so
    get/list/cancel/pay behave like a real provider. In production this
    would be replaced with an HTTP adapter.
    """

    FIXED_COMMISSIONS = {
        PaymentMethod.CASH: Decimal("5.00"),
        PaymentMethod.BANK_TRANSFER: Decimal("3.00"),
    }
    PERCENTAGE_COMMISSIONS = {
        PaymentMethod.CREDIT_CARD: Decimal("0.02"),
        PaymentMethod.DEBIT_CARD: Decimal("0.015"),
    }

    def __init__(
        self,
        name: str = "MockProvider",
        failure_rate: float = 0.0,
        latency_seconds: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize mock provider with an empty order book.

        Args:
            name: Provider name reported to the selector
            failure_rate: Probability (0..1) that create_order reports failure
            latency_seconds: Simulated network latency per call
            rng: Random generator (injectable for deterministic tests)
        """
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self._name = name
        self._failure_rate = failure_rate
        self._latency = latency_seconds
        self._rng = rng or random.Random()
        self._orders: Dict[str, PaymentProviderResponse] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return self._name

    def supports_payment_method(self, method: PaymentMethod) -> bool:
        return method in self.FIXED_COMMISSIONS or method in self.PERCENTAGE_COMMISSIONS

    async def _simulate_latency(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    async def calculate_commission(self, order: Order) -> Decimal:
        await self._simulate_latency()
        method = order.payment_method
        if method in self.FIXED_COMMISSIONS:
            return self.FIXED_COMMISSIONS[method]
        if method in self.PERCENTAGE_COMMISSIONS:
            return round_money(order.amount * self.PERCENTAGE_COMMISSIONS[method])
        raise ValueError(f"{self._name} does not support payment method {method.display_name}")

    async def create_order(self, order: Order) -> PaymentProviderResponse:
        await self._simulate_latency()

        if self._failure_rate and self._rng.random() < self._failure_rate:
            self._logger.warning(f"{self._name}: simulated failure creating order {order.id}")
            return PaymentProviderResponse.failure(f"{self._name}: simulated network error")

        stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
        reference = f"MOCK-{stamp}-{uuid.uuid4().hex[:8].upper()}"
        response = PaymentProviderResponse(
            success=True,
            message=f"Order created in {self._name} with reference {reference}",
            provider_order_reference=reference,
            amount=order.amount,
            status=OrderStatus.CREATED,
            payload={"mockProviderId": reference, "localOrderId": order.id, "testMode": True},
        )
        self._orders[reference] = replace(response)
        self._logger.info(f"{self._name}: created order {reference} for local order {order.id}")
        return response

    async def get_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        await self._simulate_latency()
        stored = self._orders.get(provider_order_reference)
        if stored is None:
            return PaymentProviderResponse.failure(
                f"{self._name}: order {provider_order_reference} not found",
                provider_order_reference,
            )
        return PaymentProviderResponse(
            success=True,
            message=f"Order {provider_order_reference} retrieved from {self._name}",
            provider_order_reference=provider_order_reference,
            amount=stored.amount,
            status=stored.status,
            payload=stored.payload,
        )

    async def _transition(
        self,
        provider_order_reference: str,
        target: OrderStatus,
        allowed: tuple,
        verb: str,
    ) -> PaymentProviderResponse:
        await self._simulate_latency()
        stored = self._orders.get(provider_order_reference)
        if stored is None:
            return PaymentProviderResponse.failure(
                f"{self._name}: order {provider_order_reference} not found",
                provider_order_reference,
            )
        if stored.status not in allowed:
            return PaymentProviderResponse.failure(
                f"{self._name}: cannot {verb} order in status {stored.status.display_name}",
                provider_order_reference,
            )
        stored.status = target
        stored.timestamp = datetime.now(timezone.utc)
        return PaymentProviderResponse(
            success=True,
            message=f"Order {provider_order_reference} {target.display_name.lower()} in {self._name}",
            provider_order_reference=provider_order_reference,
            amount=stored.amount,
            status=target,
        )

    async def cancel_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        return await self._transition(
            provider_order_reference,
            OrderStatus.CANCELLED,
            (OrderStatus.CREATED, OrderStatus.PROCESSING),
            "cancel",
        )

    async def pay_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        return await self._transition(
            provider_order_reference,
            OrderStatus.PAID,
            (OrderStatus.CREATED, OrderStatus.PROCESSING),
            "pay",
        )

    async def list_orders(self) -> List[PaymentProviderResponse]:
        await self._simulate_latency()
        return [replace(stored) for stored in self._orders.values()]
