"""Order orchestration service (Service Layer Pattern).

Coordinates the order repository, the provider selector and the providers
to create, cancel and pay orders. Remote provider state is changed first;
the local order only moves once the provider has confirmed.
"""
import logging
from functools import wraps
from typing import Awaitable, Callable, List

from payment_optimizer.application.dto import (
    CreateOrderRequest,
    OrderQuoteView,
    OrderView,
    ProviderQuoteView,
)
from payment_optimizer.domain.entities.order import Order, OrderItem
from payment_optimizer.domain.enums import OrderStatus
from payment_optimizer.domain.exceptions import (
    IllegalStateError,
    NotFoundError,
    ProviderOperationError,
)
from payment_optimizer.domain.interfaces.order_repository import IOrderRepository
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider, PaymentProviderResponse
from payment_optimizer.domain.interfaces.provider_selector import IPaymentProviderSelector
from payment_optimizer.middleware.monitoring import track_order_operation, track_provider_operation


def _tracked(operation: str):
    """Record the outcome of an order operation in metrics."""
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        async def wrapper(*args, **kwargs):
            try:
                result = await f(*args, **kwargs)
            except Exception:
                track_order_operation(operation, success=False)
                raise
            track_order_operation(operation, success=True)
            return result
        return wrapper
    return decorator


class OrderService:
    """
    Application service for the order lifecycle.

    Follows Service Layer Pattern - encapsulates the multi-step create,
    cancel and pay flows without being tied to the HTTP layer.
    """

    FEE_NAME_TEMPLATE = "Commission {provider}"

    def __init__(self, order_repository: IOrderRepository, provider_selector: IPaymentProviderSelector):
        """
        Initialize order service.

        Args:
            order_repository: Storage for orders
            provider_selector: Selector owning the registered providers
        """
        self.order_repository = order_repository
        self.provider_selector = provider_selector
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def _build_order(request: CreateOrderRequest) -> Order:
        items = [
            OrderItem(name=product.name, unit_price=product.unit_price, quantity=product.quantity)
            for product in request.products
        ]
        return Order.create(request.payment_method, items)

    async def _load(self, order_id: int) -> Order:
        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with id {order_id} not found")
        return order

    async def _call_provider(
        self,
        provider: IPaymentProvider,
        operation: str,
        call: Callable[[], Awaitable[PaymentProviderResponse]],
    ) -> PaymentProviderResponse:
        """Run a remote operation; exceptions become unsuccessful responses."""
        try:
            response = await call()
        except Exception as e:
            self._logger.error(f"{provider.name} raised during {operation}: {e}", exc_info=True)
            response = PaymentProviderResponse.failure(f"{provider.name} {operation} failed: {e}")
        track_provider_operation(provider.name, operation, response.success)
        return response

    def _attached_provider(self, order: Order, operation: str) -> IPaymentProvider:
        provider = self.provider_selector.get_provider_by_name(order.provider_name)
        if provider is None:
            raise ProviderOperationError(
                f"Provider '{order.provider_name}' of order {order.id} is not registered",
                provider_name=order.provider_name,
                operation=operation,
            )
        return provider

    @_tracked("create")
    async def create_order(self, request: CreateOrderRequest) -> OrderView:
        """
        Create an order and route it to the cheapest provider.

        The order is persisted before selection. If selection fails the
        order stays persisted in CREATED status. If the provider rejects the
        order it is marked FAILED (keeping the commission fee) and persisted.

        Args:
            request: Payment method and products

        Returns:
            View of the order in PROCESSING status

        Raises:
            ValidationError: If the order data is invalid
            NoCapableProviderError: If no provider supports the payment method
            NoEvaluableProviderError: If every capable provider failed to quote
            ProviderOperationError: If the selected provider rejected the order
        """
        order = self._build_order(request)
        self._logger.info(
            f"Creating order with {len(order.items)} items, "
            f"payment method {order.payment_method.display_name}, amount {order.amount}"
        )

        await self.order_repository.save(order)

        provider, commission = await self.provider_selector.select_optimal_provider(order)
        order.add_fee(self.FEE_NAME_TEMPLATE.format(provider=provider.name), commission)

        response = await self._call_provider(provider, "create", lambda: provider.create_order(order))
        if not response.success or not response.provider_order_reference:
            reason = response.message or "provider returned no order reference"
            self._logger.error(f"{provider.name} failed to create order {order.id}: {reason}")
            order.mark_as_failed(reason)
            await self.order_repository.update(order)
            raise ProviderOperationError(
                f"Error creating order in {provider.name}: {reason}",
                provider_name=provider.name,
                operation="create",
            )

        order.assign_to_provider(provider.name, response.provider_order_reference)
        await self.order_repository.update(order)

        self._logger.info(
            f"Order {order.id} assigned to {provider.name} "
            f"(reference {order.provider_order_reference}, total {order.amount})"
        )
        return OrderView.from_order(order)

    @_tracked("cancel")
    async def cancel_order(self, order_id: int) -> OrderView:
        """
        Cancel an order, on the provider first when one is attached.

        Raises:
            NotFoundError: If the order does not exist
            IllegalStateError: If the order can no longer be cancelled
            ProviderOperationError: If the provider refused the cancellation
        """
        order = await self._load(order_id)
        if order.status not in (OrderStatus.CREATED, OrderStatus.PROCESSING):
            raise IllegalStateError(f"Cannot cancel an order in {order.status.display_name} status")

        if order.has_provider:
            provider = self._attached_provider(order, "cancel")
            reference = order.provider_order_reference
            response = await self._call_provider(provider, "cancel", lambda: provider.cancel_order(reference))
            if not response.success:
                self._logger.error(f"{provider.name} refused to cancel order {order.id}: {response.message}")
                raise ProviderOperationError(
                    f"Error cancelling order in provider: {response.message}",
                    provider_name=provider.name,
                    operation="cancel",
                )

        order.cancel()
        await self.order_repository.update(order)
        self._logger.info(f"Order {order.id} cancelled")
        return OrderView.from_order(order)

    @_tracked("pay")
    async def pay_order(self, order_id: int) -> OrderView:
        """
        Mark a PROCESSING order as paid, on the provider first.

        Raises:
            NotFoundError: If the order does not exist
            IllegalStateError: If the order is not PROCESSING
            ProviderOperationError: If the provider refused the payment
        """
        order = await self._load(order_id)
        if order.status is not OrderStatus.PROCESSING:
            raise IllegalStateError(
                f"Only Processing orders can be paid. Current status: {order.status.display_name}"
            )

        if order.has_provider:
            provider = self._attached_provider(order, "pay")
            reference = order.provider_order_reference
            response = await self._call_provider(provider, "pay", lambda: provider.pay_order(reference))
            if not response.success:
                self._logger.error(f"{provider.name} refused to pay order {order.id}: {response.message}")
                raise ProviderOperationError(
                    f"Error marking order as paid in provider: {response.message}",
                    provider_name=provider.name,
                    operation="pay",
                )

        order.mark_as_paid()
        await self.order_repository.update(order)
        self._logger.info(f"Order {order.id} paid")
        return OrderView.from_order(order)

    async def get_order(self, order_id: int) -> OrderView:
        return OrderView.from_order(await self._load(order_id))

    async def list_orders(self) -> List[OrderView]:
        orders = await self.order_repository.get_all()
        return [OrderView.from_order(order) for order in orders]

    async def quote_order(self, request: CreateOrderRequest) -> OrderQuoteView:
        """
        Compare provider commissions for a prospective order without storing it.

        Raises:
            ValidationError: If the order data is invalid
            NoCapableProviderError: If no provider supports the payment method
        """
        order = self._build_order(request)
        results = await self.provider_selector.evaluate_providers(order)

        best = None
        for index, result in enumerate(results):
            if result.succeeded and (best is None or result.commission < results[best].commission):
                best = index

        return OrderQuoteView(
            payment_method=order.payment_method.display_name,
            items_total=order.items_total,
            quotes=[
                ProviderQuoteView.from_result(result, order.amount, selected=(index == best))
                for index, result in enumerate(results)
            ],
        )
