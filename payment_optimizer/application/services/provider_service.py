"""Read-only access to the registered payment providers."""
import logging
from typing import Any, Dict, List

from payment_optimizer.application.dto import ProviderOrderView
from payment_optimizer.domain.enums import PaymentMethod
from payment_optimizer.domain.exceptions import NotFoundError, ProviderOperationError
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider
from payment_optimizer.domain.interfaces.provider_selector import IPaymentProviderSelector
from payment_optimizer.middleware.monitoring import track_provider_operation


class ProviderService:
    """
    Service exposing provider information and provider-side orders.

    Used for reconciliation: the provider's own view of an order can be
    compared with the local one.
    """

    def __init__(self, provider_selector: IPaymentProviderSelector):
        self.provider_selector = provider_selector
        self._logger = logging.getLogger(__name__)

    def _require_provider(self, name: str) -> IPaymentProvider:
        provider = self.provider_selector.get_provider_by_name(name)
        if provider is None:
            raise NotFoundError(f"Provider '{name}' not found")
        return provider

    def list_providers(self) -> List[Dict[str, Any]]:
        """
        Describe every registered provider.

        Returns:
            List of ``{"name", "paymentMethods"}`` dicts in registration order
        """
        return [
            {
                "name": provider.name,
                "paymentMethods": [
                    method.display_name for method in PaymentMethod
                    if provider.supports_payment_method(method)
                ],
            }
            for provider in self.provider_selector.list_providers()
        ]

    async def list_provider_orders(self, provider_name: str) -> List[ProviderOrderView]:
        provider = self._require_provider(provider_name)
        try:
            responses = await provider.list_orders()
        except Exception as e:
            track_provider_operation(provider.name, "list", success=False)
            raise ProviderOperationError(
                f"Error listing orders in {provider.name}: {e}",
                provider_name=provider.name,
                operation="list",
            ) from e
        track_provider_operation(provider.name, "list", success=True)
        return [ProviderOrderView.from_response(provider.name, response) for response in responses]

    async def get_provider_order(self, provider_name: str, provider_order_reference: str) -> ProviderOrderView:
        """
        Fetch one order as the provider sees it.

        Raises:
            NotFoundError: If the provider is unknown or does not know the order
            ProviderOperationError: If the provider call raised
        """
        provider = self._require_provider(provider_name)
        try:
            response = await provider.get_order(provider_order_reference)
        except Exception as e:
            track_provider_operation(provider.name, "get", success=False)
            raise ProviderOperationError(
                f"Error fetching order {provider_order_reference} from {provider.name}: {e}",
                provider_name=provider.name,
                operation="get",
            ) from e

        track_provider_operation(provider.name, "get", response.success)
        if not response.success:
            self._logger.warning(
                f"{provider.name} could not return order {provider_order_reference}: {response.message}"
            )
            raise NotFoundError(
                f"Order {provider_order_reference} not found in {provider.name}: {response.message}"
            )
        return ProviderOrderView.from_response(provider.name, response)
