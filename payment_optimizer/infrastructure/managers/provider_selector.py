"""Provider selector implementation (Registry + cost-optimal routing).

Holds the registered payment providers and routes each order to the one
quoting the lowest commission.
"""
import asyncio
import logging
import time
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.exceptions import NoCapableProviderError, NoEvaluableProviderError
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider
from payment_optimizer.domain.interfaces.provider_selector import IPaymentProviderSelector, QuoteResult
from payment_optimizer.middleware.monitoring import track_provider_quote, track_provider_selection
from payment_optimizer.utils.money import to_decimal


logger = logging.getLogger(__name__)


class PaymentProviderSelector(IPaymentProviderSelector):
    """
    Selects the cheapest capable provider for an order.

    Quotes are requested concurrently. A provider whose quote fails is
    excluded from the selection instead of aborting it. Among the
    successful quotes the lowest commission wins; ties go to the provider
    registered first.
    """

    def __init__(self, providers: Iterable[IPaymentProvider]):
        """
        Initialize selector with its providers.

        Args:
            providers: Providers in registration order

        Raises:
            ValueError: If an entry does not implement IPaymentProvider or names collide
        """
        self._providers: List[IPaymentProvider] = list(providers)
        self._logger = logging.getLogger(__name__)

        seen: Dict[str, IPaymentProvider] = {}
        for provider in self._providers:
            if not isinstance(provider, IPaymentProvider):
                raise ValueError("Provider must implement IPaymentProvider")
            key = provider.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate provider name: {provider.name}")
            seen[key] = provider

        self._logger.info(
            f"PaymentProviderSelector initialized with {len(self._providers)} providers: "
            f"{', '.join(p.name for p in self._providers)}"
        )

    def list_providers(self) -> List[IPaymentProvider]:
        return list(self._providers)

    def get_provider_by_name(self, name: str) -> Optional[IPaymentProvider]:
        if not name or not name.strip():
            return None
        wanted = name.strip().lower()
        for provider in self._providers:
            if provider.name.lower() == wanted:
                return provider

        self._logger.warning(
            f"Provider '{name}' not found. Available providers: "
            f"{', '.join(p.name for p in self._providers)}"
        )
        return None

    def _capable_providers(self, order: Order) -> List[IPaymentProvider]:
        capable = [p for p in self._providers if p.supports_payment_method(order.payment_method)]
        self._logger.info(
            f"Providers supporting {order.payment_method.display_name}: "
            f"{len(capable)} of {len(self._providers)}"
        )
        if not capable:
            raise NoCapableProviderError(
                f"No provider available for payment method {order.payment_method.display_name}"
            )
        return capable

    async def _quote(self, provider: IPaymentProvider, order: Order) -> QuoteResult:
        try:
            commission = to_decimal(await provider.calculate_commission(order))
            if commission < 0:
                raise ValueError(f"invalid commission {commission!r}")
        except Exception as e:
            self._logger.warning(
                f"Error evaluating {provider.name}: {e} - provider excluded from selection",
                exc_info=True,
            )
            track_provider_quote(provider.name, success=False)
            return QuoteResult(provider=provider, error=str(e) or type(e).__name__)

        self._logger.info(
            f"{provider.name}: commission {commission} (total with commission {order.amount + commission})"
        )
        track_provider_quote(provider.name, success=True)
        return QuoteResult(provider=provider, commission=commission)

    async def evaluate_providers(self, order: Order) -> List[QuoteResult]:
        """
        Quote every capable provider concurrently.

        Args:
            order: Order to quote

        Returns:
            One QuoteResult per capable provider, in registration order

        Raises:
            NoCapableProviderError: If no provider supports the payment method
        """
        capable = self._capable_providers(order)
        # gather preserves argument order regardless of completion order
        return list(await asyncio.gather(*(self._quote(p, order) for p in capable)))

    async def select_optimal_provider(self, order: Order) -> Tuple[IPaymentProvider, Decimal]:
        """
        Route an order to the provider quoting the lowest commission.

        Args:
            order: Order to route

        Returns:
            Tuple of (provider, commission)

        Raises:
            NoCapableProviderError: If no provider supports the payment method
            NoEvaluableProviderError: If every capable provider failed to quote
        """
        self._logger.info(
            f"Selecting optimal provider for order {order.id} "
            f"({order.payment_method.display_name}, amount {order.amount})"
        )
        start_time = time.time()
        try:
            results = await self.evaluate_providers(order)
        finally:
            track_provider_selection(time.time() - start_time)

        quoted = [(index, r) for index, r in enumerate(results) if r.succeeded]
        if not quoted:
            failures = {r.provider.name: r.error for r in results}
            self._logger.error(f"No provider could be evaluated for order {order.id}: {failures}")
            raise NoEvaluableProviderError(
                "No available provider could be evaluated for this order", failures=failures
            )

        _, best = min(quoted, key=lambda pair: (pair[1].commission, pair[0]))

        comparison = ", ".join(f"{r.provider.name}={r.commission}" for _, r in quoted)
        self._logger.info(
            f"Optimal provider for order {order.id}: {best.provider.name} "
            f"(commission {best.commission}; quotes: {comparison})"
        )
        return best.provider, best.commission
