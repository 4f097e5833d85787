"""Factory for creating provider instances (Factory Pattern)."""
import logging
from typing import List, Type

from payment_optimizer.config.settings import Config
from payment_optimizer.domain.interfaces.order_repository import IOrderRepository
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider
from payment_optimizer.infrastructure.providers.cazapagos_provider import CazaPagosProvider
from payment_optimizer.infrastructure.providers.mock_provider import MockPaymentProvider
from payment_optimizer.infrastructure.providers.pagafacil_provider import PagaFacilProvider
from payment_optimizer.infrastructure.repositories.order_repository import InMemoryOrderRepository


logger = logging.getLogger(__name__)


class ProviderFactory:
    """
    Factory for creating provider instances following Factory Pattern.

    Centralizes provider creation logic and allows easy switching between implementations.
    """

    @staticmethod
    def create_payment_provider(provider_type: str, config: Type[Config] = Config) -> IPaymentProvider:
        """
        Create a payment provider instance.

        Args:
            provider_type: Type of provider ("pagafacil", "cazapagos", "mock")
            config: Configuration class holding URLs, keys and timeouts

        Returns:
            IPaymentProvider instance

        Raises:
            ValueError: If provider type is not supported or its settings are missing
        """
        provider_type = provider_type.strip().lower()

        if provider_type == "pagafacil":
            return PagaFacilProvider(
                base_url=config.PAGAFACIL_BASE_URL,
                api_key=config.PAGAFACIL_API_KEY,
                timeout_seconds=config.PAGAFACIL_TIMEOUT_SECONDS,
            )
        elif provider_type == "cazapagos":
            return CazaPagosProvider(
                base_url=config.CAZAPAGOS_BASE_URL,
                api_key=config.CAZAPAGOS_API_KEY,
                timeout_seconds=config.CAZAPAGOS_TIMEOUT_SECONDS,
            )
        elif provider_type == "mock":
            return MockPaymentProvider(failure_rate=config.MOCK_PROVIDER_FAILURE_RATE)
        else:
            raise ValueError(f"Unsupported payment provider type: {provider_type}")

    @staticmethod
    def create_payment_providers(config: Type[Config] = Config) -> List[IPaymentProvider]:
        """
        Create every provider listed in ``PAYMENT_PROVIDERS``, in that order.

        Raises:
            ValueError: If the list is empty or names an unsupported provider
        """
        if not config.PAYMENT_PROVIDERS:
            raise ValueError("PAYMENT_PROVIDERS must name at least one provider")

        providers = [
            ProviderFactory.create_payment_provider(provider_type, config)
            for provider_type in config.PAYMENT_PROVIDERS
        ]
        logger.info(f"Created payment providers: {', '.join(p.name for p in providers)}")
        return providers

    @staticmethod
    def create_order_repository(storage_type: str = "memory") -> IOrderRepository:
        """
        Create an order repository instance.

        Args:
            storage_type: Type of storage ("memory")

        Returns:
            IOrderRepository instance

        Raises:
            ValueError: If storage type is not supported
        """
        storage_type = storage_type.lower()

        if storage_type == "memory":
            return InMemoryOrderRepository()
        else:
            raise ValueError(f"Unsupported storage type: {storage_type}")
