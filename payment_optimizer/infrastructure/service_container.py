"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from typing import List, Optional, Type

from payment_optimizer.application.services.order_service import OrderService
from payment_optimizer.application.services.provider_service import ProviderService
from payment_optimizer.config.settings import Config
from payment_optimizer.domain.interfaces.order_repository import IOrderRepository
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider
from payment_optimizer.domain.interfaces.provider_selector import IPaymentProviderSelector
from payment_optimizer.infrastructure.factories.provider_factory import ProviderFactory
from payment_optimizer.infrastructure.managers.provider_selector import PaymentProviderSelector


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    Follows Singleton pattern and Dependency Inversion Principle.
    Uses Factory Pattern to create providers based on configuration.
    """

    _instance: Optional['ServiceContainer'] = None
    _config: Type[Config] = Config
    _order_repository: Optional[IOrderRepository] = None
    _payment_providers: Optional[List[IPaymentProvider]] = None
    _provider_selector: Optional[IPaymentProviderSelector] = None
    _order_service: Optional[OrderService] = None
    _provider_service: Optional[ProviderService] = None

    def __new__(cls, config: Optional[Type[Config]] = None):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config: Optional[Type[Config]] = None):
        """
        Initialize service container.

        Args:
            config: Configuration class; only honoured before services are built
        """
        self._logger = logging.getLogger(__name__)
        if config is not None:
            type(self)._config = config

    @property
    def config(self) -> Type[Config]:
        return self._config

    def get_order_repository(self) -> IOrderRepository:
        """Get or create order repository instance."""
        if self._order_repository is None:
            storage_type = self._config.ORDER_STORAGE_TYPE
            try:
                type(self)._order_repository = ProviderFactory.create_order_repository(storage_type)
                self._logger.info(f"OrderRepository created with {storage_type}")
            except Exception as e:
                self._logger.error(f"Failed to create OrderRepository: {e}")
                raise
        return self._order_repository

    def get_payment_providers(self) -> List[IPaymentProvider]:
        """Get or create the configured payment providers."""
        if self._payment_providers is None:
            try:
                type(self)._payment_providers = ProviderFactory.create_payment_providers(self._config)
            except Exception as e:
                self._logger.error(f"Failed to create payment providers: {e}")
                raise
        return list(self._payment_providers)

    def get_provider_selector(self) -> IPaymentProviderSelector:
        """Get or create provider selector instance."""
        if self._provider_selector is None:
            type(self)._provider_selector = PaymentProviderSelector(self.get_payment_providers())
            self._logger.info("PaymentProviderSelector created")
        return self._provider_selector

    def get_order_service(self) -> OrderService:
        """Get or create order service instance."""
        if self._order_service is None:
            type(self)._order_service = OrderService(
                order_repository=self.get_order_repository(),
                provider_selector=self.get_provider_selector(),
            )
            self._logger.info("OrderService created")
        return self._order_service

    def get_provider_service(self) -> ProviderService:
        """Get or create provider service instance."""
        if self._provider_service is None:
            type(self)._provider_service = ProviderService(self.get_provider_selector())
            self._logger.info("ProviderService created")
        return self._provider_service

    @classmethod
    def reset(cls) -> None:
        """Reset all service instances (useful for testing)."""
        cls._instance = None
        cls._config = Config
        cls._order_repository = None
        cls._payment_providers = None
        cls._provider_selector = None
        cls._order_service = None
        cls._provider_service = None
