"""Payment provider implementations (Strategy Pattern)."""
from payment_optimizer.infrastructure.providers.http_payment_provider import HttpPaymentProvider
from payment_optimizer.infrastructure.providers.pagafacil_provider import PagaFacilProvider
from payment_optimizer.infrastructure.providers.cazapagos_provider import CazaPagosProvider
from payment_optimizer.infrastructure.providers.mock_provider import MockPaymentProvider

__all__ = [
    "HttpPaymentProvider",
    "PagaFacilProvider",
    "CazaPagosProvider",
    "MockPaymentProvider",
]
