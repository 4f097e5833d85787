"""PagaFacil payment provider implementation (Strategy Pattern)."""
from decimal import Decimal

from payment_optimizer.domain.enums import PaymentMethod
from payment_optimizer.infrastructure.providers.http_payment_provider import HttpPaymentProvider


class PagaFacilProvider(HttpPaymentProvider):
    """
    PagaFacil API adapter.

    Cash orders pay a fixed 15.00 commission, credit card orders 1% of the
    order amount.
    """

    PROVIDER_NAME = "PagaFacil"
    FIXED_COMMISSIONS = {PaymentMethod.CASH: Decimal("15.00")}
    PERCENTAGE_COMMISSIONS = {PaymentMethod.CREDIT_CARD: Decimal("0.01")}
    CANCEL_PATH = "/cancel"
    PAY_PATH = "/pay"
