"""CazaPagos payment provider implementation (Strategy Pattern)."""
from decimal import Decimal

from payment_optimizer.domain.enums import PaymentMethod
from payment_optimizer.infrastructure.providers.http_payment_provider import HttpPaymentProvider


class CazaPagosProvider(HttpPaymentProvider):
    """
    CazaPagos API adapter.

    Cash orders pay a fixed 10.00 commission, credit card orders 1.5% of
    the order amount.
    """

    PROVIDER_NAME = "CazaPagos"
    FIXED_COMMISSIONS = {PaymentMethod.CASH: Decimal("10.00")}
    PERCENTAGE_COMMISSIONS = {PaymentMethod.CREDIT_CARD: Decimal("0.015")}
    CANCEL_PATH = "/cancellation"
    PAY_PATH = "/payment"
