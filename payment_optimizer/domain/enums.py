"""Domain enumerations for payment methods and order lifecycle."""
from enum import Enum
from typing import Union

from payment_optimizer.domain.exceptions import ValidationError


class PaymentMethod(Enum):
    """Payment methods accepted by the system."""

    CASH = 0
    CREDIT_CARD = 1
    DEBIT_CARD = 2
    BANK_TRANSFER = 3

    @property
    def display_name(self) -> str:
        """Name used in DTOs and API payloads (e.g. ``CreditCard``)."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def parse(cls, value: Union[str, int, "PaymentMethod"]) -> "PaymentMethod":
        """
        Parse a payment method from its name or integer value.

        Accepts ``"CreditCard"``, ``"credit_card"``, ``"CREDIT_CARD"`` or ``1``.

        Raises:
            ValidationError: If the value does not name a payment method
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValidationError(f"Invalid payment method: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValidationError(f"Invalid payment method: {value!r}") from None
        if isinstance(value, str):
            normalized = value.strip().replace("_", "").replace(" ", "").lower()
            if normalized.isdigit():
                return cls.parse(int(normalized))
            for method in cls:
                if method.name.replace("_", "").lower() == normalized:
                    return method
        raise ValidationError(f"Invalid payment method: {value!r}")


class OrderStatus(Enum):
    """Lifecycle states of an order."""

    CREATED = 1
    PROCESSING = 2
    PAID = 3
    CANCELLED = 4
    FAILED = 5

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_provider(cls, value: object) -> "OrderStatus":
        """Map a provider status string to a status; unknown values map to CREATED."""
        if isinstance(value, str):
            for status in cls:
                if status.name.lower() == value.strip().lower():
                    return status
        return cls.CREATED
