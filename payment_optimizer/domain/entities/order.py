"""Order aggregate and its value objects."""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from payment_optimizer.domain.enums import OrderStatus, PaymentMethod
from payment_optimizer.domain.exceptions import IllegalStateError, ValidationError
from payment_optimizer.utils.money import to_decimal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """A line item: product name, unit price and quantity."""

    name: str
    unit_price: Decimal
    quantity: int

    def __post_init__(self):
        """Validate line item and normalize the price to Decimal."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Item name is required")
        try:
            price = to_decimal(self.unit_price)
        except ValueError as e:
            raise ValidationError(f"Invalid unit price for item '{self.name}': {e}") from None
        if price <= 0:
            raise ValidationError(f"Unit price for item '{self.name}' must be positive")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(f"Quantity for item '{self.name}' must be an integer")
        if self.quantity <= 0:
            raise ValidationError(f"Quantity for item '{self.name}' must be positive")
        object.__setattr__(self, "unit_price", price)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Fee:
    """A surcharge added to an order, usually a provider commission."""

    name: str
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Fee name cannot be empty")
        try:
            amount = to_decimal(self.amount)
        except ValueError as e:
            raise ValidationError(f"Invalid fee amount: {e}") from None
        if amount < 0:
            raise ValidationError("Fee amount cannot be negative")
        object.__setattr__(self, "amount", amount)


class Order:
    """
    Payment order aggregate.

    Owns its line items and fees and enforces the lifecycle::

        CREATED -> PROCESSING -> PAID
        CREATED | PROCESSING -> CANCELLED
        CREATED | PROCESSING -> FAILED

    PAID and CANCELLED are terminal. ``amount`` always equals the sum of
    item subtotals plus the sum of fees.
    """

    def __init__(self, payment_method: PaymentMethod, items: Iterable[OrderItem]):
        """
        Create a new order in CREATED status.

        Args:
            payment_method: Payment method chosen by the customer
            items: Line items; at least one is required

        Raises:
            ValidationError: If there are no items or an item is not an OrderItem
        """
        items = list(items or [])
        if not items:
            raise ValidationError("An order must contain at least one item")
        if any(not isinstance(item, OrderItem) for item in items):
            raise ValidationError("Order items must be OrderItem instances")
        if not isinstance(payment_method, PaymentMethod):
            payment_method = PaymentMethod.parse(payment_method)

        self._id: Optional[int] = None
        self._payment_method = payment_method
        self._items: List[OrderItem] = items
        self._fees: List[Fee] = []
        self._status = OrderStatus.CREATED
        self._created_at = _utcnow()
        self._paid_at: Optional[datetime] = None
        self._cancelled_at: Optional[datetime] = None
        self._provider_name: Optional[str] = None
        self._provider_order_reference: Optional[str] = None
        self._failure_reason: Optional[str] = None
        self._amount = Decimal("0")
        self._recalculate_amount()

    @classmethod
    def create(cls, payment_method: PaymentMethod, items: Iterable[OrderItem]) -> "Order":
        return cls(payment_method, items)

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def payment_method(self) -> PaymentMethod:
        return self._payment_method

    @property
    def items(self) -> Tuple[OrderItem, ...]:
        return tuple(self._items)

    @property
    def fees(self) -> Tuple[Fee, ...]:
        return tuple(self._fees)

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def items_total(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0"))

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def paid_at(self) -> Optional[datetime]:
        return self._paid_at

    @property
    def cancelled_at(self) -> Optional[datetime]:
        return self._cancelled_at

    @property
    def provider_name(self) -> Optional[str]:
        return self._provider_name

    @property
    def provider_order_reference(self) -> Optional[str]:
        return self._provider_order_reference

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    @property
    def has_provider(self) -> bool:
        return bool(self._provider_name and self._provider_order_reference)

    def set_id(self, order_id: int) -> None:
        """
        Assign the storage identity. Allowed exactly once.

        Raises:
            IllegalStateError: If the id was already set
            ValidationError: If the id is not a positive integer
        """
        if self._id is not None:
            raise IllegalStateError(f"Order id already set to {self._id} and cannot be changed")
        if isinstance(order_id, bool) or not isinstance(order_id, int) or order_id <= 0:
            raise ValidationError("Order id must be a positive integer")
        self._id = order_id

    def assign_to_provider(self, provider_name: str, provider_order_reference: str) -> None:
        """
        Attach the order to the provider that will process it (CREATED -> PROCESSING).

        Raises:
            IllegalStateError: If the order is not in CREATED status
            ValidationError: If either argument is blank
        """
        if self._status is not OrderStatus.CREATED:
            raise IllegalStateError(
                f"Only Created orders can be assigned to a provider (current status: {self._status.display_name})"
            )
        if not provider_name or not str(provider_name).strip():
            raise ValidationError("Provider name cannot be empty")
        if not provider_order_reference or not str(provider_order_reference).strip():
            raise ValidationError("Provider order reference cannot be empty")

        self._provider_name = provider_name
        self._provider_order_reference = str(provider_order_reference)
        self._status = OrderStatus.PROCESSING

    def mark_as_paid(self) -> None:
        if self._status is not OrderStatus.PROCESSING:
            raise IllegalStateError(
                f"Only Processing orders can be marked as paid (current status: {self._status.display_name})"
            )
        self._status = OrderStatus.PAID
        self._paid_at = _utcnow()

    def cancel(self) -> None:
        if self._status not in (OrderStatus.CREATED, OrderStatus.PROCESSING):
            raise IllegalStateError(f"Cannot cancel an order in {self._status.display_name} status")
        self._status = OrderStatus.CANCELLED
        self._cancelled_at = _utcnow()

    def mark_as_failed(self, reason: Optional[str] = None) -> None:
        if self._status not in (OrderStatus.CREATED, OrderStatus.PROCESSING):
            raise IllegalStateError(f"Cannot mark an order in {self._status.display_name} status as failed")
        self._status = OrderStatus.FAILED
        self._failure_reason = reason

    def add_fee(self, name: str, amount: Decimal) -> Fee:
        """
        Append a fee and recompute the total.

        Fees can only be added while the order is CREATED or PROCESSING.

        Raises:
            ValidationError: On a blank name or negative amount
            IllegalStateError: If the order is no longer open
        """
        fee = Fee(name=name, amount=amount)
        if self._status not in (OrderStatus.CREATED, OrderStatus.PROCESSING):
            raise IllegalStateError(f"Cannot add fees to an order in {self._status.display_name} status")
        self._fees.append(fee)
        self._recalculate_amount()
        return fee

    def _recalculate_amount(self) -> None:
        fees_total = sum((fee.amount for fee in self._fees), Decimal("0"))
        self._amount = self.items_total + fees_total

    def __repr__(self) -> str:
        return (
            f"Order(id={self._id!r}, status={self._status.display_name}, "
            f"amount={self._amount}, provider={self._provider_name!r})"
        )
