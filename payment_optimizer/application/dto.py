"""Data transfer objects exchanged between the API and the application layer."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.enums import PaymentMethod
from payment_optimizer.domain.interfaces.payment_provider import PaymentProviderResponse
from payment_optimizer.domain.interfaces.provider_selector import QuoteResult
from payment_optimizer.utils.money import format_money


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class OrderItemRequest:
    """A product line as requested by the client."""
    name: str
    unit_price: Decimal
    quantity: int


@dataclass
class CreateOrderRequest:
    """Request for creating (or quoting) an order."""
    payment_method: PaymentMethod
    products: List[OrderItemRequest] = field(default_factory=list)


@dataclass
class OrderItemView:
    name: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "unitPrice": format_money(self.unit_price),
            "quantity": self.quantity,
            "subtotal": format_money(self.subtotal),
        }


@dataclass
class FeeView:
    name: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "amount": format_money(self.amount)}


@dataclass
class OrderView:
    """Flat, read-only view of an order for API responses."""

    id: int
    amount: Decimal
    status: str
    payment_method: str
    provider_name: Optional[str]
    provider_order_reference: Optional[str]
    items: List[OrderItemView]
    fees: List[FeeView]
    created_at: datetime
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderView":
        return cls(
            id=order.id,
            amount=order.amount,
            status=order.status.display_name,
            payment_method=order.payment_method.display_name,
            provider_name=order.provider_name,
            provider_order_reference=order.provider_order_reference,
            items=[
                OrderItemView(
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
            fees=[FeeView(name=fee.name, amount=fee.amount) for fee in order.fees],
            created_at=order.created_at,
            paid_at=order.paid_at,
            cancelled_at=order.cancelled_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": format_money(self.amount),
            "status": self.status,
            "paymentMethod": self.payment_method,
            "providerName": self.provider_name,
            "providerOrderNumber": self.provider_order_reference,
            "items": [item.to_dict() for item in self.items],
            "fees": [fee.to_dict() for fee in self.fees],
            "createdAt": _iso(self.created_at),
            "paidAt": _iso(self.paid_at),
            "cancelledAt": _iso(self.cancelled_at),
        }


@dataclass
class ProviderQuoteView:
    provider_name: str
    commission: Optional[Decimal]
    total: Optional[Decimal]
    error: Optional[str] = None
    selected: bool = False

    @classmethod
    def from_result(cls, result: QuoteResult, base_amount: Decimal, selected: bool = False) -> "ProviderQuoteView":
        total = base_amount + result.commission if result.succeeded else None
        return cls(
            provider_name=result.provider.name,
            commission=result.commission if result.succeeded else None,
            total=total,
            error=result.error,
            selected=selected,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "providerName": self.provider_name,
            "commission": format_money(self.commission) if self.commission is not None else None,
            "total": format_money(self.total) if self.total is not None else None,
            "error": self.error,
            "selected": self.selected,
        }


@dataclass
class OrderQuoteView:
    """Provider comparison for a prospective order."""
    payment_method: str
    items_total: Decimal
    quotes: List[ProviderQuoteView]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "paymentMethod": self.payment_method,
            "itemsTotal": format_money(self.items_total),
            "quotes": [quote.to_dict() for quote in self.quotes],
        }


@dataclass
class ProviderOrderView:
    """Provider-side view of an order."""
    provider_name: str
    success: bool
    message: str
    provider_order_reference: Optional[str]
    amount: Decimal
    status: str
    timestamp: datetime
    payload: Optional[Any] = None

    @classmethod
    def from_response(cls, provider_name: str, response: PaymentProviderResponse) -> "ProviderOrderView":
        return cls(
            provider_name=provider_name,
            success=response.success,
            message=response.message,
            provider_order_reference=response.provider_order_reference,
            amount=response.amount,
            status=response.status.display_name,
            timestamp=response.timestamp,
            payload=response.payload,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "providerName": self.provider_name,
            "success": self.success,
            "message": self.message,
            "providerOrderNumber": self.provider_order_reference,
            "amount": format_money(self.amount),
            "status": self.status,
            "timestamp": _iso(self.timestamp),
            "payload": self.payload,
        }
