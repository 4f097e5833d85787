"""Tests for the order orchestration service."""
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from payment_optimizer.application.services import order_service as order_service_module
from payment_optimizer.application.services.order_service import OrderService
from payment_optimizer.domain.enums import OrderStatus, PaymentMethod
from payment_optimizer.domain.exceptions import (
    IllegalStateError,
    NoCapableProviderError,
    NoEvaluableProviderError,
    NotFoundError,
    ProviderOperationError,
    ValidationError,
)
from payment_optimizer.infrastructure.managers.provider_selector import PaymentProviderSelector
from payment_optimizer.infrastructure.repositories.order_repository import InMemoryOrderRepository
from tests.helpers import StubProvider, make_request


def build_service(*providers):
    repository = InMemoryOrderRepository()
    return OrderService(repository, PaymentProviderSelector(providers)), repository


class TestCreateOrder:
    """Order creation and provider routing."""

    @pytest.mark.asyncio
    async def test_routes_to_cheapest_provider(self) -> None:
        mock_a = StubProvider("MockA", commission=Decimal("15.00"))
        mock_b = StubProvider("MockB", commission=Decimal("5.00"))
        service, repository = build_service(mock_a, mock_b)

        order = await service.create_order(make_request(PaymentMethod.CASH, price="1200.00"))

        assert order.provider_name == "MockB"
        assert order.amount == Decimal("1205.00")
        assert order.status == "Processing"
        assert len(order.fees) == 1
        assert "MockB" in order.fees[0].name
        assert order.fees[0].amount == Decimal("5.00")
        assert order.provider_order_reference == "MockB-1"
        assert mock_a.created == []

        stored = await repository.get_by_id(order.id)
        assert stored.status is OrderStatus.PROCESSING
        assert stored.amount == Decimal("1205.00")

    @pytest.mark.asyncio
    async def test_failing_quote_does_not_abort_creation(self) -> None:
        broken = StubProvider("Broken", quote_error=RuntimeError("503"))
        healthy = StubProvider("Healthy", commission=Decimal("10.00"))
        service, _ = build_service(broken, healthy)

        order = await service.create_order(make_request())

        assert order.provider_name == "Healthy"
        assert order.amount == Decimal("1210.00")

    @pytest.mark.asyncio
    async def test_selection_failure_leaves_created_order(self) -> None:
        service, repository = build_service(StubProvider("A", quote_error=RuntimeError("down")))

        with pytest.raises(NoEvaluableProviderError):
            await service.create_order(make_request())

        orders = await repository.get_all()
        assert len(orders) == 1
        assert orders[0].status is OrderStatus.CREATED
        assert orders[0].fees == ()

    @pytest.mark.asyncio
    async def test_sole_infinite_quote_leaves_created_order(self) -> None:
        provider = StubProvider("Infinite", commission=Decimal("Infinity"))
        service, repository = build_service(provider)

        with pytest.raises(NoEvaluableProviderError):
            await service.create_order(make_request())

        stored = (await repository.get_all())[0]
        assert stored.status is OrderStatus.CREATED
        assert stored.fees == ()
        assert provider.created == []

    @pytest.mark.asyncio
    async def test_unsupported_method_raises(self) -> None:
        service, _ = build_service(StubProvider("A", commission=Decimal("1"), methods=[PaymentMethod.CASH]))

        with pytest.raises(NoCapableProviderError):
            await service.create_order(make_request(PaymentMethod.DEBIT_CARD))

    @pytest.mark.asyncio
    async def test_remote_create_failure_marks_order_failed(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"), create_success=False)
        service, repository = build_service(provider)

        with pytest.raises(ProviderOperationError) as exc_info:
            await service.create_order(make_request())

        assert exc_info.value.provider_name == "A"
        assert exc_info.value.operation == "create"
        stored = (await repository.get_all())[0]
        assert stored.status is OrderStatus.FAILED
        assert stored.failure_reason == "A rejected the order"
        assert stored.amount == Decimal("1205.00")

    @pytest.mark.asyncio
    async def test_remote_create_exception_is_wrapped(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"))
        provider.create_order = AsyncMock(side_effect=ConnectionError("reset by peer"))
        service, repository = build_service(provider)

        with pytest.raises(ProviderOperationError):
            await service.create_order(make_request())

        assert (await repository.get_all())[0].status is OrderStatus.FAILED

    @pytest.mark.asyncio
    async def test_invalid_items_are_rejected_before_storage(self) -> None:
        service, repository = build_service(StubProvider("A", commission=Decimal("1")))

        with pytest.raises(ValidationError):
            await service.create_order(make_request(quantity=0))

        assert repository.count() == 0

    @pytest.mark.asyncio
    async def test_ids_are_sequential(self) -> None:
        service, _ = build_service(StubProvider("A", commission=Decimal("1")))

        first = await service.create_order(make_request())
        second = await service.create_order(make_request())

        assert second.id == first.id + 1


class TestCancelOrder:
    """Cancellation goes to the provider first."""

    @pytest.mark.asyncio
    async def test_cancel_processing_order(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"))
        service, _ = build_service(provider)
        created = await service.create_order(make_request())

        cancelled = await service.cancel_order(created.id)

        assert cancelled.status == "Cancelled"
        assert cancelled.cancelled_at is not None
        assert provider.cancelled == [created.provider_order_reference]
        assert (await service.get_order(created.id)).status == "Cancelled"

    @pytest.mark.asyncio
    async def test_provider_refusal_keeps_order_processing(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"), cancel_success=False)
        service, _ = build_service(provider)
        created = await service.create_order(make_request())

        with pytest.raises(ProviderOperationError):
            await service.cancel_order(created.id)

        assert (await service.get_order(created.id)).status == "Processing"

    @pytest.mark.asyncio
    async def test_provider_exception_keeps_order_processing(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"))
        provider.cancel_order = AsyncMock(side_effect=TimeoutError("timed out"))
        service, _ = build_service(provider)
        created = await service.create_order(make_request())

        with pytest.raises(ProviderOperationError):
            await service.cancel_order(created.id)

        assert (await service.get_order(created.id)).status == "Processing"

    @pytest.mark.asyncio
    async def test_cancel_created_order_without_provider(self) -> None:
        service, repository = build_service(StubProvider("A", quote_error=RuntimeError("down")))
        with pytest.raises(NoEvaluableProviderError):
            await service.create_order(make_request())
        order_id = (await repository.get_all())[0].id

        cancelled = await service.cancel_order(order_id)

        assert cancelled.status == "Cancelled"

    @pytest.mark.asyncio
    async def test_cancel_twice_is_illegal(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"))
        service, _ = build_service(provider)
        created = await service.create_order(make_request())
        await service.cancel_order(created.id)

        with pytest.raises(IllegalStateError):
            await service.cancel_order(created.id)

        assert len(provider.cancelled) == 1

    @pytest.mark.asyncio
    async def test_unknown_order(self) -> None:
        service, _ = build_service(StubProvider("A", commission=Decimal("1")))

        with pytest.raises(NotFoundError):
            await service.cancel_order(999)

    @pytest.mark.asyncio
    async def test_unregistered_provider_leaves_order_unchanged(self) -> None:
        provider = StubProvider("Gone", commission=Decimal("5.00"))
        service, repository = build_service(provider)
        created = await service.create_order(make_request())

        other_service = OrderService(repository, PaymentProviderSelector([StubProvider("Other")]))
        with pytest.raises(ProviderOperationError):
            await other_service.cancel_order(created.id)

        assert (await service.get_order(created.id)).status == "Processing"


class TestPayOrder:
    """Payment of processing orders."""

    @pytest.mark.asyncio
    async def test_pay_processing_order(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"))
        service, _ = build_service(provider)
        created = await service.create_order(make_request())

        paid = await service.pay_order(created.id)

        assert paid.status == "Paid"
        assert paid.paid_at is not None
        assert provider.paid == [created.provider_order_reference]

    @pytest.mark.asyncio
    async def test_pay_requires_processing(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"))
        service, _ = build_service(provider)
        created = await service.create_order(make_request())
        await service.cancel_order(created.id)

        with pytest.raises(IllegalStateError):
            await service.pay_order(created.id)

        assert provider.paid == []

    @pytest.mark.asyncio
    async def test_provider_refusal_keeps_order_processing(self) -> None:
        service, _ = build_service(StubProvider("A", commission=Decimal("5.00"), pay_success=False))
        created = await service.create_order(make_request())

        with pytest.raises(ProviderOperationError):
            await service.pay_order(created.id)

        assert (await service.get_order(created.id)).status == "Processing"


class TestQueries:
    """Read-side operations."""

    @pytest.mark.asyncio
    async def test_list_orders_by_id(self) -> None:
        service, _ = build_service(StubProvider("A", commission=Decimal("1")))
        for _ in range(3):
            await service.create_order(make_request())

        orders = await service.list_orders()

        assert [o.id for o in orders] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_get_unknown_order(self) -> None:
        service, _ = build_service(StubProvider("A", commission=Decimal("1")))

        with pytest.raises(NotFoundError):
            await service.get_order(42)

    @pytest.mark.asyncio
    async def test_quote_marks_cheapest_and_stores_nothing(self) -> None:
        service, repository = build_service(
            StubProvider("A", commission=Decimal("15.00")),
            StubProvider("B", commission=Decimal("5.00")),
            StubProvider("C", quote_error=RuntimeError("down")),
        )

        quote = await service.quote_order(make_request())

        by_name = {q.provider_name: q for q in quote.quotes}
        assert by_name["B"].selected
        assert by_name["B"].total == Decimal("1205.00")
        assert not by_name["A"].selected
        assert by_name["C"].commission is None
        assert by_name["C"].error == "down"
        assert repository.count() == 0


class TestFailedOrders:
    """Orders the provider rejected at creation stay Failed."""

    @staticmethod
    async def _failed_order(provider):
        service, repository = build_service(provider)
        with pytest.raises(ProviderOperationError):
            await service.create_order(make_request())
        return service, (await repository.get_all())[0].id

    @pytest.mark.asyncio
    async def test_cancel_failed_order_is_illegal(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"), create_success=False)
        service, order_id = await self._failed_order(provider)

        with pytest.raises(IllegalStateError):
            await service.cancel_order(order_id)

        assert provider.cancelled == []
        assert (await service.get_order(order_id)).status == "Failed"

    @pytest.mark.asyncio
    async def test_pay_failed_order_is_illegal(self) -> None:
        provider = StubProvider("A", commission=Decimal("5.00"), create_success=False)
        service, order_id = await self._failed_order(provider)

        with pytest.raises(IllegalStateError):
            await service.pay_order(order_id)

        assert provider.paid == []
        assert (await service.get_order(order_id)).status == "Failed"


class TestOperationMetrics:
    """Outcome tracking around order operations."""

    @pytest.mark.asyncio
    async def test_unexpected_error_is_tracked_and_propagated(self, monkeypatch) -> None:
        tracked = []
        monkeypatch.setattr(
            order_service_module,
            "track_order_operation",
            lambda operation, success: tracked.append((operation, success)),
        )
        repository = InMemoryOrderRepository()
        repository.get_by_id = AsyncMock(side_effect=RuntimeError("storage offline"))
        service = OrderService(repository, PaymentProviderSelector([StubProvider("A")]))

        with pytest.raises(RuntimeError, match="storage offline"):
            await service.cancel_order(1)

        assert tracked == [("cancel", False)]

    @pytest.mark.asyncio
    async def test_success_is_tracked(self, monkeypatch) -> None:
        tracked = []
        monkeypatch.setattr(
            order_service_module,
            "track_order_operation",
            lambda operation, success: tracked.append((operation, success)),
        )
        service, _ = build_service(StubProvider("A", commission=Decimal("5.00")))

        await service.create_order(make_request())

        assert tracked == [("create", True)]
