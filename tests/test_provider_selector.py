"""Tests for cost-optimal provider selection."""
import asyncio
from decimal import Decimal

import pytest

from payment_optimizer.domain.enums import PaymentMethod
from payment_optimizer.domain.exceptions import NoCapableProviderError, NoEvaluableProviderError
from payment_optimizer.infrastructure.managers.provider_selector import PaymentProviderSelector
from tests.helpers import StubProvider, make_order


class SlowProvider(StubProvider):
    """Answers its quote after a delay."""

    def __init__(self, *args, delay: float = 0.05, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay

    async def calculate_commission(self, order):
        await asyncio.sleep(self.delay)
        return await super().calculate_commission(order)


class TestSelectOptimalProvider:
    """Selection of the cheapest capable provider."""

    @pytest.mark.asyncio
    async def test_picks_minimum_and_absorbs_failures(self) -> None:
        a = StubProvider("A", commission=Decimal("12.00"))
        b = StubProvider("B", commission=Decimal("8.50"))
        c = StubProvider("C", quote_error=RuntimeError("connection refused"))
        selector = PaymentProviderSelector([a, b, c])

        provider, commission = await selector.select_optimal_provider(make_order())

        assert provider is b
        assert commission == Decimal("8.50")

    @pytest.mark.asyncio
    async def test_all_quotes_failing_raises(self) -> None:
        selector = PaymentProviderSelector([
            StubProvider("A", quote_error=RuntimeError("timeout")),
            StubProvider("B", quote_error=ValueError("bad response")),
        ])

        with pytest.raises(NoEvaluableProviderError) as exc_info:
            await selector.select_optimal_provider(make_order())

        assert set(exc_info.value.failures) == {"A", "B"}
        assert "timeout" in exc_info.value.failures["A"]

    @pytest.mark.asyncio
    async def test_no_capable_provider_raises(self) -> None:
        selector = PaymentProviderSelector([
            StubProvider("A", commission=Decimal("1"), methods=[PaymentMethod.CASH]),
        ])

        with pytest.raises(NoCapableProviderError):
            await selector.select_optimal_provider(make_order(PaymentMethod.BANK_TRANSFER))

    @pytest.mark.asyncio
    async def test_incapable_providers_are_not_quoted(self) -> None:
        cash_only = StubProvider("CashOnly", quote_error=AssertionError("must not be quoted"),
                                 methods=[PaymentMethod.CASH])
        card = StubProvider("Card", commission=Decimal("3.00"), methods=[PaymentMethod.CREDIT_CARD])
        selector = PaymentProviderSelector([cash_only, card])

        results = await selector.evaluate_providers(make_order(PaymentMethod.CREDIT_CARD))

        assert [r.provider.name for r in results] == ["Card"]

    @pytest.mark.asyncio
    async def test_tie_goes_to_first_registered(self) -> None:
        first = StubProvider("First", commission=Decimal("5.00"))
        second = StubProvider("Second", commission=Decimal("5.00"))

        provider, _ = await PaymentProviderSelector([first, second]).select_optimal_provider(make_order())
        assert provider is first

        provider, _ = await PaymentProviderSelector([second, first]).select_optimal_provider(make_order())
        assert provider is second

    @pytest.mark.asyncio
    async def test_negative_or_missing_quote_counts_as_failure(self) -> None:
        selector = PaymentProviderSelector([
            StubProvider("Negative", commission=Decimal("-1.00")),
            StubProvider("Missing", commission=None),
            StubProvider("Valid", commission=Decimal("9.00")),
        ])

        provider, commission = await selector.select_optimal_provider(make_order())

        assert provider.name == "Valid"
        assert commission == Decimal("9.00")

    @pytest.mark.asyncio
    async def test_non_finite_quote_counts_as_failure(self) -> None:
        selector = PaymentProviderSelector([
            StubProvider("Infinite", commission=Decimal("Infinity")),
            StubProvider("NotANumber", commission=Decimal("NaN")),
            StubProvider("Valid", commission=Decimal("9.00")),
        ])

        provider, commission = await selector.select_optimal_provider(make_order())

        assert provider.name == "Valid"
        assert commission == Decimal("9.00")

    @pytest.mark.asyncio
    async def test_sole_infinite_quote_is_not_selected(self) -> None:
        selector = PaymentProviderSelector([StubProvider("Infinite", commission=Decimal("Infinity"))])

        with pytest.raises(NoEvaluableProviderError):
            await selector.select_optimal_provider(make_order())

    @pytest.mark.asyncio
    async def test_quotes_run_concurrently_and_keep_registration_order(self) -> None:
        slow = SlowProvider("Slow", commission=Decimal("1.00"), delay=0.2)
        fast = SlowProvider("Fast", commission=Decimal("2.00"), delay=0.0)
        selector = PaymentProviderSelector([slow, fast])

        results = await selector.evaluate_providers(make_order())

        assert [r.provider.name for r in results] == ["Slow", "Fast"]
        assert all(r.succeeded for r in results)

    @pytest.mark.asyncio
    async def test_selection_does_not_mutate_order(self) -> None:
        order = make_order()
        selector = PaymentProviderSelector([StubProvider("A", commission=Decimal("5.00"))])

        await selector.select_optimal_provider(order)

        assert order.amount == Decimal("1200.00")
        assert order.fees == ()


class TestProviderRegistry:
    """Registration and lookup."""

    def test_lookup_is_case_insensitive(self) -> None:
        a = StubProvider("PagaFacil", commission=Decimal("1"))
        selector = PaymentProviderSelector([a])

        assert selector.get_provider_by_name("pagafacil") is a
        assert selector.get_provider_by_name("Unknown") is None
        assert selector.get_provider_by_name("") is None

    def test_duplicate_names_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            PaymentProviderSelector([StubProvider("A"), StubProvider("a")])

    def test_entries_must_be_providers(self) -> None:
        with pytest.raises(ValueError):
            PaymentProviderSelector([object()])

    def test_list_providers_keeps_order(self) -> None:
        a, b = StubProvider("A"), StubProvider("B")
        assert PaymentProviderSelector([a, b]).list_providers() == [a, b]
