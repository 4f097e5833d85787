"""
Pytest configuration and fixtures.
"""
import pytest

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.infrastructure.service_container import ServiceContainer
from tests.helpers import make_order


@pytest.fixture
def cash_order() -> Order:
    """Order of one 1200.00 item paid in cash."""
    return make_order()


@pytest.fixture(autouse=True)
def reset_service_container():
    """Keep the singleton container from leaking between tests."""
    ServiceContainer.reset()
    yield
    ServiceContainer.reset()
