"""In-memory order repository implementation."""
import copy
import logging
import threading
from typing import Dict, List, Optional

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.exceptions import NotFoundError
from payment_optimizer.domain.interfaces.order_repository import IOrderRepository


class InMemoryOrderRepository(IOrderRepository):
    """
    In-memory order storage.

    Follows Repository Pattern. Stores private copies of the orders, so a
    caller only sees its changes after ``save``/``update`` and never shares
    an instance with another request. The map and the id counter are
    guarded by one lock; none of the critical sections awaits, so the
    lock is safe to hold from coroutines running on different loops.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._orders: Dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    async def save(self, order: Order) -> Order:
        with self._lock:
            if order.id is None:
                order.set_id(self._next_id)
                self._next_id += 1
                self._logger.debug(f"Order stored with new id {order.id}")
            elif order.id >= self._next_id:
                self._next_id = order.id + 1
            self._orders[order.id] = copy.deepcopy(order)
        return order

    async def update(self, order: Order) -> None:
        with self._lock:
            if order.id is None or order.id not in self._orders:
                raise NotFoundError(f"Order {order.id} not found")
            self._orders[order.id] = copy.deepcopy(order)
        self._logger.debug(f"Order {order.id} updated ({order.status.display_name})")

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        with self._lock:
            stored = self._orders.get(order_id)
            return copy.deepcopy(stored) if stored is not None else None

    async def get_all(self) -> List[Order]:
        with self._lock:
            return [copy.deepcopy(self._orders[key]) for key in sorted(self._orders)]

    def count(self) -> int:
        with self._lock:
            return len(self._orders)
