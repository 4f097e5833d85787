"""Interface for order repository (Repository Pattern)."""
from abc import ABC, abstractmethod
from typing import List, Optional

from payment_optimizer.domain.entities.order import Order


class IOrderRepository(ABC):
    """
    Interface for order storage following Repository Pattern.

    Allows switching storage backends without changing business logic.
    Implementations must assign ids atomically and guarantee that a read
    following a write observes that write.
    """

    @abstractmethod
    async def save(self, order: Order) -> Order:
        """
        Persist an order, assigning it a fresh id if it has none.

        Args:
            order: Order to store; its id is set in place on first save

        Returns:
            The same order instance, now carrying its id
        """
        pass

    @abstractmethod
    async def update(self, order: Order) -> None:
        """
        Replace the stored copy of an existing order.

        Raises:
            NotFoundError: If the order was never saved
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """
        Retrieve an order.

        Returns:
            Order if it exists, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Order]:
        """Return every stored order ordered by id."""
        pass
