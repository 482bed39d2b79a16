"""
In-Memory Order Repository

Transient order storage used in development mode (ENV_MODE=development)
and in tests. Orders are kept in a dict and lost when the process exits.

Behavior:
    - Issues a fresh UUID for every created order
    - Delivers change notifications synchronously to subscribers
    - Serializes mutations with a re-entrant lock
"""

import logging
import threading
from typing import Iterable, Optional

from cafe.exceptions import OrderNotFoundError
from cafe.models import Order, new_id
from cafe.repositories.base import BaseOrderRepository

logger = logging.getLogger(__name__)


class InMemoryOrderRepository(BaseOrderRepository):
    """
    Order repository backed by a plain dict.

    Args:
        orders: Optional orders to seed the store with (ids are kept)

    Example:
        >>> repo = InMemoryOrderRepository()
        >>> stored = repo.create_order(order)
        >>> repo.get_order(stored.id) == stored
        True
    """

    def __init__(self, orders: Optional[Iterable[Order]] = None):
        super().__init__()
        self._lock = threading.RLock()
        self._orders: dict[str, Order] = {order.id: order for order in orders or ()}
        self._version = 0
        self._notify_listeners(self.list_orders(), self._version)
        logger.info(f"{type(self).__name__} initialized ({len(self._orders)} orders)")

    @property
    def backend_name(self) -> str:
        return "memory"

    def list_orders(self) -> list[Order]:
        with self._lock:
            return list(self._orders.values())

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def create_order(self, order: Order) -> Order:
        with self._lock:
            stored = order.copy_with(id=new_id())
            orders = dict(self._orders)
            orders[stored.id] = stored
            snapshot, version = self._commit(orders)

        logger.info(f"Order {stored.id} created for {stored.customer_name}")
        self._notify_listeners(snapshot, version)
        return stored

    def update_order(self, order: Order) -> Order:
        with self._lock:
            if order.id not in self._orders:
                raise OrderNotFoundError(order.id)
            orders = dict(self._orders)
            orders[order.id] = order
            snapshot, version = self._commit(orders)

        logger.info(f"Order {order.id} updated (status={order.status.value})")
        self._notify_listeners(snapshot, version)
        return order

    def delete_order(self, order_id: str) -> None:
        with self._lock:
            orders = dict(self._orders)
            removed = orders.pop(order_id, None)
            snapshot, version = self._commit(orders)

        if removed is not None:
            logger.info(f"Order {order_id} deleted")
        else:
            logger.debug(f"Delete ignored, order {order_id} not found")
        self._notify_listeners(snapshot, version)

    def _commit(self, orders: dict[str, Order]) -> tuple[list[Order], int]:
        """
        Install a new order map. Caller holds the lock.

        Returns the snapshot and its version; versions increase with every
        commit so broadcasts can be ordered.
        """
        self._orders = orders
        self._version += 1
        return list(orders.values()), self._version
