"""
Order Repository Abstract Base Class

Defines the storage contract for orders. Both InMemoryOrderRepository and
FileOrderRepository implement it, so the order service behaves identically
whichever backend is active.

Change notification:
    Every mutation (create/update/delete) broadcasts the complete current
    order list to all subscribers. A new subscriber immediately receives the
    latest known snapshot. A failing subscriber is logged and skipped; it
    never fails the mutation that triggered the broadcast.

    Snapshots carry the version the repository assigned at commit time.
    Broadcasts are delivered one at a time. A snapshot older than the last
    one published is dropped.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

from cafe.exceptions import InvalidArgumentError
from cafe.models import DrinkBase, Order, OrderStatus, drink_key, to_local_naive

logger = logging.getLogger(__name__)

OrderListener = Callable[[list[Order]], None]


class Subscription:
    """Handle returned by ``subscribe``; call ``cancel()`` to stop receiving updates."""

    def __init__(self, broadcaster: "OrderBroadcaster", listener: OrderListener):
        self._broadcaster = broadcaster
        self.listener = listener

    @property
    def active(self) -> bool:
        return self._broadcaster.is_subscribed(self)

    def cancel(self) -> None:
        self._broadcaster.unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


class OrderBroadcaster:
    """Publish/subscribe channel carrying full order-list snapshots."""

    def __init__(self):
        self._lock = threading.Lock()
        # Held while delivering; re-entrant so a listener may mutate the repository
        self._delivery_lock = threading.RLock()
        self._subscriptions: list[Subscription] = []
        self._latest: Optional[list[Order]] = None
        self._version = -1
        self._closed = False

    def subscribe(self, listener: OrderListener) -> Subscription:
        subscription = Subscription(self, listener)
        with self._delivery_lock:
            with self._lock:
                if not self._closed:
                    self._subscriptions.append(subscription)
                latest = self._latest
            if latest is not None and subscription.active:
                self._deliver(subscription, latest)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription in self._subscriptions

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def publish(self, snapshot: list[Order], version: int) -> bool:
        """
        Deliver a snapshot to every subscriber.

        Returns False (and delivers nothing) when the broadcaster is closed or
        a snapshot with the same or a newer version was already published.
        """
        with self._delivery_lock:
            with self._lock:
                if self._closed:
                    return False
                if version <= self._version:
                    logger.debug(f"Dropping stale order snapshot v{version} (latest v{self._version})")
                    return False
                self._version = version
                self._latest = list(snapshot)
                targets = list(self._subscriptions)

            for subscription in targets:
                self._deliver(subscription, snapshot)
        return True

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._subscriptions.clear()

    def _deliver(self, subscription: Subscription, snapshot: list[Order]) -> None:
        try:
            subscription.listener(list(snapshot))
        except Exception:
            logger.exception("Order listener failed; continuing broadcast")


class BaseOrderRepository(ABC):
    """
    Abstract base class for order repositories.

    Subclasses implement storage (list/get/create/update/delete). Filtering,
    sales totals, popularity ranking and change notification are shared.
    """

    def __init__(self):
        self._broadcaster = OrderBroadcaster()

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the storage backend name (e.g. "memory", "file")."""
        pass

    @abstractmethod
    def list_orders(self) -> list[Order]:
        """Return all stored orders."""
        pass

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[Order]:
        """Return the order with this id, or None."""
        pass

    @abstractmethod
    def create_order(self, order: Order) -> Order:
        """
        Store a new order under a freshly issued id.

        Any id on the input is replaced. Returns the stored order.
        """
        pass

    @abstractmethod
    def update_order(self, order: Order) -> Order:
        """
        Replace a stored order wholesale.

        Raises:
            OrderNotFoundError: If no order with ``order.id`` exists
        """
        pass

    @abstractmethod
    def delete_order(self, order_id: str) -> None:
        """Remove an order. Unknown ids are ignored."""
        pass

    # =========================================================================
    # CHANGE NOTIFICATION
    # =========================================================================

    def subscribe(self, listener: OrderListener) -> Subscription:
        """Receive the full order list now and after every mutation."""
        return self._broadcaster.subscribe(listener)

    def close(self) -> None:
        """Detach all subscribers."""
        self._broadcaster.close()

    def _notify_listeners(self, snapshot: list[Order], version: int) -> None:
        self._broadcaster.publish(snapshot, version)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_orders_by_status(self, status: OrderStatus) -> list[Order]:
        return [order for order in self.list_orders() if order.status == status]

    def get_total_sales(self, start: datetime, end: datetime) -> float:
        """
        Revenue of non-cancelled orders created strictly between start and end.

        Both bounds are exclusive: an order created exactly at ``start`` or
        ``end`` is not counted.

        Offset-aware bounds are converted to local time first.
        """
        start, end = to_local_naive(start), to_local_naive(end)
        return sum(
            (
                order.total_price
                for order in self.list_orders()
                if not order.is_cancelled and start < order.created_at < end
            ),
            0.0,
        )

    def get_popular_drinks(self, limit: int = 5) -> dict[DrinkBase, int]:
        """
        Drinks ranked by total quantity ordered, most popular first.

        Drinks are counted per (type, id); ties keep first-seen order.

        Raises:
            InvalidArgumentError: If limit is negative
        """
        if limit < 0:
            raise InvalidArgumentError(f"limit must not be negative, got {limit}")

        counts: dict[tuple[str, str], list] = {}
        for order in self.list_orders():
            for item in order.items:
                key = drink_key(item.drink)
                if key in counts:
                    counts[key][1] += item.quantity
                else:
                    counts[key] = [item.drink, item.quantity]

        ranked = sorted(counts.values(), key=lambda entry: entry[1], reverse=True)
        return {drink: quantity for drink, quantity in ranked[:limit]}
