"""
Order Service

Business logic on top of an order repository:
    - Validates new orders before anything is written
    - Derives status-change side effects (completion timestamp)
    - Revenue shortcuts for today / this week / this month
    - Pure aggregation helpers over externally supplied order lists

Status transitions are deliberately unrestricted: any status may move to
any other status.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence

from cafe.exceptions import InvalidArgumentError, OrderNotFoundError
from cafe.models import DrinkBase, Order, OrderItem, OrderStatus
from cafe.repositories.base import BaseOrderRepository, OrderListener, Subscription

logger = logging.getLogger(__name__)


@dataclass
class SalesSummary:
    """Revenue for the standard reporting windows, each ending now."""
    today: float
    week: float
    month: float
    generated_at: datetime


class OrderService:
    """
    Order orchestration service.

    Args:
        repository: Order storage backend
        clock: Returns the current local time (injectable for tests)

    Example:
        >>> service = OrderService(InMemoryOrderRepository())
        >>> order = service.create_order(
        ...     customer_name="Ali",
        ...     items=[OrderItem(drink=cappuccino, quantity=2)],
        ...     table_number="5",
        ... )
        >>> order.total_price
        30.0
    """

    def __init__(
        self,
        repository: BaseOrderRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._repository = repository
        self._clock = clock

    @property
    def repository(self) -> BaseOrderRepository:
        return self._repository

    # =========================================================================
    # READS
    # =========================================================================

    def get_all_orders(self) -> list[Order]:
        return self._repository.list_orders()

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._repository.get_order(order_id)

    def get_orders_by_status(self, status: OrderStatus) -> list[Order]:
        return self._repository.get_orders_by_status(status)

    def subscribe(self, listener: OrderListener) -> Subscription:
        """Receive the full order list now and after every change."""
        return self._repository.subscribe(listener)

    # =========================================================================
    # WRITES
    # =========================================================================

    def create_order(
        self,
        customer_name: str,
        items: Sequence[OrderItem],
        notes: Optional[str] = None,
        table_number: Optional[str] = None,
        is_take_away: bool = False,
    ) -> Order:
        """
        Validate and store a new Pending order.

        Take-away orders never keep a table number, even when one is passed.

        Raises:
            InvalidArgumentError: Empty customer name, no items, or a dine-in
                order without a table number
        """
        if not customer_name or not customer_name.strip():
            raise InvalidArgumentError("Customer name cannot be empty")

        if not items:
            raise InvalidArgumentError("Order must contain at least one item")

        if not is_take_away and (not table_number or not table_number.strip()):
            raise InvalidArgumentError("Table number is required for dine-in orders")

        order = Order(
            customer_name=customer_name,
            items=tuple(items),
            notes=notes,
            table_number=None if is_take_away else table_number,
            is_take_away=is_take_away,
            status=OrderStatus.PENDING,
            created_at=self._clock(),
        )

        created = self._repository.create_order(order)
        logger.info(f"Order {created.id} placed: {created.summary} (${created.total_price:.2f})")
        return created

    def update_order(self, order: Order) -> Order:
        return self._repository.update_order(order)

    def update_order_status(self, order_id: str, new_status: OrderStatus) -> Order:
        """
        Move an order to a new status.

        ``completed_at`` is stamped when the new status is Completed and
        cleared for every other status.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        order = self._repository.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        updated = order.copy_with(
            status=new_status,
            completed_at=self._clock() if new_status == OrderStatus.COMPLETED else None,
        )
        logger.info(f"Order {order_id}: {order.status.value} -> {new_status.value}")
        return self._repository.update_order(updated)

    def delete_order(self, order_id: str) -> None:
        self._repository.delete_order(order_id)

    # =========================================================================
    # SALES
    # =========================================================================

    def get_total_sales(self, start: datetime, end: datetime) -> float:
        return self._repository.get_total_sales(start, end)

    def get_todays_sales(self) -> float:
        """Revenue since local midnight."""
        now = self._clock()
        return self._repository.get_total_sales(_start_of_day(now), now)

    def get_weekly_sales(self) -> float:
        """Revenue since Monday midnight of the current week."""
        now = self._clock()
        start_of_week = _start_of_day(now - timedelta(days=now.weekday()))
        return self._repository.get_total_sales(start_of_week, now)

    def get_monthly_sales(self) -> float:
        """Revenue since midnight on the first of the current month."""
        now = self._clock()
        start_of_month = _start_of_day(now).replace(day=1)
        return self._repository.get_total_sales(start_of_month, now)

    def get_sales_summary(self) -> SalesSummary:
        return SalesSummary(
            today=self.get_todays_sales(),
            week=self.get_weekly_sales(),
            month=self.get_monthly_sales(),
            generated_at=self._clock(),
        )

    def get_popular_drinks(self, limit: int = 5) -> dict[DrinkBase, int]:
        return self._repository.get_popular_drinks(limit=limit)

    # =========================================================================
    # PURE AGGREGATIONS
    # =========================================================================

    @staticmethod
    def calculate_total_revenue(orders: Iterable[Order]) -> float:
        """Sum of order totals, excluding cancelled orders."""
        return sum(
            (order.total_price for order in orders if order.status != OrderStatus.CANCELLED),
            0.0,
        )

    @staticmethod
    def group_orders_by_status(orders: Iterable[Order]) -> dict[OrderStatus, list[Order]]:
        """Orders keyed by status; all four statuses are always present."""
        result: dict[OrderStatus, list[Order]] = {status: [] for status in OrderStatus}
        for order in orders:
            result[order.status].append(order)
        return result

    @staticmethod
    def count_orders_by_status(orders: Iterable[Order]) -> dict[OrderStatus, int]:
        grouped = OrderService.group_orders_by_status(orders)
        return {status: len(group) for status, group in grouped.items()}


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)
