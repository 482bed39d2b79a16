"""
Order Repository Factory

Provides a single entry point for obtaining the order repository.
The rest of the application stays agnostic about which backend is used.

Usage:
    from cafe.repositories import get_order_repository

    # Returns InMemoryOrderRepository or FileOrderRepository based on ENV_MODE
    repository = get_order_repository()

Environment Switching:
    - ENV_MODE=development → InMemoryOrderRepository (lost on restart)
    - ENV_MODE=staging → FileOrderRepository
    - ENV_MODE=production → FileOrderRepository
"""

import logging
from functools import lru_cache

from cafe.core.config import get_settings
from cafe.repositories.base import (
    BaseOrderRepository,
    OrderBroadcaster,
    OrderListener,
    Subscription,
)
from cafe.repositories.memory import InMemoryOrderRepository
from cafe.repositories.file import FileOrderRepository

logger = logging.getLogger(__name__)


@lru_cache()
def get_order_repository() -> BaseOrderRepository:
    """
    Get the configured order repository instance.

    The instance is cached so every caller shares the same orders and
    the same change broadcast.

    Raises:
        StorageError: If the orders file exists but cannot be loaded
    """
    settings = get_settings()

    if settings.use_persistent_storage:
        logger.info(
            f"Order Repository: Using FileOrderRepository "
            f"({settings.env_mode.value} mode, {settings.orders_file_path})"
        )
        return FileOrderRepository(
            directory=settings.data_path,
            filename=settings.orders_filename,
            lock_timeout=settings.file_lock_timeout,
        )

    logger.info("Order Repository: Using InMemoryOrderRepository (development mode)")
    return InMemoryOrderRepository()


def reset_order_repository() -> None:
    """
    Clear the cached repository instance.

    The next call to get_order_repository() builds a new one.
    """
    get_order_repository.cache_clear()
    logger.debug("Order repository cache cleared")


__all__ = [
    "get_order_repository",
    "reset_order_repository",
    "BaseOrderRepository",
    "InMemoryOrderRepository",
    "FileOrderRepository",
    "OrderBroadcaster",
    "OrderListener",
    "Subscription",
]
