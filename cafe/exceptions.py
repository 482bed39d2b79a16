"""
Cafe Error Taxonomy

Every error raised by the services and repositories derives from CafeError.

    - InvalidArgumentError: bad caller input (empty customer name, no items,
      missing table number, unknown drink id)
    - NotFoundError: operating on an order or drink that does not exist
    - StorageError: the orders file could not be read, parsed or written
    - CatalogReadOnlyError: the drink catalog is fixed at construction
"""

from pathlib import Path
from typing import Optional, Union


class CafeError(Exception):
    """Base class for all cafe errors."""


class InvalidArgumentError(CafeError, ValueError):
    """Caller supplied invalid input."""


class NotFoundError(CafeError, LookupError):
    """Requested entity does not exist."""


class OrderNotFoundError(NotFoundError):
    """No order with the given id."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class DrinkNotFoundError(NotFoundError, InvalidArgumentError):
    """Drink id is not part of the catalog."""

    def __init__(self, drink_id: str):
        self.drink_id = drink_id
        super().__init__(f"Drink {drink_id} not found")


class StorageError(CafeError):
    """Reading or writing the orders file failed."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class CatalogReadOnlyError(CafeError, NotImplementedError):
    """The drink catalog cannot be modified at runtime."""
