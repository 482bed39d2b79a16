"""
JSON File Order Repository with Concurrency Control

Durable order storage used in staging/production. The in-memory dict acts
as a read cache; every mutation rewrites the whole order set to a single
JSON array file.

Guarantees:
    - The file is loaded once, before the repository is usable
    - A missing or empty file means "no orders yet"
    - A malformed file fails construction with StorageError instead of
      silently discarding the order history
    - Writes go to a temp file that atomically replaces the orders file,
      under a file lock (filelock) and the in-process lock
    - A failed write leaves the cache untouched and raises StorageError
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Union

from filelock import FileLock, Timeout
from pydantic import ValidationError

from cafe.exceptions import StorageError
from cafe.models import Order
from cafe.repositories.memory import InMemoryOrderRepository

logger = logging.getLogger(__name__)


class FileOrderRepository(InMemoryOrderRepository):
    """
    Order repository persisted to ``<directory>/<filename>``.

    Args:
        directory: Writable directory for the orders file (created if needed)
        filename: Orders file name
        lock_timeout: Seconds to wait for the file lock

    Raises:
        StorageError: If the existing orders file cannot be read or parsed
    """

    DEFAULT_FILENAME = "orders.json"

    def __init__(
        self,
        directory: Union[str, Path],
        filename: str = DEFAULT_FILENAME,
        lock_timeout: float = 10.0,
    ):
        self.directory = Path(directory)
        self.file_path = self.directory / filename
        self.lock_path = self.directory / f"{filename}.lock"
        self.lock_timeout = lock_timeout

        self._ensure_data_dir()
        self._file_lock = FileLock(str(self.lock_path), timeout=lock_timeout)

        super().__init__(orders=self._load_orders())

    @property
    def backend_name(self) -> str:
        return "file"

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.directory.exists():
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create data directory: {e}", self.directory) from e
            logger.info(f"Created data directory: {self.directory}")

    def _load_orders(self) -> list[Order]:
        try:
            with self._file_lock:
                if not self.file_path.exists():
                    logger.info(f"No orders file at {self.file_path}, starting empty")
                    return []
                content = self.file_path.read_text(encoding="utf-8")
        except Timeout as e:
            raise StorageError(f"Lock timeout ({self.lock_timeout}s) reading orders", self.file_path) from e
        except OSError as e:
            raise StorageError(f"Cannot read orders file: {e}", self.file_path) from e

        if not content.strip():
            return []

        try:
            raw = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Malformed orders file: {e}", self.file_path) from e

        if not isinstance(raw, list):
            raise StorageError("Orders file must contain a JSON array", self.file_path)

        try:
            orders = [Order.from_json(entry) for entry in raw]
        except ValidationError as e:
            raise StorageError(f"Invalid order data: {e}", self.file_path) from e

        logger.info(f"Loaded {len(orders)} orders from {self.file_path}")
        return orders

    def _save_orders(self, orders: Iterable[Order]) -> None:
        payload = [order.to_json() for order in orders]

        try:
            with self._file_lock:
                logger.debug(f"Lock acquired for {self.file_path}")
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.directory,
                    prefix=f".{self.file_path.name}.",
                    suffix=".tmp",
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        json.dump(payload, fh, indent=2)
                    os.replace(tmp_name, self.file_path)
                except Exception:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            logger.debug(f"Lock released for {self.file_path}")
        except Timeout as e:
            logger.error(f"Lock timeout writing {self.file_path}")
            raise StorageError(f"Lock timeout ({self.lock_timeout}s) writing orders", self.file_path) from e
        except (OSError, TypeError, ValueError) as e:
            logger.exception(f"Error writing {self.file_path}")
            raise StorageError(f"Cannot write orders file: {e}", self.file_path) from e

    def _commit(self, orders: dict[str, Order]) -> tuple[list[Order], int]:
        self._save_orders(orders.values())
        return super()._commit(orders)
