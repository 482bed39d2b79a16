"""
Drink Catalog Service

Serves the fixed drink catalog: listing, category grouping, search,
price lookup and same-variant recommendations.

The catalog is supplied as an explicit CatalogConfig when the service is
constructed. ``CatalogConfig.default()`` builds it from the embedded table in
``cafe.data``; ``CatalogConfig.from_file()`` reads a JSON array of drinks.
There are no runtime create/update/delete operations.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from cafe.data import DEFAULT_CATALOG
from cafe.exceptions import CatalogReadOnlyError, DrinkNotFoundError, StorageError
from cafe.models import DRINK_VARIANTS, Drink, DrinkBase

logger = logging.getLogger(__name__)


class CatalogConfig(BaseModel):
    """Immutable set of drinks a catalog service is built from."""

    model_config = ConfigDict(frozen=True)

    drinks: tuple[Drink, ...]

    @field_validator("drinks")
    @classmethod
    def validate_unique_ids(cls, v: tuple[DrinkBase, ...]) -> tuple[DrinkBase, ...]:
        seen = set()
        for drink in v:
            if drink.id in seen:
                raise ValueError(f"Duplicate drink id in catalog: {drink.id}")
            seen.add(drink.id)
        return v

    @classmethod
    def default(cls) -> "CatalogConfig":
        """Catalog built from the embedded drink table."""
        return cls.model_validate({"drinks": DEFAULT_CATALOG})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CatalogConfig":
        """Load a catalog from a JSON array of drink objects."""
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            config = cls.model_validate({"drinks": raw})
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not load drink catalog: {e}", path) from e
        logger.info(f"Loaded {len(config.drinks)} drinks from {path}")
        return config


class DrinkCatalogService:
    """
    Read-only access to the drink catalog.

    Example:
        >>> catalog = DrinkCatalogService(CatalogConfig.default())
        >>> [d.name for d in catalog.search("milk")]
        ['Cappuccino', 'Latte']
    """

    RECOMMENDED_LIMIT = 3

    def __init__(self, config: CatalogConfig):
        self._drinks: tuple[DrinkBase, ...] = config.drinks
        logger.info(f"DrinkCatalogService initialized ({len(self._drinks)} drinks)")

    @property
    def drink_count(self) -> int:
        return len(self._drinks)

    @property
    def categories(self) -> list[str]:
        return [variant.category for variant in DRINK_VARIANTS]

    def list_available(self) -> list[DrinkBase]:
        """All drinks in catalog order. The returned list is a fresh copy."""
        return list(self._drinks)

    def by_category(self) -> dict[str, list[DrinkBase]]:
        """Drinks partitioned by variant; every category key is present."""
        return {
            variant.category: [d for d in self._drinks if isinstance(d, variant)]
            for variant in DRINK_VARIANTS
        }

    def find_by_id(self, drink_id: str) -> Optional[DrinkBase]:
        for drink in self._drinks:
            if drink.id == drink_id:
                return drink
        return None

    def search(self, query: str) -> list[DrinkBase]:
        """
        Case-insensitive substring match on name or description.

        An empty query matches nothing.
        """
        if not query:
            return []

        needle = query.lower()
        return [
            d for d in self._drinks
            if needle in d.name.lower() or needle in d.description.lower()
        ]

    def price_of(self, drink_id: str) -> float:
        """
        Unit price of a drink.

        Raises:
            DrinkNotFoundError: If the id is not in the catalog
        """
        drink = self.find_by_id(drink_id)
        if drink is None:
            raise DrinkNotFoundError(drink_id)
        return drink.price

    def recommended(self, drink: DrinkBase, limit: int = RECOMMENDED_LIMIT) -> list[DrinkBase]:
        """Other drinks of the same variant, in catalog order."""
        matches = [
            d for d in self._drinks
            if d.type == drink.type and d.id != drink.id
        ]
        return matches[:limit]

    def by_variant(self, variant_tag: str) -> list[DrinkBase]:
        """Drinks whose ``type`` tag matches (``coffee``, ``tea``, ``juice``)."""
        tag = variant_tag.lower()
        return [d for d in self._drinks if d.type == tag]

    # The catalog is fixed once the service is built.

    def add_drink(self, drink: DrinkBase) -> DrinkBase:
        raise CatalogReadOnlyError("Adding drinks to the catalog is not supported")

    def update_drink(self, drink: DrinkBase) -> DrinkBase:
        raise CatalogReadOnlyError("Updating catalog drinks is not supported")

    def remove_drink(self, drink_id: str) -> None:
        raise CatalogReadOnlyError("Removing catalog drinks is not supported")
