"""
Cafe Domain Models

Immutable pydantic models for the drink catalog and customer orders:
- Drink variants (Coffee, Tea, Juice) tagged by an explicit ``type`` field
- OrderItem: one drink selection with quantity and instructions
- Order: a customer's order tracked through the status lifecycle

Python attribute names are snake_case; the serialized (file) form uses
camelCase aliases, e.g. ``customerName`` and ``isTakeAway``.
"""

import enum
import uuid
from datetime import datetime
from typing import Annotated, Any, ClassVar, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Generate a collision-resistant identifier."""
    return uuid.uuid4().hex


def to_local_naive(moment: datetime) -> datetime:
    """
    Express a datetime as naive local time.

    Stored timestamps are naive local times; offset-aware values are
    converted so they compare against them.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


_ModelT = TypeVar("_ModelT", bound="_FrozenModel")


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON-compatible dict used on disk."""
        return self.model_dump(mode="json", by_alias=True)

    def copy_with(self: _ModelT, **changes: Any) -> _ModelT:
        """Return a validated copy with the given fields replaced."""
        return type(self).model_validate({**dict(self), **changes})


# =============================================================================
# DRINKS
# =============================================================================

class RoastLevel(str, enum.Enum):
    """Coffee roast levels."""
    LIGHT = "light"
    MEDIUM = "medium"
    DARK = "dark"


class DrinkBase(_FrozenModel):
    """Fields shared by every drink variant."""

    category: ClassVar[str] = ""

    id: str
    name: str
    price: float = Field(..., ge=0)
    description: str
    image_url: str


class Coffee(DrinkBase):
    category: ClassVar[str] = "Coffee"

    type: Literal["coffee"] = "coffee"
    roast_level: RoastLevel = RoastLevel.MEDIUM
    has_milk: bool = False
    extras: Optional[tuple[str, ...]] = None


class Tea(DrinkBase):
    category: ClassVar[str] = "Tea"

    type: Literal["tea"] = "tea"
    tea_type: str
    has_honey: bool = False
    has_lemon: bool = False


class Juice(DrinkBase):
    category: ClassVar[str] = "Juice"

    type: Literal["juice"] = "juice"
    fruits: tuple[str, ...] = Field(..., min_length=1)
    has_ice: bool = True
    has_mint: bool = False


Drink = Annotated[Union[Coffee, Tea, Juice], Field(discriminator="type")]

DRINK_VARIANTS: tuple[type[DrinkBase], ...] = (Coffee, Tea, Juice)

_drink_adapter: TypeAdapter = TypeAdapter(Drink)


def parse_drink(data: dict[str, Any]) -> DrinkBase:
    """Build the drink variant named by ``data["type"]``."""
    return _drink_adapter.validate_python(data)


def drink_key(drink: DrinkBase) -> tuple[str, str]:
    """Identity of a drink across variants: (type, id)."""
    return (drink.type, drink.id)


def preparation_text(drink: DrinkBase) -> str:
    """Describe how the drink is prepared, one step per line."""
    if isinstance(drink, Coffee):
        steps = [f"Brewing {drink.name} coffee ({drink.roast_level.value} roast)"]
        if drink.has_milk:
            steps.append("Adding steamed milk")
        if drink.extras:
            steps.append(f"Adding extras: {', '.join(drink.extras)}")
    elif isinstance(drink, Tea):
        steps = [f"Brewing {drink.name} tea ({drink.tea_type})"]
        if drink.has_honey:
            steps.append("Adding honey")
        if drink.has_lemon:
            steps.append("Adding lemon")
    elif isinstance(drink, Juice):
        steps = [f"Preparing {drink.name} juice with {' and '.join(drink.fruits)}"]
        if drink.has_ice:
            steps.append("Adding ice")
        if drink.has_mint:
            steps.append("Garnishing with mint")
    else:
        steps = [f"Preparing {drink.name}..."]
    return "\n".join(steps)


# =============================================================================
# ORDERS
# =============================================================================

class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY[self]

    @property
    def color_name(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_DISPLAY = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.IN_PROGRESS: "In Progress",
    OrderStatus.COMPLETED: "Completed",
    OrderStatus.CANCELLED: "Cancelled",
}

_STATUS_COLORS = {
    OrderStatus.PENDING: "orange",
    OrderStatus.IN_PROGRESS: "blue",
    OrderStatus.COMPLETED: "green",
    OrderStatus.CANCELLED: "red",
}


class OrderItem(_FrozenModel):
    """Single drink selection inside an order."""

    id: str = Field(default_factory=new_id)
    drink: Drink
    quantity: int
    special_instructions: Optional[str] = None
    added_at: datetime = Field(default_factory=datetime.now)

    @field_validator("added_at")
    @classmethod
    def normalize_added_at(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @property
    def total_price(self) -> float:
        return self.drink.price * self.quantity

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "OrderItem":
        return cls.model_validate(data)


class Order(_FrozenModel):
    """
    A customer's order.

    Take-away orders never carry a table number; constructing one that does
    fails validation.
    """

    id: str = Field(default_factory=new_id)
    customer_name: str
    status: OrderStatus = OrderStatus.PENDING
    items: tuple[OrderItem, ...] = ()
    notes: Optional[str] = None
    table_number: Optional[str] = None
    is_take_away: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @field_validator("created_at", "completed_at")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else to_local_naive(v)

    @model_validator(mode="after")
    def check_take_away_has_no_table(self) -> "Order":
        if self.is_take_away and self.table_number is not None:
            raise ValueError("Table number should not be provided for take-away orders")
        return self

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Order":
        return cls.model_validate(data)

    @property
    def total_price(self) -> float:
        return sum((item.total_price for item in self.items), 0.0)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def summary(self) -> str:
        """Short text such as ``"Ali: 2x Cappuccino, 1x Latte"``."""
        item_summary = ", ".join(f"{item.quantity}x {item.drink.name}" for item in self.items)
        return f"{self.customer_name}: {item_summary}"

    @property
    def formatted_date(self) -> str:
        """Creation time as ``"Oct 17, 2026 - 3:05 PM"``."""
        created = self.created_at
        hour = created.hour % 12 or 12
        return f"{created:%b} {created.day}, {created.year} - {hour}:{created:%M} {created:%p}"

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def is_in_progress(self) -> bool:
        return self.status == OrderStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    def __repr__(self) -> str:
        return f"<Order {self.id} - {self.customer_name} - {self.status.value}>"
