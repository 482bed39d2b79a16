"""
Pydantic Schemas for Request/Response Validation

The HTTP API speaks snake_case JSON. Domain models (cafe.models) keep their
camelCase file format; these schemas convert between the two.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from cafe.models import DrinkBase, Order, OrderItem, OrderStatus, preparation_text


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderItemCreate(BaseModel):
    """Single drink selection in a new order."""
    drink_id: str = Field(..., min_length=1, examples=["coffee_cappuccino"])
    quantity: int = Field(..., ge=1, le=99, examples=[2])
    special_instructions: Optional[str] = Field(None, max_length=200)


class OrderCreate(BaseModel):
    """
    Request schema for creating a new order.

    Empty names, empty item lists and missing table numbers are rejected by
    the order service with a 400 response.
    """
    customer_name: str = Field(..., max_length=100, examples=["Ali"])
    items: List[OrderItemCreate]
    notes: Optional[str] = Field(None, max_length=500)
    table_number: Optional[str] = Field(None, max_length=10, examples=["5"])
    is_take_away: bool = False


class OrderStatusUpdate(BaseModel):
    """Request to move an order to a new status."""
    status: OrderStatus = Field(..., examples=["inProgress"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class DrinkResponse(BaseModel):
    """A catalog drink."""
    id: str
    type: str
    category: str
    name: str
    price: float
    description: str
    image_url: str
    preparation: str

    @classmethod
    def from_drink(cls, drink: DrinkBase) -> "DrinkResponse":
        return cls(
            id=drink.id,
            type=drink.type,
            category=drink.category,
            name=drink.name,
            price=drink.price,
            description=drink.description,
            image_url=drink.image_url,
            preparation=preparation_text(drink),
        )


class DrinkListResponse(BaseModel):
    total: int
    drinks: List[DrinkResponse]


class DrinkPriceResponse(BaseModel):
    drink_id: str
    price: float


class PopularDrinkResponse(BaseModel):
    drink: DrinkResponse
    quantity: int


class OrderItemResponse(BaseModel):
    """A line item of an order."""
    id: str
    drink: DrinkResponse
    quantity: int
    special_instructions: Optional[str]
    added_at: datetime
    total_price: float

    @classmethod
    def from_item(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            drink=DrinkResponse.from_drink(item.drink),
            quantity=item.quantity,
            special_instructions=item.special_instructions,
            added_at=item.added_at,
            total_price=item.total_price,
        )


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    id: str
    customer_name: str
    status: OrderStatus
    status_display: str
    items: List[OrderItemResponse]
    notes: Optional[str]
    table_number: Optional[str]
    is_take_away: bool
    created_at: datetime
    completed_at: Optional[datetime]
    total_price: float
    item_count: int
    summary: str

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            status=order.status,
            status_display=order.status.display_name,
            items=[OrderItemResponse.from_item(item) for item in order.items],
            notes=order.notes,
            table_number=order.table_number,
            is_take_away=order.is_take_away,
            created_at=order.created_at,
            completed_at=order.completed_at,
            total_price=order.total_price,
            item_count=order.item_count,
            summary=order.summary,
        )


class OrderListResponse(BaseModel):
    """Response for listing multiple orders."""
    total: int
    orders: List[OrderResponse]


class OrderStatsResponse(BaseModel):
    """Order counts per status and revenue of non-cancelled orders."""
    total_orders: int
    total_revenue: float
    counts: dict[str, int]


class SalesSummaryResponse(BaseModel):
    today: float
    week: float
    month: float
    generated_at: datetime


class SalesRangeResponse(BaseModel):
    start: datetime
    end: datetime
    total: float


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    environment: str
    storage_backend: str
    order_count: int
    drink_count: int
    timestamp: datetime
