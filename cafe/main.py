"""
FastAPI Application Entry Point

Cafe Order Manager - thin HTTP surface over the catalog and order services.

Endpoints:
    - GET /api/drinks...: Browse, search and price the drink catalog
    - POST /api/orders: Place an order
    - GET /api/orders: List orders (optionally by status)
    - PATCH /api/orders/{id}/status: Move an order through its lifecycle
    - DELETE /api/orders/{id}: Remove an order
    - GET /api/sales...: Revenue for today/week/month or a custom range
    - GET /health: System health check

Order endpoints are plain ``def`` handlers; FastAPI runs them on its thread
pool, and the repository serializes the mutations.
"""

import logging
from datetime import datetime
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cafe.core.config import get_settings, setup_logging
from cafe.exceptions import (
    CafeError,
    DrinkNotFoundError,
    InvalidArgumentError,
    NotFoundError,
    OrderNotFoundError,
    StorageError,
)
from cafe.models import OrderItem, OrderStatus, to_local_naive
from cafe.schemas import (
    DrinkListResponse,
    DrinkPriceResponse,
    DrinkResponse,
    ErrorResponse,
    HealthResponse,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStatsResponse,
    OrderStatusUpdate,
    PopularDrinkResponse,
    SalesRangeResponse,
    SalesSummaryResponse,
)
from cafe.services import (
    DrinkCatalogService,
    OrderService,
    get_catalog_service,
    get_order_service,
)

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.

    The order repository is built at startup so a corrupt orders file stops
    the server instead of surfacing on the first request.
    """
    logger.info("=" * 60)
    logger.info(f"☕ Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    catalog = get_catalog_service()
    order_service = get_order_service()
    logger.info(f"✅ Catalog: {catalog.drink_count} drinks")
    logger.info(
        f"✅ Order storage: {order_service.repository.backend_name} "
        f"({len(order_service.get_all_orders())} orders)"
    )
    logger.info("✅ Application ready!")

    yield

    logger.info("Shutting down...")
    order_service.repository.close()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Cafe order management: drink catalog, order tracking and sales analytics.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"☕ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
def health_check(
    catalog: DrinkCatalogService = Depends(get_catalog_service),
    orders: OrderService = Depends(get_order_service),
) -> HealthResponse:
    """Report storage backend and basic counts."""
    return HealthResponse(
        status="operational",
        environment=settings.env_mode.value,
        storage_backend=orders.repository.backend_name,
        order_count=len(orders.get_all_orders()),
        drink_count=catalog.drink_count,
        timestamp=datetime.now(),
    )


# =============================================================================
# DRINK CATALOG ENDPOINTS
# =============================================================================

@app.get("/api/drinks", response_model=DrinkListResponse, tags=["Drinks"])
def list_drinks(
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> DrinkListResponse:
    """All drinks in catalog order."""
    drinks = catalog.list_available()
    return DrinkListResponse(
        total=len(drinks),
        drinks=[DrinkResponse.from_drink(d) for d in drinks],
    )


@app.get("/api/drinks/categories", tags=["Drinks"])
def drinks_by_category(
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> dict[str, list[DrinkResponse]]:
    """Drinks grouped into Coffee, Tea and Juice."""
    return {
        category: [DrinkResponse.from_drink(d) for d in drinks]
        for category, drinks in catalog.by_category().items()
    }


@app.get("/api/drinks/search", response_model=DrinkListResponse, tags=["Drinks"])
def search_drinks(
    q: str = Query("", max_length=100),
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> DrinkListResponse:
    """Case-insensitive search on name and description. Empty query finds nothing."""
    drinks = catalog.search(q)
    return DrinkListResponse(
        total=len(drinks),
        drinks=[DrinkResponse.from_drink(d) for d in drinks],
    )


@app.get("/api/drinks/popular", response_model=list[PopularDrinkResponse], tags=["Drinks"])
def popular_drinks(
    limit: Optional[int] = Query(None, ge=1, le=50),
    orders: OrderService = Depends(get_order_service),
) -> list[PopularDrinkResponse]:
    """Most ordered drinks across all orders."""
    ranking = orders.get_popular_drinks(limit=limit or settings.popular_drinks_limit)
    return [
        PopularDrinkResponse(drink=DrinkResponse.from_drink(drink), quantity=quantity)
        for drink, quantity in ranking.items()
    ]


@app.get("/api/drinks/variant/{variant_tag}", response_model=DrinkListResponse, tags=["Drinks"])
def drinks_by_variant(
    variant_tag: str,
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> DrinkListResponse:
    """Drinks of one variant: coffee, tea or juice."""
    drinks = catalog.by_variant(variant_tag)
    return DrinkListResponse(
        total=len(drinks),
        drinks=[DrinkResponse.from_drink(d) for d in drinks],
    )


@app.get(
    "/api/drinks/{drink_id}",
    response_model=DrinkResponse,
    responses=ERROR_RESPONSES,
    tags=["Drinks"],
)
def get_drink(
    drink_id: str,
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> DrinkResponse:
    drink = catalog.find_by_id(drink_id)
    if drink is None:
        raise DrinkNotFoundError(drink_id)
    return DrinkResponse.from_drink(drink)


@app.get(
    "/api/drinks/{drink_id}/price",
    response_model=DrinkPriceResponse,
    responses=ERROR_RESPONSES,
    tags=["Drinks"],
)
def get_drink_price(
    drink_id: str,
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> DrinkPriceResponse:
    return DrinkPriceResponse(drink_id=drink_id, price=catalog.price_of(drink_id))


@app.get(
    "/api/drinks/{drink_id}/recommended",
    response_model=DrinkListResponse,
    responses=ERROR_RESPONSES,
    tags=["Drinks"],
)
def recommended_drinks(
    drink_id: str,
    catalog: DrinkCatalogService = Depends(get_catalog_service),
) -> DrinkListResponse:
    """Up to three other drinks of the same variant."""
    drink = catalog.find_by_id(drink_id)
    if drink is None:
        raise DrinkNotFoundError(drink_id)
    drinks = catalog.recommended(drink)
    return DrinkListResponse(
        total=len(drinks),
        drinks=[DrinkResponse.from_drink(d) for d in drinks],
    )


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.post(
    "/api/orders",
    response_model=OrderResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="Place Order",
)
def create_order(
    order_data: OrderCreate,
    catalog: DrinkCatalogService = Depends(get_catalog_service),
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Create a Pending order from catalog drink ids."""
    logger.info(f"Creating order for: {order_data.customer_name}")

    items = []
    for item in order_data.items:
        drink = catalog.find_by_id(item.drink_id)
        if drink is None:
            raise InvalidArgumentError(f"Unknown drink: {item.drink_id}")
        items.append(
            OrderItem(
                drink=drink,
                quantity=item.quantity,
                special_instructions=item.special_instructions,
            )
        )

    order = orders.create_order(
        customer_name=order_data.customer_name,
        items=items,
        notes=order_data.notes,
        table_number=order_data.table_number,
        is_take_away=order_data.is_take_away,
    )
    return OrderResponse.from_order(order)


@app.get(
    "/api/orders",
    response_model=OrderListResponse,
    tags=["Orders"],
    summary="List Orders",
)
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    orders: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    """All orders, newest first, optionally filtered by status."""
    if status is None:
        found = orders.get_all_orders()
    else:
        found = orders.get_orders_by_status(status)

    found = sorted(found, key=lambda o: o.created_at, reverse=True)
    return OrderListResponse(
        total=len(found),
        orders=[OrderResponse.from_order(o) for o in found],
    )


@app.get("/api/orders/grouped", tags=["Orders"])
def orders_grouped_by_status(
    orders: OrderService = Depends(get_order_service),
) -> dict[str, list[OrderResponse]]:
    """Orders keyed by status; every status key is present."""
    grouped = OrderService.group_orders_by_status(orders.get_all_orders())
    return {
        status.value: [OrderResponse.from_order(o) for o in group]
        for status, group in grouped.items()
    }


@app.get("/api/orders/stats", response_model=OrderStatsResponse, tags=["Orders"])
def order_stats(
    orders: OrderService = Depends(get_order_service),
) -> OrderStatsResponse:
    all_orders = orders.get_all_orders()
    counts = OrderService.count_orders_by_status(all_orders)
    return OrderStatsResponse(
        total_orders=len(all_orders),
        total_revenue=OrderService.calculate_total_revenue(all_orders),
        counts={status.value: count for status, count in counts.items()},
    )


@app.get(
    "/api/orders/{order_id}",
    response_model=OrderResponse,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
)
def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Get a specific order by ID."""
    order = orders.get_order(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return OrderResponse.from_order(order)


@app.patch(
    "/api/orders/{order_id}/status",
    response_model=OrderResponse,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
)
def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_order(orders.update_order_status(order_id, update.status))


@app.delete("/api/orders/{order_id}", status_code=204, tags=["Orders"])
def delete_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
) -> Response:
    """Delete an order. Deleting an unknown id succeeds."""
    orders.delete_order(order_id)
    return Response(status_code=204)


# =============================================================================
# SALES ENDPOINTS
# =============================================================================

@app.get("/api/sales/summary", response_model=SalesSummaryResponse, tags=["Sales"])
def sales_summary(
    orders: OrderService = Depends(get_order_service),
) -> SalesSummaryResponse:
    """Revenue for today, this week and this month."""
    summary = orders.get_sales_summary()
    return SalesSummaryResponse(
        today=summary.today,
        week=summary.week,
        month=summary.month,
        generated_at=summary.generated_at,
    )


@app.get(
    "/api/sales",
    response_model=SalesRangeResponse,
    responses=ERROR_RESPONSES,
    tags=["Sales"],
)
def sales_in_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    orders: OrderService = Depends(get_order_service),
) -> SalesRangeResponse:
    """Revenue of orders created strictly between start and end."""
    start, end = to_local_naive(start), to_local_naive(end)
    if end <= start:
        raise InvalidArgumentError("end must be after start")
    return SalesRangeResponse(start=start, end=end, total=orders.get_total_sales(start, end))


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error_response(status_code: int, error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=str(exc)).model_dump(),
    )


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
    return _error_response(400, "Invalid Argument", exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(404, "Not Found", exc)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return _error_response(500, "Storage Failure", exc)


@app.exception_handler(CafeError)
async def cafe_error_handler(request: Request, exc: CafeError) -> JSONResponse:
    logger.error(f"Unhandled cafe error: {exc}")
    return _error_response(500, "Internal Server Error", exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cafe.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
