from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from cafe.main import app
from cafe.models import Order, OrderItem, OrderStatus
from cafe.repositories import FileOrderRepository, InMemoryOrderRepository
from cafe.services import (
    CatalogConfig,
    DrinkCatalogService,
    OrderService,
    get_catalog_service,
    get_order_service,
)

# Wednesday; the week started Monday 2026-10-12
FIXED_NOW = datetime(2026, 10, 14, 15, 30)


@pytest.fixture
def catalog():
    return DrinkCatalogService(CatalogConfig.default())


@pytest.fixture
def espresso(catalog):
    return catalog.find_by_id("coffee_espresso")


@pytest.fixture
def cappuccino(catalog):
    return catalog.find_by_id("coffee_cappuccino")


@pytest.fixture
def latte(catalog):
    return catalog.find_by_id("coffee_latte")


@pytest.fixture
def green_tea(catalog):
    return catalog.find_by_id("tea_green")


@pytest.fixture
def orange_juice(catalog):
    return catalog.find_by_id("juice_orange")


@pytest.fixture
def make_order():
    """Build an order from (drink, quantity) pairs."""

    def _make(customer="Ali", lines=(), created_at=None, status=OrderStatus.PENDING, **fields):
        items = tuple(OrderItem(drink=drink, quantity=qty) for drink, qty in lines)
        if created_at is not None:
            fields["created_at"] = created_at
        if not fields.get("is_take_away") and "table_number" not in fields:
            fields["table_number"] = "1"
        return Order(customer_name=customer, items=items, status=status, **fields)

    return _make


@pytest.fixture
def memory_repo():
    repo = InMemoryOrderRepository()
    yield repo
    repo.close()


@pytest.fixture
def file_repo(tmp_path):
    repo = FileOrderRepository(tmp_path / "data")
    yield repo
    repo.close()


@pytest.fixture(params=["memory", "file"])
def repo(request, tmp_path):
    """Each repository backend in turn."""
    if request.param == "memory":
        repository = InMemoryOrderRepository()
    else:
        repository = FileOrderRepository(tmp_path / "data")
    yield repository
    repository.close()


@pytest.fixture
def order_service(memory_repo):
    return OrderService(memory_repo, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(catalog, order_service):
    app.dependency_overrides[get_catalog_service] = lambda: catalog
    app.dependency_overrides[get_order_service] = lambda: order_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fixed_now():
    return FIXED_NOW
