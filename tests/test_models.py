import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from cafe.models import (
    Coffee,
    Juice,
    Order,
    OrderItem,
    OrderStatus,
    RoastLevel,
    Tea,
    parse_drink,
    preparation_text,
)


def test_order_totals_and_summary(make_order, cappuccino, latte):
    order = make_order("Ali", [(cappuccino, 2), (latte, 1)])

    assert order.total_price == 46.0
    assert order.item_count == 3
    assert order.summary == "Ali: 2x Cappuccino, 1x Latte"
    assert order.is_pending
    assert not order.is_completed
    assert order.completed_at is None


def test_line_total(cappuccino):
    item = OrderItem(drink=cappuccino, quantity=3)
    assert item.total_price == 45.0
    assert item.id
    assert isinstance(item.added_at, datetime)


def test_take_away_order_rejects_table_number(cappuccino):
    with pytest.raises(ValidationError):
        Order(
            customer_name="Ali",
            items=(OrderItem(drink=cappuccino, quantity=1),),
            is_take_away=True,
            table_number="3",
        )


def test_copy_with_revalidates(make_order, cappuccino):
    order = make_order("Ali", [(cappuccino, 1)], table_number="3")

    with pytest.raises(ValidationError):
        order.copy_with(is_take_away=True)

    moved = order.copy_with(status=OrderStatus.IN_PROGRESS)
    assert isinstance(moved, Order)
    assert moved.status == OrderStatus.IN_PROGRESS
    assert moved.id == order.id
    assert order.status == OrderStatus.PENDING


def test_models_are_immutable(make_order, cappuccino):
    order = make_order("Ali", [(cappuccino, 1)])
    with pytest.raises(ValidationError):
        order.customer_name = "Bob"


def test_order_round_trips_through_file_format(make_order, latte, green_tea, orange_juice):
    order = make_order(
        "Sara",
        [(latte, 2), (green_tea, 1), (orange_juice, 3)],
        status=OrderStatus.COMPLETED,
        notes="No sugar",
        table_number="7",
        created_at=datetime(2026, 10, 14, 9, 15, 30, 123456),
        completed_at=datetime(2026, 10, 14, 9, 40),
    )

    text = json.dumps(order.to_json())
    restored = Order.from_json(json.loads(text))

    assert restored == order
    assert restored.items[0].drink.extras == ("Cinnamon", "Caramel", "Vanilla")


def test_file_format_field_names(make_order, cappuccino):
    order = make_order("Ali", [(cappuccino, 2)], status=OrderStatus.IN_PROGRESS, table_number="5")
    data = order.to_json()

    assert data["customerName"] == "Ali"
    assert data["status"] == "inProgress"
    assert data["tableNumber"] == "5"
    assert data["isTakeAway"] is False
    assert data["completedAt"] is None
    datetime.fromisoformat(data["createdAt"])

    item = data["items"][0]
    assert item["quantity"] == 2
    assert "addedAt" in item
    assert "specialInstructions" in item
    assert item["drink"]["type"] == "coffee"
    assert item["drink"]["imageUrl"] == "assets/images/coffee_cappuccino.jpg"
    assert item["drink"]["roastLevel"] == "medium"
    assert item["drink"]["hasMilk"] is True


def test_parse_drink_dispatches_on_type():
    tea = parse_drink({
        "type": "tea",
        "id": "tea_mint",
        "name": "Mint Tea",
        "price": 9.5,
        "description": "Fresh mint",
        "imageUrl": "mint.jpg",
        "teaType": "Herbal",
    })
    assert isinstance(tea, Tea)
    assert tea.has_honey is False

    with pytest.raises(ValidationError):
        parse_drink({"type": "soda", "id": "x", "name": "X", "price": 1, "description": "", "imageUrl": ""})


def test_drink_defaults():
    coffee = Coffee(id="c", name="Drip", price=8, description="", image_url="")
    juice = Juice(id="j", name="Apple", price=8, description="", image_url="", fruits=["Apple"])

    assert coffee.roast_level == RoastLevel.MEDIUM
    assert coffee.has_milk is False
    assert coffee.extras is None
    assert juice.has_ice is True
    assert juice.has_mint is False


def test_juice_requires_fruit():
    with pytest.raises(ValidationError):
        Juice(id="j", name="Empty", price=5, description="", image_url="", fruits=[])


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        Tea(id="t", name="Tea", price=-1, description="", image_url="", tea_type="Black")


def test_same_id_different_variant_is_a_different_drink():
    coffee = Coffee(id="house", name="House", price=10, description="", image_url="")
    tea = Tea(id="house", name="House", price=10, description="", image_url="", tea_type="Black")

    assert coffee != tea
    assert len({coffee, tea}) == 2


def test_preparation_text(latte, espresso, catalog):
    assert preparation_text(latte) == (
        "Brewing Latte coffee (medium roast)\n"
        "Adding steamed milk\n"
        "Adding extras: Cinnamon, Caramel, Vanilla"
    )
    assert preparation_text(espresso) == "Brewing Espresso coffee (dark roast)"
    assert preparation_text(catalog.find_by_id("tea_herbal")) == (
        "Brewing Herbal Tea tea (Herbal)\nAdding honey"
    )
    assert preparation_text(catalog.find_by_id("juice_tropical")) == (
        "Preparing Tropical Mix juice with Mango and Pineapple and Passion Fruit\n"
        "Adding ice\n"
        "Garnishing with mint"
    )


def test_status_labels():
    assert OrderStatus.IN_PROGRESS.display_name == "In Progress"
    assert OrderStatus.CANCELLED.color_name == "red"
    assert [s.value for s in OrderStatus] == ["pending", "inProgress", "completed", "cancelled"]


def test_formatted_date(make_order, cappuccino):
    order = make_order("Ali", [(cappuccino, 1)], created_at=datetime(2026, 10, 17, 15, 5))
    assert order.formatted_date == "Oct 17, 2026 - 3:05 PM"


def test_generated_ids_are_unique():
    ids = {Order(customer_name="A", table_number="1").id for _ in range(200)}
    assert len(ids) == 200


def test_offset_aware_timestamps_become_local(make_order, cappuccino):
    order = make_order("Ali", [(cappuccino, 1)])
    data = order.to_json()
    data["createdAt"] = "2026-10-14T09:00:00+00:00"
    data["completedAt"] = "2026-10-14T09:30:00Z"
    data["items"][0]["addedAt"] = "2026-10-14T11:00:00+02:00"

    restored = Order.from_json(data)

    created = datetime(2026, 10, 14, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert restored.created_at == created
    assert restored.completed_at == created + timedelta(minutes=30)
    assert restored.items[0].added_at == created
    assert restored.created_at < datetime(2026, 10, 15)
