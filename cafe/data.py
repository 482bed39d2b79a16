"""Built-in drink catalog table (consumed by cafe.services.catalog)."""

from __future__ import annotations

from typing import Any

DEFAULT_CATALOG: list[dict[str, Any]] = [
    # Coffees
    {
        "type": "coffee",
        "id": "coffee_espresso",
        "name": "Espresso",
        "price": 12.0,
        "description": "Strong black coffee made by forcing steam through ground coffee beans",
        "imageUrl": "assets/images/coffee_espresso.jpg",
        "roastLevel": "dark",
        "hasMilk": False,
    },
    {
        "type": "coffee",
        "id": "coffee_cappuccino",
        "name": "Cappuccino",
        "price": 15.0,
        "description": "Espresso with hot milk and a milk foam topper",
        "imageUrl": "assets/images/coffee_cappuccino.jpg",
        "roastLevel": "medium",
        "hasMilk": True,
    },
    {
        "type": "coffee",
        "id": "coffee_latte",
        "name": "Latte",
        "price": 16.0,
        "description": "Espresso with a lot of steamed milk and a light layer of foam",
        "imageUrl": "assets/images/coffee_latte.jpg",
        "roastLevel": "medium",
        "hasMilk": True,
        "extras": ["Cinnamon", "Caramel", "Vanilla"],
    },
    # Teas
    {
        "type": "tea",
        "id": "tea_green",
        "name": "Green Tea",
        "price": 10.0,
        "description": "Light and refreshing tea with antioxidants",
        "imageUrl": "assets/images/tea_green.jpg",
        "teaType": "Green",
        "hasHoney": False,
        "hasLemon": False,
    },
    {
        "type": "tea",
        "id": "tea_black",
        "name": "Black Tea",
        "price": 10.0,
        "description": "Strong and robust tea with caffeine",
        "imageUrl": "assets/images/tea_black.jpg",
        "teaType": "Black",
        "hasHoney": False,
        "hasLemon": True,
    },
    {
        "type": "tea",
        "id": "tea_herbal",
        "name": "Herbal Tea",
        "price": 12.0,
        "description": "Caffeine-free infusion of herbs and spices",
        "imageUrl": "assets/images/tea_herbal.jpg",
        "teaType": "Herbal",
        "hasHoney": True,
        "hasLemon": False,
    },
    # Juices
    {
        "type": "juice",
        "id": "juice_orange",
        "name": "Orange Juice",
        "price": 14.0,
        "description": "Freshly squeezed orange juice",
        "imageUrl": "assets/images/juice_orange.jpg",
        "fruits": ["Orange"],
        "hasIce": True,
        "hasMint": False,
    },
    {
        "type": "juice",
        "id": "juice_tropical",
        "name": "Tropical Mix",
        "price": 16.0,
        "description": "Refreshing mix of tropical fruits",
        "imageUrl": "assets/images/juice_tropical.jpg",
        "fruits": ["Mango", "Pineapple", "Passion Fruit"],
        "hasIce": True,
        "hasMint": True,
    },
    {
        "type": "juice",
        "id": "juice_berry_blast",
        "name": "Berry Blast",
        "price": 17.0,
        "description": "Antioxidant-rich berry mix",
        "imageUrl": "assets/images/juice_berry.jpg",
        "fruits": ["Strawberry", "Blueberry", "Raspberry"],
        "hasIce": True,
        "hasMint": False,
    },
]
