import json

import pytest
from pydantic import ValidationError

from cafe.data import DEFAULT_CATALOG
from cafe.exceptions import (
    CatalogReadOnlyError,
    DrinkNotFoundError,
    InvalidArgumentError,
    NotFoundError,
    StorageError,
)
from cafe.models import Coffee, Juice, Tea
from cafe.services import CatalogConfig, DrinkCatalogService


def test_list_available_is_a_copy_in_catalog_order(catalog):
    drinks = catalog.list_available()
    assert [d.id for d in drinks][:3] == ["coffee_espresso", "coffee_cappuccino", "coffee_latte"]
    assert len(drinks) == 9

    drinks.clear()
    assert len(catalog.list_available()) == 9


def test_by_category(catalog):
    groups = catalog.by_category()

    assert list(groups) == ["Coffee", "Tea", "Juice"]
    assert all(isinstance(d, Coffee) for d in groups["Coffee"])
    assert [d.name for d in groups["Tea"]] == ["Green Tea", "Black Tea", "Herbal Tea"]
    assert len(groups["Juice"]) == 3


def test_by_category_keeps_empty_categories():
    config = CatalogConfig.model_validate({"drinks": DEFAULT_CATALOG[:3]})
    groups = DrinkCatalogService(config).by_category()
    assert groups["Tea"] == []
    assert groups["Juice"] == []


def test_find_by_id(catalog):
    assert catalog.find_by_id("tea_black").name == "Black Tea"
    assert catalog.find_by_id("nope") is None


@pytest.mark.parametrize(
    "query, expected",
    [
        ("LATTE", ["Latte"]),
        ("milk", ["Cappuccino", "Latte"]),
        ("berry", ["Berry Blast"]),
        ("tropical fruits", ["Tropical Mix"]),
        ("zzz", []),
        ("", []),
    ],
)
def test_search(catalog, query, expected):
    assert [d.name for d in catalog.search(query)] == expected


def test_price_of(catalog):
    assert catalog.price_of("coffee_cappuccino") == 15.0


def test_price_of_unknown_drink(catalog):
    with pytest.raises(DrinkNotFoundError) as exc_info:
        catalog.price_of("coffee_mocha")

    assert isinstance(exc_info.value, NotFoundError)
    assert isinstance(exc_info.value, InvalidArgumentError)
    assert exc_info.value.drink_id == "coffee_mocha"


def test_recommended_same_variant_excluding_self(catalog, espresso, orange_juice):
    assert [d.id for d in catalog.recommended(espresso)] == ["coffee_cappuccino", "coffee_latte"]
    assert [d.id for d in catalog.recommended(orange_juice)] == ["juice_tropical", "juice_berry_blast"]


def test_recommended_is_capped_at_three():
    extra = [
        {"type": "tea", "id": f"tea_{n}", "name": f"Tea {n}", "price": 5.0,
         "description": "", "imageUrl": "", "teaType": "Green"}
        for n in range(6)
    ]
    service = DrinkCatalogService(CatalogConfig.model_validate({"drinks": extra}))
    picks = service.recommended(service.find_by_id("tea_0"))
    assert [d.id for d in picks] == ["tea_1", "tea_2", "tea_3"]


def test_by_variant(catalog):
    assert all(isinstance(d, Tea) for d in catalog.by_variant("tea"))
    assert len(catalog.by_variant("Juice")) == 3
    assert all(isinstance(d, Juice) for d in catalog.by_variant("juice"))
    assert catalog.by_variant("soda") == []


def test_catalog_is_read_only(catalog, espresso):
    with pytest.raises(CatalogReadOnlyError):
        catalog.add_drink(espresso)
    with pytest.raises(CatalogReadOnlyError):
        catalog.update_drink(espresso)
    with pytest.raises(NotImplementedError):
        catalog.remove_drink("coffee_espresso")


def test_duplicate_ids_rejected():
    with pytest.raises(ValidationError):
        CatalogConfig.model_validate({"drinks": [DEFAULT_CATALOG[0], DEFAULT_CATALOG[0]]})


def test_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(DEFAULT_CATALOG[3:6]), encoding="utf-8")

    service = DrinkCatalogService(CatalogConfig.from_file(path))
    assert service.drink_count == 3
    assert [d.id for d in service.list_available()] == ["tea_green", "tea_black", "tea_herbal"]


@pytest.mark.parametrize("content", ["not json", '[{"type": "soda"}]'])
def test_bad_catalog_file(tmp_path, content):
    path = tmp_path / "catalog.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        CatalogConfig.from_file(path)


def test_missing_catalog_file(tmp_path):
    with pytest.raises(StorageError):
        CatalogConfig.from_file(tmp_path / "missing.json")
