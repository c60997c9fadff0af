from datetime import datetime, timedelta, timezone

import pytest

from inventory_api.errors import DuplicateKey, NotFound, ValidationError
from inventory_api.repositories import (
    create_product,
    delete_product,
    get_product,
    product_analytics,
    replace_product,
    search_products,
    update_quantity,
)


def test_create_product_applies_defaults(db, product_payload):
    product = create_product(db, product_payload(image_url=None, description=None, quantity="7", price="3.25"))

    assert len(product.id) == 32
    assert product.image_url == ""
    assert product.description == ""
    assert product.quantity == 7
    assert product.price == 3.25
    assert product.created_at == product.updated_at


def test_create_product_duplicate_sku(db, product_payload):
    create_product(db, product_payload())
    with pytest.raises(DuplicateKey):
        create_product(db, product_payload(name="Other widget"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": None},
        {"name": ""},
        {"type": "   "},
        {"sku": None},
        {"quantity": "abc"},
        {"quantity": 1.5},
        {"quantity": -1},
        {"price": "abc"},
        {"price": "nan"},
        {"price": -0.01},
        {"quantity": True},
        {"price": True},
    ],
)
def test_create_product_validation(db, product_payload, overrides):
    with pytest.raises(ValidationError):
        create_product(db, product_payload(**overrides))


def test_create_product_missing_field(db, product_payload):
    data = product_payload()
    del data["name"]
    with pytest.raises(ValidationError) as exc:
        create_product(db, data)
    assert "name" in exc.value.details


def test_replace_product_overwrites_and_refreshes_updated_at(db, product_payload):
    product = create_product(db, product_payload())
    created_at = product.created_at

    updated = replace_product(db, product.id, product_payload(name="Widget v2", sku="SKU-101", quantity=3, price=9))

    assert updated.id == product.id
    assert updated.name == "Widget v2"
    assert updated.sku == "SKU-101"
    assert updated.quantity == 3
    assert updated.price == 9.0
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


def test_replace_product_errors(db, product_payload):
    first = create_product(db, product_payload())
    create_product(db, product_payload(sku="SKU-200"))

    with pytest.raises(NotFound):
        replace_product(db, "does-not-exist", product_payload())
    with pytest.raises(ValidationError):
        replace_product(db, first.id, product_payload(price="free"))
    with pytest.raises(DuplicateKey):
        replace_product(db, first.id, product_payload(sku="SKU-200"))

    # Keeping its own sku is fine.
    assert replace_product(db, first.id, product_payload(name="Renamed")).name == "Renamed"


def test_update_quantity(db, product_payload):
    product = create_product(db, product_payload(quantity=1))
    updated = update_quantity(db, product.id, 42)

    assert updated.quantity == 42
    assert updated.name == product.name
    assert updated.updated_at >= product.created_at


@pytest.mark.parametrize("quantity", [-1, "abc", 2.5, None, True, False])
def test_update_quantity_validation(db, product_payload, quantity):
    product = create_product(db, product_payload(quantity=1))
    with pytest.raises(ValidationError) as exc:
        update_quantity(db, product.id, quantity)
    assert exc.value.message == "Quantity must be a non-negative integer"


def test_update_quantity_not_found(db):
    with pytest.raises(NotFound):
        update_quantity(db, "missing", 5)


def test_delete_product(db, product_payload):
    product = create_product(db, product_payload())
    delete_product(db, product.id)

    assert get_product(db, product.id) is None
    with pytest.raises(NotFound):
        delete_product(db, product.id)


def test_search_paginates_newest_first(db, product_payload):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    products = [create_product(db, product_payload(name=f"Item {i}", sku=f"SKU-{i}")) for i in range(15)]
    # Creation order is scrambled so insertion order cannot stand in for created_at.
    for minutes, product in zip([7, 2, 11, 0, 14, 5, 9, 3, 12, 1, 8, 13, 4, 10, 6], products):
        product.created_at = base + timedelta(minutes=minutes)
    db.commit()
    newest_first = [p.id for p in sorted(products, key=lambda p: p.created_at, reverse=True)]

    first = search_products(db, "", 1, 10)
    assert len(first.products) == 10
    assert first.total == 15
    assert first.pages == 2
    assert first.page == 1
    assert [p.id for p in first.products] == newest_first[:10]

    second = search_products(db, "", 2, 10)
    assert [p.id for p in second.products] == newest_first[10:]


def test_search_breaks_timestamp_ties_by_id(db, product_payload):
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    products = [create_product(db, product_payload(name=f"Item {i}", sku=f"SKU-{i}")) for i in range(4)]
    for product in products:
        product.created_at = stamp
    db.commit()

    result = search_products(db, "", 1, 10)
    assert [p.id for p in result.products] == sorted((p.id for p in products), reverse=True)


def test_search_defaults_for_invalid_paging(db, product_payload):
    create_product(db, product_payload())
    result = search_products(db, None, 0, 0)
    assert result.page == 1
    assert result.total == 1
    assert result.pages == 1


def test_search_is_case_insensitive_substring(db, product_payload):
    create_product(db, product_payload(name="Widget", sku="A"))
    create_product(db, product_payload(name="WIDGET-2", sku="B"))
    create_product(db, product_payload(name="Gadget", sku="C"))

    names = {p.name for p in search_products(db, "wid").products}
    assert names == {"Widget", "WIDGET-2"}


def test_search_treats_wildcards_literally(db, product_payload):
    create_product(db, product_payload(name="100% cotton", sku="A"))
    create_product(db, product_payload(name="1000 cotton", sku="B"))

    result = search_products(db, "0%")
    assert [p.name for p in result.products] == ["100% cotton"]


def test_search_without_matches(db):
    result = search_products(db, "nothing")
    assert result.products == []
    assert result.total == 0
    assert result.pages == 0


def test_analytics_empty(db):
    result = product_analytics(db)
    assert result.most_added == []
    assert result.top_expensive == []
    assert result.total_value == 0


def test_analytics(db, product_payload):
    rows = [
        ("Bolt", 1.0, 100),
        ("Bolt", 1.5, 10),
        ("Bolt", 2.0, 0),
        ("Nut", 0.5, 40),
        ("Nut", 0.25, 4),
        ("Drill", 120.0, 2),
        ("Saw", 45.0, 1),
        ("Hammer", 30.0, 3),
        ("Level", 20.0, 1),
    ]
    for i, (name, price, qty) in enumerate(rows):
        create_product(db, product_payload(name=name, sku=f"SKU-{i}", price=price, quantity=qty))

    result = product_analytics(db)

    assert len(result.most_added) == 5
    assert (result.most_added[0].name, result.most_added[0].count) == ("Bolt", 3)
    assert (result.most_added[1].name, result.most_added[1].count) == ("Nut", 2)

    assert [p.price for p in result.top_expensive] == [120.0, 45.0, 30.0, 20.0, 2.0]

    expected = sum(price * qty for _, price, qty in rows)
    assert result.total_value == pytest.approx(expected)
