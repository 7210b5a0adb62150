from decimal import Decimal

import pytest
from sqlalchemy import update

from conftest import API
from esnaf_defterim.api.routes import stock as stock_routes
from esnaf_defterim.models.stock import Category, StockItem, StockMovement, Supplier


@pytest.fixture
def category(db):
    category = Category(name="Dana", description="Dana eti ürünleri")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def supplier(db):
    supplier = Supplier(name="Toros Et", phone="05321234567")
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def create_item(client, headers, **overrides):
    payload = {"name": "Dana Kuşbaşı", "total_weight": "10", "purchase_price": "100", "sale_price": "150"}
    payload.update(overrides)
    response = client.post(f"{API}/stoklar", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def movements(client, headers, item_id, **params):
    response = client.get(f"{API}/stoklar/{item_id}/hareketler", headers=headers, params=params)
    assert response.status_code == 200, response.text
    return response.json()["data"]


def test_create_computes_ratio_and_records_initial_entry(client, admin_headers, category, supplier):
    item = create_item(client, admin_headers, category_id=category.id, supplier_id=supplier.id)

    assert Decimal(item["total_weight"]) == Decimal("10")
    assert Decimal(item["remaining_weight"]) == Decimal("10")
    assert Decimal(item["profit_ratio"]) == Decimal("50.00")
    assert item["category_name"] == "Dana"
    assert item["supplier_name"] == "Toros Et"
    assert item["version"] == 1

    history = movements(client, admin_headers, item["id"])
    assert history["pagination"]["total"] == 1
    entry = history["items"][0]
    assert entry["kind"] == "in"
    assert Decimal(entry["quantity"]) == Decimal("10")
    assert Decimal(entry["previous_quantity"]) == Decimal("0")
    assert Decimal(entry["new_quantity"]) == Decimal("10")
    assert entry["user_name"] == "Admin"


def test_create_accepts_legacy_field_names(client, admin_headers, category):
    response = client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={
            "urun_adi": "Kuzu Pirzola",
            "kategori_id": category.id,
            "toplam_agirlik": 4.5,
            "alis_fiyati": 400,
            "satis_fiyati": 500,
            "son_kullanma_tarihi": "2026-10-25",
        },
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "Kuzu Pirzola"
    assert data["expiry_date"] == "2026-10-25"
    assert Decimal(data["profit_ratio"]) == Decimal("25.00")


def test_create_without_prices_has_zero_ratio(client, admin_headers):
    item = create_item(client, admin_headers, purchase_price=None, sale_price=None)

    assert Decimal(item["profit_ratio"]) == Decimal("0")


def test_negative_weight_is_rejected(client, admin_headers):
    response = client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={"name": "Tavuk Göğüs", "total_weight": "-1"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input"


def test_unknown_category_is_not_found(client, admin_headers):
    response = client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={"name": "Tavuk Göğüs", "total_weight": "3", "category_id": 999},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"


def test_update_records_outgoing_movement(client, db, admin_headers):
    item = create_item(client, admin_headers)

    response = client.put(
        f"{API}/stoklar/{item['id']}",
        headers=admin_headers,
        json={
            "name": "Dana Kuşbaşı",
            "total_weight": "10",
            "remaining_weight": "7",
            "purchase_price": "100",
            "sale_price": "150",
        },
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert Decimal(updated["remaining_weight"]) == Decimal("7")
    assert updated["version"] == 2

    history = movements(client, admin_headers, item["id"])
    assert history["pagination"]["total"] == 2
    newest = history["items"][0]
    assert newest["kind"] == "out"
    assert Decimal(newest["quantity"]) == Decimal("3")
    assert Decimal(newest["previous_quantity"]) == Decimal("10")
    assert Decimal(newest["new_quantity"]) == Decimal("7")

    # Every movement's quantity matches the weight change it describes.
    for row in db.query(StockMovement).all():
        assert abs(row.new_quantity - row.previous_quantity) == row.quantity


def test_update_without_weight_change_records_no_movement(client, admin_headers):
    item = create_item(client, admin_headers)

    response = client.put(
        f"{API}/stoklar/{item['id']}",
        headers=admin_headers,
        json={"name": "Dana Antrikot", "total_weight": "10", "purchase_price": "100", "sale_price": "120"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Dana Antrikot"
    assert Decimal(data["remaining_weight"]) == Decimal("10")
    assert Decimal(data["profit_ratio"]) == Decimal("20.00")
    assert movements(client, admin_headers, item["id"])["pagination"]["total"] == 1


def test_update_increase_records_incoming_movement(client, admin_headers):
    item = create_item(client, admin_headers, remaining_weight="4")

    client.put(
        f"{API}/stoklar/{item['id']}",
        headers=admin_headers,
        json={"name": "Dana Kuşbaşı", "total_weight": "10", "remaining_weight": "6.25"},
    )

    newest = movements(client, admin_headers, item["id"])["items"][0]
    assert newest["kind"] == "in"
    assert Decimal(newest["quantity"]) == Decimal("2.25")


def test_stale_version_conflicts(client, admin_headers):
    item = create_item(client, admin_headers)
    payload = {"name": "Dana Kuşbaşı", "total_weight": "10", "remaining_weight": "8", "version": 1}

    first = client.put(f"{API}/stoklar/{item['id']}", headers=admin_headers, json=payload)
    second = client.put(f"{API}/stoklar/{item['id']}", headers=admin_headers, json={**payload, "remaining_weight": "5"})

    assert first.status_code == 200
    assert second.status_code == 409
    current = client.get(f"{API}/stoklar/{item['id']}", headers=admin_headers).json()["data"]
    assert Decimal(current["remaining_weight"]) == Decimal("8")
    assert movements(client, admin_headers, item["id"])["pagination"]["total"] == 2


def test_soft_delete_hides_item_but_keeps_history(client, admin_headers):
    item = create_item(client, admin_headers)

    response = client.delete(f"{API}/stoklar/{item['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False
    assert client.get(f"{API}/stoklar/{item['id']}", headers=admin_headers).status_code == 404
    listing = client.get(f"{API}/stoklar", headers=admin_headers).json()["data"]
    assert listing["pagination"]["total"] == 0
    listing = client.get(f"{API}/stoklar", headers=admin_headers, params={"include_inactive": True}).json()["data"]
    assert listing["pagination"]["total"] == 1
    assert movements(client, admin_headers, item["id"])["pagination"]["total"] == 1


def test_updating_deleted_item_is_not_found(client, admin_headers):
    item = create_item(client, admin_headers)
    client.delete(f"{API}/stoklar/{item['id']}", headers=admin_headers)

    response = client.put(
        f"{API}/stoklar/{item['id']}",
        headers=admin_headers,
        json={"name": "Dana Kuşbaşı", "total_weight": "10"},
    )

    assert response.status_code == 404


def test_missing_item_is_not_found(client, admin_headers):
    assert client.delete(f"{API}/stoklar/404", headers=admin_headers).status_code == 404
    assert client.get(f"{API}/stoklar/404/hareketler", headers=admin_headers).status_code == 404


def test_list_paginates_newest_first(client, admin_headers):
    for name in ("Dana Kıyma", "Tavuk Kanat", "Kuzu But"):
        create_item(client, admin_headers, name=name)

    first_page = client.get(f"{API}/stoklar", headers=admin_headers, params={"page": 1, "limit": 2}).json()["data"]
    second_page = client.get(f"{API}/stoklar", headers=admin_headers, params={"page": 2, "limit": 2}).json()["data"]

    assert first_page["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert [i["name"] for i in first_page["items"]] == ["Kuzu But", "Tavuk Kanat"]
    assert [i["name"] for i in second_page["items"]] == ["Dana Kıyma"]


def test_list_filters_by_search_and_category(client, admin_headers, category):
    create_item(client, admin_headers, name="Dana Kıyma", category_id=category.id)
    create_item(client, admin_headers, name="Tavuk Kanat")

    by_search = client.get(f"{API}/stoklar", headers=admin_headers, params={"search": "kanat"}).json()["data"]
    by_category = client.get(
        f"{API}/stoklar", headers=admin_headers, params={"category_id": category.id}
    ).json()["data"]

    assert [i["name"] for i in by_search["items"]] == ["Tavuk Kanat"]
    assert [i["name"] for i in by_category["items"]] == ["Dana Kıyma"]


def test_invalid_page_size_is_rejected(client, admin_headers):
    response = client.get(f"{API}/stoklar", headers=admin_headers, params={"limit": 500})

    assert response.status_code == 400


def test_regular_user_can_manage_stock(client, regular_headers):
    item = create_item(client, regular_headers)

    assert item["name"] == "Dana Kuşbaşı"


def test_stock_requires_authentication(client):
    assert client.get(f"{API}/stoklar").status_code == 401


def test_oversized_weight_is_rejected(client, admin_headers):
    response = client.post(f"{API}/stoklar", headers=admin_headers, json={"name": "Dana", "total_weight": "1e30"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input"


def test_oversized_price_is_rejected(client, admin_headers):
    item = create_item(client, admin_headers)

    response = client.put(
        f"{API}/stoklar/{item['id']}",
        headers=admin_headers,
        json={"name": "Dana Kuşbaşı", "total_weight": "10", "sale_price": "1e30"},
    )

    assert response.status_code == 400


def test_extreme_markup_fits_ratio_column(client, admin_headers):
    item = create_item(client, admin_headers, purchase_price="0.01", sale_price="9999999999.99")

    ratio = Decimal(item["profit_ratio"])
    assert ratio == Decimal("99999999999800.00")
    column = StockItem.__table__.c.profit_ratio.type
    assert len(str(int(ratio))) <= column.precision - column.scale


def test_concurrent_write_at_commit_conflicts(client, admin_headers, monkeypatch):
    item = create_item(client, admin_headers)
    original_check = stock_routes._check_references

    def bump_version_after_read(db, category_id, supplier_id):
        # Another writer lands between the handler's read and its commit.
        db.execute(
            update(StockItem)
            .where(StockItem.id == item["id"])
            .values(version=StockItem.version + 1)
            .execution_options(synchronize_session=False)
        )
        original_check(db, category_id, supplier_id)

    monkeypatch.setattr(stock_routes, "_check_references", bump_version_after_read)

    response = client.put(
        f"{API}/stoklar/{item['id']}",
        headers=admin_headers,
        json={"name": "Dana Kuşbaşı", "total_weight": "10", "remaining_weight": "6"},
    )

    assert response.status_code == 409
    monkeypatch.undo()
    current = client.get(f"{API}/stoklar/{item['id']}", headers=admin_headers).json()["data"]
    assert Decimal(current["remaining_weight"]) == Decimal("10")
    assert movements(client, admin_headers, item["id"])["pagination"]["total"] == 1


def test_deleting_twice_is_not_found(client, admin_headers):
    item = create_item(client, admin_headers)
    client.delete(f"{API}/stoklar/{item['id']}", headers=admin_headers)

    response = client.delete(f"{API}/stoklar/{item['id']}", headers=admin_headers)

    assert response.status_code == 404
    listing = client.get(f"{API}/stoklar", headers=admin_headers, params={"include_inactive": True}).json()["data"]
    assert listing["items"][0]["version"] == 2
