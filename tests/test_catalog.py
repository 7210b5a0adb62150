from conftest import API


def test_category_lifecycle(client, admin_headers):
    created = client.post(
        f"{API}/kategoriler",
        headers=admin_headers,
        json={"kategori_adi": "Sakatat", "aciklama": "Ciğer, böbrek"},
    )
    assert created.status_code == 201
    category_id = created.json()["data"]["id"]

    duplicate = client.post(f"{API}/kategoriler", headers=admin_headers, json={"name": "Sakatat"})
    assert duplicate.status_code == 409

    renamed = client.put(f"{API}/kategoriler/{category_id}", headers=admin_headers, json={"name": "Sakatatlar"})
    assert renamed.json()["data"]["name"] == "Sakatatlar"

    deleted = client.delete(f"{API}/kategoriler/{category_id}", headers=admin_headers)
    assert deleted.json()["data"]["is_active"] is False
    assert client.get(f"{API}/kategoriler/{category_id}", headers=admin_headers).status_code == 404

    names = [c["name"] for c in client.get(f"{API}/kategoriler", headers=admin_headers).json()["data"]]
    assert "Sakatatlar" not in names


def test_deleted_category_cannot_be_assigned_to_stock(client, admin_headers):
    category_id = client.post(f"{API}/kategoriler", headers=admin_headers, json={"name": "Hindi"}).json()["data"]["id"]
    client.delete(f"{API}/kategoriler/{category_id}", headers=admin_headers)

    response = client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={"name": "Hindi But", "total_weight": "2", "category_id": category_id},
    )

    assert response.status_code == 404


def test_supplier_search_and_pagination(client, admin_headers):
    for name in ("Toros Et", "Anadolu Piliç", "Trakya Kuzu"):
        assert client.post(f"{API}/tedarikciler", headers=admin_headers, json={"isim": name}).status_code == 201

    page = client.get(f"{API}/tedarikciler", headers=admin_headers, params={"limit": 2}).json()["data"]
    assert page["pagination"]["total"] == 3
    assert page["pagination"]["pages"] == 2
    assert [s["name"] for s in page["items"]] == ["Anadolu Piliç", "Toros Et"]

    found = client.get(f"{API}/tedarikciler", headers=admin_headers, params={"search": "kuzu"}).json()["data"]
    assert [s["name"] for s in found["items"]] == ["Trakya Kuzu"]


def test_supplier_update_and_soft_delete(client, admin_headers):
    supplier_id = client.post(
        f"{API}/tedarikciler",
        headers=admin_headers,
        json={"name": "Toros Et", "telefon": "05320000000"},
    ).json()["data"]["id"]

    updated = client.put(f"{API}/tedarikciler/{supplier_id}", headers=admin_headers, json={"address": "Mersin"})
    assert updated.json()["data"]["address"] == "Mersin"
    assert updated.json()["data"]["phone"] == "05320000000"

    client.delete(f"{API}/tedarikciler/{supplier_id}", headers=admin_headers)
    assert client.get(f"{API}/tedarikciler/{supplier_id}", headers=admin_headers).status_code == 404


def test_customer_crud(client, clerk_headers):
    created = client.post(
        f"{API}/musteriler",
        headers=clerk_headers,
        json={"isim": "Lokanta Sofra", "musteri_tipi": "business", "vergi_no": "1234567890"},
    )
    assert created.status_code == 201
    customer = created.json()["data"]
    assert customer["customer_type"] == "business"

    listing = client.get(f"{API}/musteriler", headers=clerk_headers, params={"search": "sofra"}).json()["data"]
    assert listing["pagination"]["total"] == 1

    client.delete(f"{API}/musteriler/{customer['id']}", headers=clerk_headers)
    listing = client.get(f"{API}/musteriler", headers=clerk_headers).json()["data"]
    assert listing["pagination"]["total"] == 0


def test_regular_user_cannot_change_catalog(client, regular_headers):
    assert client.get(f"{API}/kategoriler", headers=regular_headers).status_code == 200

    response = client.post(f"{API}/kategoriler", headers=regular_headers, json={"name": "Balık"})

    assert response.status_code == 403
