from datetime import date, timedelta
from decimal import Decimal

from conftest import API


def test_dashboard_summarises_shop(client, admin_headers):
    soon = (date.today() + timedelta(days=1)).isoformat()
    later = (date.today() + timedelta(days=30)).isoformat()
    fresh = client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={"name": "Tavuk Baget", "total_weight": "5", "sale_price": "80", "expiry_date": soon},
    ).json()["data"]
    client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={"name": "Sucuk", "total_weight": "3.5", "expiry_date": later},
    )
    client.post(f"{API}/musteriler", headers=admin_headers, json={"name": "Lokanta Sofra"})
    client.post(
        f"{API}/satislar",
        headers=admin_headers,
        json={"lines": [{"stock_item_id": fresh["id"], "quantity": "1.5"}], "paid_amount": "120"},
    )

    response = client.get(f"{API}/dashboard/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert Decimal(stats["total_stock_weight"]) == Decimal("7")
    assert stats["total_sales"] == 1
    assert stats["total_customers"] == 1
    assert Decimal(stats["cash_balance"]) == Decimal("120")
    assert Decimal(stats["daily_sales_total"]) == Decimal("120")
    assert Decimal(stats["weekly_sales_total"]) == Decimal("120")
    assert stats["expiring_soon"] == 1


def test_deleted_items_are_left_out(client, admin_headers):
    item = client.post(
        f"{API}/stoklar",
        headers=admin_headers,
        json={"name": "Kuzu Kol", "total_weight": "4", "expiry_date": date.today().isoformat()},
    ).json()["data"]
    client.delete(f"{API}/stoklar/{item['id']}", headers=admin_headers)

    stats = client.get(f"{API}/dashboard/stats", headers=admin_headers).json()["data"]

    assert Decimal(stats["total_stock_weight"]) == Decimal("0")
    assert stats["expiring_soon"] == 0


def test_regular_user_sees_no_sales_or_cash_figures(client, admin_headers, regular_headers):
    client.post(f"{API}/kasa", headers=admin_headers, json={"kind": "in", "amount": "250"})
    client.post(f"{API}/stoklar", headers=regular_headers, json={"name": "Tavuk Kanat", "total_weight": "2"})

    response = client.get(f"{API}/dashboard/stats", headers=regular_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert Decimal(stats["total_stock_weight"]) == Decimal("2")
    assert stats["cash_balance"] is None
    assert stats["total_sales"] is None
    assert stats["daily_sales_total"] is None
    assert stats["weekly_sales_total"] is None


def test_clerk_sees_sales_and_cash_figures(client, admin_headers, clerk_headers):
    client.post(f"{API}/kasa", headers=admin_headers, json={"kind": "in", "amount": "250"})

    stats = client.get(f"{API}/dashboard/stats", headers=clerk_headers).json()["data"]

    assert Decimal(stats["cash_balance"]) == Decimal("250")
    assert stats["total_sales"] == 0
