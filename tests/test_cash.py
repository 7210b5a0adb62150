from decimal import Decimal

from conftest import API


def test_manual_entries_keep_running_balance(client, admin_headers):
    deposit = client.post(
        f"{API}/kasa",
        headers=admin_headers,
        json={"kind": "in", "amount": "500", "note": "Açılış"},
    )
    withdrawal = client.post(f"{API}/kasa", headers=admin_headers, json={"kind": "out", "amount": "120.50"})

    assert deposit.status_code == 201
    assert withdrawal.status_code == 201
    entry = withdrawal.json()["data"]
    assert entry["source"] == "manual"
    assert Decimal(entry["previous_balance"]) == Decimal("500")
    assert Decimal(entry["next_balance"]) == Decimal("379.50")

    balance = client.get(f"{API}/kasa/bakiye", headers=admin_headers).json()["data"]["balance"]
    assert Decimal(balance) == Decimal("379.50")

    entries = client.get(f"{API}/kasa", headers=admin_headers).json()["data"]
    assert entries["pagination"]["total"] == 2
    assert [e["kind"] for e in entries["items"]] == ["out", "in"]
    newer, older = entries["items"]
    assert newer["previous_balance"] == older["next_balance"]


def test_empty_ledger_has_zero_balance(client, admin_headers):
    balance = client.get(f"{API}/kasa/bakiye", headers=admin_headers).json()["data"]["balance"]

    assert Decimal(balance) == Decimal("0")


def test_amount_must_be_positive(client, admin_headers):
    response = client.post(f"{API}/kasa", headers=admin_headers, json={"kind": "in", "amount": "0"})

    assert response.status_code == 400


def test_clerk_can_view_but_not_post(client, clerk_headers):
    assert client.get(f"{API}/kasa", headers=clerk_headers).status_code == 200

    response = client.post(f"{API}/kasa", headers=clerk_headers, json={"kind": "out", "amount": "10"})

    assert response.status_code == 403


def test_regular_user_cannot_see_cash(client, regular_headers):
    assert client.get(f"{API}/kasa/bakiye", headers=regular_headers).status_code == 403


def test_oversized_amount_is_rejected(client, admin_headers):
    response = client.post(f"{API}/kasa", headers=admin_headers, json={"kind": "in", "amount": "1e30"})

    assert response.status_code == 400
    assert Decimal(client.get(f"{API}/kasa/bakiye", headers=admin_headers).json()["data"]["balance"]) == Decimal("0")
