"""
Tests for advance, charge and balance payment endpoints.
"""
from decimal import Decimal


def payment(side="party", amount="1000", mode="UPI"):
    return {"side": side, "amount": amount, "received_date": "2024-05-02", "payment_mode": mode}


def remaining(response, side):
    return Decimal(response.json()["balances"][f"{side}_balance_remaining"])


def test_scenario_a(client, trip, charge_type):
    url = f"/api/trips/{trip.id}"
    response = client.post(f"{url}/advances", json=payment())
    assert response.status_code == 201
    assert remaining(response, "party") == Decimal("4000")

    client.post(f"{url}/charges", json={
        "side": "party", "charge_type_id": charge_type.id, "operation": "add", "amount": "200",
    })
    response = client.post(f"{url}/charges", json={
        "side": "party", "charge_type_id": charge_type.id, "operation": "deduct", "amount": "50",
    })
    assert response.status_code == 201
    assert response.json()["entry"]["charge_type_name"] == "Detention"
    assert remaining(response, "party") == Decimal("4150")
    assert remaining(response, "supplier") == Decimal("4500")


def test_supplier_balance_payment_requires_pod(client, trip):
    url = f"/api/trips/{trip.id}"
    response = client.post(f"{url}/balance-payments", json=payment("supplier", "1500", "Bank"))
    assert response.status_code == 409
    assert response.json()["details"] == {"code": "POD_REQUIRED", "trip_id": trip.id}

    client.put(f"{url}/pod", json={"pod_uploaded": True})
    response = client.post(f"{url}/balance-payments", json=payment("supplier", "1500", "Bank"))
    assert response.status_code == 201
    assert remaining(response, "supplier") == Decimal("3000")


def test_supplier_advance_is_not_gated(client, trip):
    response = client.post(f"/api/trips/{trip.id}/advances", json=payment("supplier", "2000", "Fuel"))
    assert response.status_code == 201
    assert remaining(response, "supplier") == Decimal("2500")


def test_overpayment_shows_negative_balance(client, make_trip):
    trip = make_trip(freight_party="1000")
    response = client.post(f"/api/trips/{trip.id}/advances", json=payment(amount="1200"))
    assert remaining(response, "party") == Decimal("-200")


def test_delete_advance_restores_balance(client, trip):
    url = f"/api/trips/{trip.id}"
    client.post(f"{url}/advances", json=payment("supplier", "900"))
    advance_id = client.post(f"{url}/advances", json=payment(amount="300")).json()["entry"]["id"]

    response = client.delete(f"{url}/advances/{advance_id}")
    assert response.status_code == 200
    assert Decimal(response.json()["entry"]["amount"]) == Decimal("300")
    assert remaining(response, "party") == Decimal("5000")
    assert remaining(response, "supplier") == Decimal("3600")

    assert client.delete(f"{url}/advances/{advance_id}").status_code == 404


def test_delete_charge_and_list(client, trip, charge_type):
    url = f"/api/trips/{trip.id}"
    created = client.post(f"{url}/charges", json={
        "side": "supplier", "charge_type_id": charge_type.id, "operation": "deduct", "amount": "250",
    }).json()
    charges = client.get(f"{url}/charges").json()
    assert [c["charge_type_name"] for c in charges] == ["Detention"]

    response = client.delete(f"{url}/charges/{created['entry']['id']}")
    assert response.status_code == 200
    assert remaining(response, "supplier") == Decimal("4500")
    assert client.get(f"{url}/charges").json() == []


def test_delete_balance_payment(client, make_trip):
    trip = make_trip(pod_uploaded=True)
    url = f"/api/trips/{trip.id}"
    payment_id = client.post(f"{url}/balance-payments", json=payment("supplier", "4500")).json()["entry"]["id"]
    response = client.delete(f"{url}/balance-payments/{payment_id}")
    assert remaining(response, "supplier") == Decimal("4500")


def test_list_with_side_filter(client, trip):
    url = f"/api/trips/{trip.id}"
    client.post(f"{url}/advances", json=payment("party", "100"))
    client.post(f"{url}/advances", json=payment("supplier", "200"))

    assert len(client.get(f"{url}/advances").json()) == 2
    supplier = client.get(f"{url}/advances", params={"side": "supplier"}).json()
    assert [Decimal(a["amount"]) for a in supplier] == [Decimal("200")]


def test_invalid_entries_rejected(client, trip):
    url = f"/api/trips/{trip.id}"
    assert client.post(f"{url}/advances", json=payment(amount="0")).status_code == 422
    assert client.post(f"{url}/advances", json=payment(side="broker")).status_code == 422
    assert client.post(f"{url}/advances", json=payment(mode="Barter")).status_code == 422


def test_unknown_charge_type(client, trip):
    response = client.post(f"/api/trips/{trip.id}/charges", json={
        "side": "party", "charge_type_id": 999, "operation": "add", "amount": "10",
    })
    assert response.status_code == 404
    assert response.json()["details"]["entity"] == "ChargeType"


def test_entries_on_missing_trip(client):
    assert client.get("/api/trips/999/advances").status_code == 404
    assert client.post("/api/trips/999/advances", json=payment()).status_code == 404


def test_entry_of_other_trip_cannot_be_deleted(client, make_trip):
    first, second = make_trip(), make_trip()
    advance_id = client.post(f"/api/trips/{first.id}/advances", json=payment()).json()["entry"]["id"]
    assert client.delete(f"/api/trips/{second.id}/advances/{advance_id}").status_code == 404
    assert len(client.get(f"/api/trips/{first.id}/advances").json()) == 1


def test_auto_settle_setting(client, make_trip, monkeypatch):
    from app.core.config import settings
    monkeypatch.setattr(settings, "AUTO_SETTLE_ON_ZERO_BALANCE", True)

    trip = make_trip(freight_party="1000", freight_supplier="800", pod_uploaded=True)
    url = f"/api/trips/{trip.id}"
    client.post(f"{url}/advances", json=payment("party", "1000"))
    assert client.get(url).json()["status"] == "pod_received"

    client.post(f"{url}/balance-payments", json=payment("supplier", "800"))
    assert client.get(url).json()["status"] == "settled"


def test_charge_types_endpoints(client):
    response = client.post("/api/charge-types", json={"name": "Weighbridge"})
    assert response.status_code == 201
    assert response.json()["is_custom"] is True
    client.post("/api/charge-types", json={"name": "Toll", "is_custom": False})

    again = client.post("/api/charge-types", json={"name": "weighbridge"})
    assert again.json()["id"] == response.json()["id"]

    names = [ct["name"] for ct in client.get("/api/charge-types").json()]
    assert names == ["Toll", "Weighbridge"]


def test_blank_charge_type_name(client):
    response = client.post("/api/charge-types", json={"name": "   "})
    assert response.status_code == 422
    assert response.json()["details"] == {"code": "VALIDATION_ERROR", "field": "name"}


def test_sub_cent_amount_rejected_before_storing(client, trip):
    url = f"/api/trips/{trip.id}"
    for amount in ("0.001", "1.005"):
        assert client.post(f"{url}/advances", json=payment(amount=amount)).status_code == 422

    assert client.get(f"{url}/advances").json() == []
    balances = client.get(f"{url}/balances")
    assert balances.status_code == 200
    assert Decimal(balances.json()["party_balance_remaining"]) == Decimal("5000")


def test_cent_amount_accepted(client, trip):
    response = client.post(f"/api/trips/{trip.id}/advances", json=payment(amount="1.01"))
    assert response.status_code == 201
    assert remaining(response, "party") == Decimal("4998.99")
