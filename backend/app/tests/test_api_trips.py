"""
Tests for trip endpoints and trip status actions.
"""
from decimal import Decimal
from sqlalchemy.exc import OperationalError
from app.models.trip import TripStatus


def trip_payload(party_id=None, vehicle_id=None, **overrides):
    payload = {
        "date": "2024-05-01",
        "party_id": party_id,
        "vehicle_id": vehicle_id,
        "origin": "Pune",
        "destination": "Nagpur",
        "freight_party": "5000",
        "freight_supplier": "4500",
        "lr_number": "LR-101",
    }
    payload.update(overrides)
    return payload


def test_create_trip_starts_open(client, party, vehicle):
    """Test trip creation."""
    response = client.post("/api/trips", json=trip_payload(party.id, vehicle.id))
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "open"
    assert data["pod_uploaded"] is False
    assert Decimal(data["freight_party"]) == Decimal("5000")


def test_create_trip_with_unknown_party(client):
    response = client.post("/api/trips", json=trip_payload(party_id=999))
    assert response.status_code == 404
    assert response.json()["detail"] == "Party not found"


def test_create_trip_rejects_negative_freight(client):
    response = client.post("/api/trips", json=trip_payload(freight_party="-1"))
    assert response.status_code == 422


def test_get_trip_includes_names_and_balances(client, trip):
    response = client.get(f"/api/trips/{trip.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["party_name"] == "Shree Cements"
    assert data["vehicle_no"] == "MH12AB1234"
    assert data["supplier_name"] == "Ravi Transport"
    assert Decimal(data["balances"]["party_balance_remaining"]) == Decimal("5000")
    assert Decimal(data["balances"]["supplier_balance_remaining"]) == Decimal("4500")


def test_list_trips_filters(client, make_trip, vehicle):
    make_trip(lr_number="LR-1")
    make_trip(lr_number="LR-2", pod_uploaded=True)

    assert len(client.get("/api/trips").json()) == 2
    pod_trips = client.get("/api/trips", params={"status": "pod_received"}).json()
    assert [t["lr_number"] for t in pod_trips] == ["LR-2"]
    assert len(client.get("/api/trips", params={"pod_uploaded": False}).json()) == 1
    assert len(client.get("/api/trips", params={"supplier_id": vehicle.supplier_id}).json()) == 2
    assert len(client.get("/api/trips", params={"lr_number": "lr-1"}).json()) == 1


def test_update_trip_cannot_set_status(client, trip):
    response = client.patch(
        f"/api/trips/{trip.id}",
        json={"destination": "Nashik", "status": "settled", "pod_uploaded": True},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["destination"] == "Nashik"
    assert data["status"] == "open"
    assert data["pod_uploaded"] is False


def test_update_freight_changes_balances(client, trip):
    client.patch(f"/api/trips/{trip.id}", json={"freight_party": "6000"})
    balances = client.get(f"/api/trips/{trip.id}/balances").json()
    assert Decimal(balances["party_balance_remaining"]) == Decimal("6000")


def test_pod_toggle_settle_reopen(client, trip):
    response = client.put(f"/api/trips/{trip.id}/pod", json={"pod_uploaded": True})
    assert response.status_code == 200
    assert response.json()["status"] == TripStatus.POD_RECEIVED.value

    toggled = client.post(f"/api/trips/{trip.id}/pod/toggle").json()
    assert toggled["pod_uploaded"] is False
    assert toggled["status"] == "open"

    client.post(f"/api/trips/{trip.id}/pod/toggle")
    assert client.post(f"/api/trips/{trip.id}/settle").json()["status"] == "settled"
    assert client.post(f"/api/trips/{trip.id}/pod/toggle").json()["status"] == "settled"

    reopened = client.post(f"/api/trips/{trip.id}/reopen").json()
    assert reopened["status"] == "open"
    assert Decimal(reopened["balances"]["party_balance_remaining"]) == Decimal("5000")


def test_status_action_on_missing_trip(client):
    response = client.post("/api/trips/999/settle")
    assert response.status_code == 404
    assert response.json() == {
        "error": "Trip 999 not found",
        "details": {"code": "NOT_FOUND", "entity": "Trip", "id": 999},
    }


def test_delete_trip_cascades(client, trip):
    trip_id = trip.id
    client.post(f"/api/trips/{trip_id}/advances", json={
        "side": "party", "amount": "100", "received_date": "2024-05-02", "payment_mode": "Cash",
    })
    assert client.delete(f"/api/trips/{trip_id}").status_code == 204
    assert client.get(f"/api/trips/{trip_id}").status_code == 404


def test_pod_image_records(client, trip):
    response = client.post(f"/api/trips/{trip.id}/pods", json={
        "image_url": "https://drive.example/file/abc",
        "drive_file_id": "abc",
        "file_name": "pod_LR-101.jpg",
    })
    assert response.status_code == 201
    pod_id = response.json()["id"]

    pods = client.get(f"/api/trips/{trip.id}/pods").json()
    assert [p["drive_file_id"] for p in pods] == ["abc"]

    assert client.delete(f"/api/trips/{trip.id}/pods/{pod_id}").status_code == 204
    assert client.delete(f"/api/trips/{trip.id}/pods/{pod_id}").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_sub_cent_freight_rejected(client, trip):
    assert client.post("/api/trips", json=trip_payload(freight_party="100.001")).status_code == 422
    assert client.patch(f"/api/trips/{trip.id}", json={"freight_supplier": "0.005"}).status_code == 422


def test_required_trip_fields_cannot_be_cleared(client, trip):
    for field in ("origin", "destination", "date", "freight_party"):
        response = client.patch(f"/api/trips/{trip.id}", json={field: None})
        assert response.status_code == 422
    assert client.get(f"/api/trips/{trip.id}").json()["origin"] == "Pune"


def test_database_failure_on_trip_update_is_store_error(client, db, trip, monkeypatch):
    trip_id = trip.id

    def failing_commit():
        raise OperationalError("UPDATE trips", {}, Exception("lost connection"))

    monkeypatch.setattr(db, "commit", failing_commit)
    response = client.patch(f"/api/trips/{trip_id}", json={"destination": "Nashik"})

    assert response.status_code == 502
    assert response.json()["details"] == {"code": "STORE_ERROR"}
    assert response.json()["error"] == f"Could not update trip {trip_id}"
