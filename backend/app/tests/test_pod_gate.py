"""
Tests for the POD gate.
"""
import logging
import pytest
from app.core.exceptions import PodRequiredError
from app.services.ledger_entries import TripRecord
from app.services.pod_gate import can_add_balance_payment, ensure_balance_payment_allowed


@pytest.mark.parametrize("side, pod_uploaded, allowed", [
    ("party", False, True),
    ("party", True, True),
    ("supplier", False, False),
    ("supplier", True, True),
])
def test_gate_truth_table(side, pod_uploaded, allowed):
    trip = TripRecord(id=1, freight_party=100, freight_supplier=100, pod_uploaded=pod_uploaded)
    assert can_add_balance_payment(trip, side) is allowed


def test_rejection_raises_and_logs(caplog):
    trip = TripRecord(id=42, freight_party=100, freight_supplier=100)
    with caplog.at_level(logging.WARNING):
        with pytest.raises(PodRequiredError) as exc:
            ensure_balance_payment_allowed(trip, "supplier")
    assert exc.value.trip_id == 42
    assert exc.value.code == "POD_REQUIRED"
    assert "trip 42" in caplog.text


def test_allowed_payment_passes_silently():
    trip = TripRecord(id=1, freight_party=100, freight_supplier=100, pod_uploaded=True)
    ensure_balance_payment_allowed(trip, "supplier")
