"""
Tests for ledger mutations through the service.
"""
from datetime import date
from decimal import Decimal
import threading
import pytest
from app.core.exceptions import NotFoundError, PodRequiredError, ValidationError
from app.models.trip import TripStatus
from app.services.ledger_entries import AdvanceEntry, ChargeEntry, BalancePaymentEntry
from app.services.ledger_gateway import SqlAlchemyLedgerGateway
from app.services.ledger_service import LedgerService, TripLockRegistry

DAY = date(2024, 5, 1)


@pytest.fixture
def ledger(gateway):
    return LedgerService(gateway, locks=TripLockRegistry())


def test_scenario_a_through_the_store(ledger, trip, charge_type):
    ledger.add_advance(AdvanceEntry(trip.id, "party", 1000, DAY, "UPI"))
    ledger.add_charge(ChargeEntry(trip.id, "party", charge_type.id, "add", 200))
    result = ledger.add_charge(ChargeEntry(trip.id, "party", charge_type.id, "deduct", 50))

    assert result.record.id is not None
    assert result.balances.party.balance_remaining == Decimal("4150")
    assert ledger.balances(trip.id) == result.balances


def test_scenario_b_pod_gate(ledger, trip):
    payment = BalancePaymentEntry(trip.id, "supplier", 1500, DAY, "Bank")
    with pytest.raises(PodRequiredError):
        ledger.add_balance_payment(payment)
    assert ledger.gateway.list_balance_payments(trip.id) == []

    before = ledger.set_pod_uploaded(trip.id, True)
    assert before.record.status == TripStatus.POD_RECEIVED

    result = ledger.add_balance_payment(payment)
    assert result.balances.supplier.balance_paid == Decimal("1500")
    assert result.balances.supplier.balance_remaining == (
        before.balances.supplier.balance_remaining - Decimal("1500")
    )


def test_party_balance_payment_needs_no_pod(ledger, trip):
    result = ledger.add_balance_payment(BalancePaymentEntry(trip.id, "party", 500, DAY, "Cash"))
    assert result.balances.party.balance_remaining == Decimal("4500")


def test_scenario_c_delete_advance(ledger, trip):
    ledger.add_advance(AdvanceEntry(trip.id, "party", 700, DAY, "Cash"))
    target = ledger.add_advance(AdvanceEntry(trip.id, "party", 300, DAY, "Cash"))
    ledger.add_advance(AdvanceEntry(trip.id, "supplier", 900, DAY, "Fuel"))
    before = ledger.balances(trip.id)

    result = ledger.delete_advance(trip.id, target.record.id)

    assert result.record.amount == Decimal("300")
    assert result.balances.party.advances_total == before.party.advances_total - Decimal("300")
    assert result.balances.supplier == before.supplier


def test_delete_charge_and_balance_payment(ledger, make_trip, charge_type):
    trip = make_trip(pod_uploaded=True)
    charge = ledger.add_charge(ChargeEntry(trip.id, "supplier", charge_type.id, "deduct", 250))
    payment = ledger.add_balance_payment(BalancePaymentEntry(trip.id, "supplier", 1000, DAY, "Bank"))

    ledger.delete_charge(trip.id, charge.record.id)
    result = ledger.delete_balance_payment(trip.id, payment.record.id)
    assert result.balances.supplier.balance_remaining == Decimal("4500")


def test_delete_entry_of_another_trip_is_not_found(ledger, make_trip):
    first, second = make_trip(), make_trip()
    advance = ledger.add_advance(AdvanceEntry(first.id, "party", 100, DAY, "Cash"))
    with pytest.raises(NotFoundError):
        ledger.delete_advance(second.id, advance.record.id)
    assert len(ledger.gateway.list_advances(first.id)) == 1


def test_unknown_trip_and_charge_type(ledger, trip):
    with pytest.raises(NotFoundError) as exc:
        ledger.add_advance(AdvanceEntry(999, "party", 100, DAY, "Cash"))
    assert exc.value.entity == "Trip"

    with pytest.raises(NotFoundError) as exc:
        ledger.add_charge(ChargeEntry(trip.id, "party", 999, "add", 100))
    assert exc.value.entity == "ChargeType"


def test_side_filter(ledger, trip):
    ledger.add_advance(AdvanceEntry(trip.id, "party", 100, DAY, "Cash"))
    ledger.add_advance(AdvanceEntry(trip.id, "supplier", 200, DAY, "Cash"))
    supplier_only = ledger.gateway.list_advances(trip.id, "supplier")
    assert [a.amount for a in supplier_only] == [Decimal("200")]


def test_auto_settle_when_both_sides_paid(gateway, make_trip):
    ledger = LedgerService(gateway, auto_settle=True)
    trip = make_trip(freight_party="1000", freight_supplier="800", pod_uploaded=True)

    ledger.add_balance_payment(BalancePaymentEntry(trip.id, "party", 1000, DAY, "Bank"))
    assert gateway.get_trip(trip.id).status == TripStatus.POD_RECEIVED

    result = ledger.add_balance_payment(BalancePaymentEntry(trip.id, "supplier", 800, DAY, "Bank"))
    assert result.balances.supplier.balance_remaining == Decimal("0")
    assert gateway.get_trip(trip.id).status == TripStatus.SETTLED


def test_no_auto_settle_by_default(ledger, make_trip):
    trip = make_trip(freight_party="100", freight_supplier="0", pod_uploaded=True)
    ledger.add_advance(AdvanceEntry(trip.id, "party", 100, DAY, "Cash"))
    assert ledger.gateway.get_trip(trip.id).status == TripStatus.POD_RECEIVED


def test_settle_and_reopen(ledger, trip):
    assert ledger.settle(trip.id).record.status == TripStatus.SETTLED
    result = ledger.reopen(trip.id)
    assert result.record.status == TripStatus.OPEN
    assert result.balances.party.balance_remaining == Decimal("5000")


def test_lock_registry_serializes_threads_per_trip():
    locks = TripLockRegistry()
    entered = threading.Event()

    def worker(trip_id):
        with locks.hold(trip_id):
            entered.set()

    with locks.hold(1):
        other_trip = threading.Thread(target=worker, args=(2,))
        other_trip.start()
        assert entered.wait(1)
        other_trip.join()

        entered.clear()
        same_trip = threading.Thread(target=worker, args=(1,))
        same_trip.start()
        assert not entered.wait(0.1)

    same_trip.join(1)
    assert entered.is_set()


def test_lock_registry_forgets_released_locks():
    locks = TripLockRegistry()
    for trip_id in range(50):
        with locks.hold(trip_id):
            assert locks.is_held(trip_id)
    assert len(locks) == 0
    assert not locks.is_held(3)


class RecordingGateway(SqlAlchemyLedgerGateway):
    """Notes whether the trip lock was held while writing."""

    def __init__(self, db, locks):
        super().__init__(db)
        self.locks = locks
        self.held = []

    def create_advance(self, entry):
        self.held.append(self.locks.is_held(entry.trip_id))
        return super().create_advance(entry)


def test_mutations_hold_the_trip_lock(db, trip):
    locks = TripLockRegistry()
    gateway = RecordingGateway(db, locks)
    ledger = LedgerService(gateway, locks=locks)

    ledger.add_advance(AdvanceEntry(trip.id, "party", 100, DAY, "Cash"))

    assert gateway.held == [True]
    assert not locks.is_held(trip.id)
    assert len(locks) == 0


@pytest.mark.parametrize("amount", ["0.004", "1.005"])
def test_sub_cent_amounts_never_reach_the_store(ledger, trip, amount):
    with pytest.raises(ValidationError) as exc:
        ledger.add_advance(AdvanceEntry(trip.id, "party", amount, DAY, "Cash"))
    assert exc.value.field == "amount"

    assert ledger.gateway.list_advances(trip.id) == []
    assert ledger.balances(trip.id).party.balance_remaining == Decimal("5000")


def test_cent_amounts_round_trip_exactly(ledger, trip):
    result = ledger.add_advance(AdvanceEntry(trip.id, "party", "0.01", DAY, "Cash"))
    assert result.record.amount == Decimal("0.01")
    assert result.balances.party.balance_remaining == Decimal("4999.99")


def test_freight_update_with_sub_cent_value_is_rejected(gateway, trip):
    with pytest.raises(ValidationError) as exc:
        gateway.update_trip(trip.id, freight_party="100.001")
    assert exc.value.field == "freight_party"
    assert gateway.get_trip(trip.id).freight_party == Decimal("5000")
