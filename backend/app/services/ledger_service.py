"""
Ledger service: applies ledger mutations and recomputes balances.

Flow for every mutation: take the trip's lock, consult the POD gate where it
applies, call the gateway, then re-read the full ledger and fold it into fresh
TripBalances. Balances are never patched incrementally.

Mutations on the same trip are serialized within this process when a
TripLockRegistry is supplied. Writers in other processes are not
coordinated; since balances are always re-read from the store, concurrent
writes can interleave but the reported balances never drift from the store.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional
from app.core.exceptions import NotFoundError
from app.models.ledger import TransactionSide
from app.services import trip_lifecycle
from app.services.balance_service import TripBalances, load_trip_balances, is_fully_paid
from app.services.ledger_entries import AdvanceEntry, ChargeEntry, BalancePaymentEntry, TripRecord
from app.services.pod_gate import ensure_balance_payment_allowed

logger = logging.getLogger(__name__)


class TripLockRegistry:
    """
    One lock per trip id, kept only while some caller holds or waits on it.

    Serializes callers on different threads (scripts, worker threads, sync
    routes run in the threadpool). The API routes are ``async def`` and run
    their store calls on the event loop thread one request at a time, so
    there the lock is never contended.
    """

    def __init__(self):
        self._locks: Dict[Any, threading.Lock] = {}
        self._users: Dict[Any, int] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, trip_id: Any):
        with self._guard:
            lock = self._locks.setdefault(trip_id, threading.Lock())
            self._users[trip_id] = self._users.get(trip_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[trip_id] -= 1
                if not self._users[trip_id]:
                    del self._users[trip_id]
                    del self._locks[trip_id]

    def is_held(self, trip_id: Any) -> bool:
        with self._guard:
            lock = self._locks.get(trip_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


@dataclass(frozen=True)
class LedgerResult:
    """The stored record (entry or trip) plus balances re-read afterwards."""
    record: Any
    balances: TripBalances


class LedgerService:
    """Ledger mutations for trips, backed by a LedgerGateway."""

    def __init__(self, gateway, locks: Optional[TripLockRegistry] = None, auto_settle: bool = False):
        self.gateway = gateway
        self.locks = locks
        self.auto_settle = auto_settle

    @contextmanager
    def _trip_lock(self, trip_id: Any):
        if self.locks is None:
            yield
            return
        with self.locks.hold(trip_id):
            yield

    def _finish(self, trip_id: Any, record: Any) -> LedgerResult:
        balances = load_trip_balances(self.gateway, trip_id)
        if self.auto_settle and is_fully_paid(balances):
            settled = trip_lifecycle.settle(self.gateway, trip_id)
            if isinstance(record, TripRecord):
                record = settled
        return LedgerResult(record=record, balances=balances)

    def _ensure_on_trip(self, entries, entity: str, entry_id: Any) -> None:
        if not any(str(e.id) == str(entry_id) for e in entries):
            raise NotFoundError(entity, entry_id)

    def balances(self, trip_id: Any) -> TripBalances:
        return load_trip_balances(self.gateway, trip_id)

    # Advances

    def add_advance(self, entry: AdvanceEntry) -> LedgerResult:
        with self._trip_lock(entry.trip_id):
            created = self.gateway.create_advance(entry)
            logger.info(f"Trip {entry.trip_id}: {entry.side.value} advance {entry.amount} recorded (id={created.id})")
            return self._finish(entry.trip_id, created)

    def delete_advance(self, trip_id: Any, entry_id: Any) -> LedgerResult:
        with self._trip_lock(trip_id):
            self._ensure_on_trip(self.gateway.list_advances(trip_id), "Advance", entry_id)
            deleted = self.gateway.delete_advance(entry_id)
            logger.info(f"Trip {deleted.trip_id}: {deleted.side.value} advance {deleted.amount} deleted (id={entry_id})")
            return self._finish(deleted.trip_id, deleted)

    # Charges

    def add_charge(self, entry: ChargeEntry) -> LedgerResult:
        with self._trip_lock(entry.trip_id):
            created = self.gateway.create_charge(entry)
            logger.info(
                f"Trip {entry.trip_id}: {entry.side.value} charge {entry.operation.value} "
                f"{entry.amount} recorded (id={created.id})"
            )
            return self._finish(entry.trip_id, created)

    def delete_charge(self, trip_id: Any, entry_id: Any) -> LedgerResult:
        with self._trip_lock(trip_id):
            self._ensure_on_trip(self.gateway.list_charges(trip_id), "Charge", entry_id)
            deleted = self.gateway.delete_charge(entry_id)
            logger.info(f"Trip {deleted.trip_id}: {deleted.side.value} charge deleted (id={entry_id})")
            return self._finish(deleted.trip_id, deleted)

    # Balance payments

    def add_balance_payment(self, entry: BalancePaymentEntry) -> LedgerResult:
        with self._trip_lock(entry.trip_id):
            if entry.side == TransactionSide.SUPPLIER:
                ensure_balance_payment_allowed(self.gateway.get_trip(entry.trip_id), entry.side)
            created = self.gateway.create_balance_payment(entry)
            logger.info(
                f"Trip {entry.trip_id}: {entry.side.value} balance payment {entry.amount} recorded (id={created.id})"
            )
            return self._finish(entry.trip_id, created)

    def delete_balance_payment(self, trip_id: Any, entry_id: Any) -> LedgerResult:
        with self._trip_lock(trip_id):
            self._ensure_on_trip(self.gateway.list_balance_payments(trip_id), "BalancePayment", entry_id)
            deleted = self.gateway.delete_balance_payment(entry_id)
            logger.info(f"Trip {deleted.trip_id}: {deleted.side.value} balance payment deleted (id={entry_id})")
            return self._finish(deleted.trip_id, deleted)

    # Trip status

    def set_pod_uploaded(self, trip_id: Any, pod_uploaded: bool) -> LedgerResult:
        with self._trip_lock(trip_id):
            trip = trip_lifecycle.set_pod_uploaded(self.gateway, trip_id, pod_uploaded)
            return self._finish(trip_id, trip)

    def toggle_pod(self, trip_id: Any) -> LedgerResult:
        with self._trip_lock(trip_id):
            trip = trip_lifecycle.toggle_pod(self.gateway, trip_id)
            return self._finish(trip_id, trip)

    def settle(self, trip_id: Any) -> LedgerResult:
        with self._trip_lock(trip_id):
            trip = trip_lifecycle.settle(self.gateway, trip_id)
            return LedgerResult(record=trip, balances=load_trip_balances(self.gateway, trip_id))

    def reopen(self, trip_id: Any) -> LedgerResult:
        with self._trip_lock(trip_id):
            trip = trip_lifecycle.reopen(self.gateway, trip_id)
            return LedgerResult(record=trip, balances=load_trip_balances(self.gateway, trip_id))
