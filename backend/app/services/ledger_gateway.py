"""
Ledger gateway: the record-store operations the ledger core relies on.

Each operation is atomic on its own; there are no multi-record transactions.
Gateways store whatever they are given; business rules such as the POD gate
live above them in the ledger service.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError, StoreError, ValidationError
from app.models.charge_type import ChargeType
from app.models.ledger import Advance, Charge, BalancePayment, TransactionSide
from app.models.trip import Trip, TripStatus
from app.services.ledger_entries import (
    AdvanceEntry, ChargeEntry, BalancePaymentEntry, ChargeTypeRecord, TripRecord,
    coerce_enum, coerce_amount,
)

logger = logging.getLogger(__name__)

# Trip columns the ledger is allowed to change through update_trip
TRIP_UPDATABLE_FIELDS = {
    "pod_uploaded", "status", "freight_party", "freight_supplier",
    "date", "origin", "destination", "lr_number", "material_desc", "notes",
    "party_id", "vehicle_id",
}


def clean_trip_update(partial: dict) -> dict:
    """Validate a partial trip update; raises ValidationError on unknown fields."""
    unknown = set(partial) - TRIP_UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(sorted(unknown)[0], "is not an updatable trip field")
    cleaned = dict(partial)
    if "status" in cleaned:
        cleaned["status"] = coerce_enum(TripStatus, cleaned["status"], "status")
    for name in ("freight_party", "freight_supplier"):
        if name in cleaned:
            cleaned[name] = coerce_amount(cleaned[name], name, allow_zero=True)
    if "pod_uploaded" in cleaned and not isinstance(cleaned["pod_uploaded"], bool):
        raise ValidationError("pod_uploaded", f"{cleaned['pod_uploaded']!r} is not a boolean")
    return cleaned


class LedgerGateway(ABC):
    """Record store contract, scoped by trip and optionally by side."""

    @abstractmethod
    def get_trip(self, trip_id: Any) -> TripRecord: ...

    @abstractmethod
    def update_trip(self, trip_id: Any, **partial) -> TripRecord: ...

    @abstractmethod
    def list_advances(self, trip_id: Any, side: Optional[TransactionSide] = None) -> List[AdvanceEntry]: ...

    @abstractmethod
    def create_advance(self, entry: AdvanceEntry) -> AdvanceEntry: ...

    @abstractmethod
    def delete_advance(self, entry_id: Any) -> AdvanceEntry: ...

    @abstractmethod
    def list_charges(self, trip_id: Any, side: Optional[TransactionSide] = None) -> List[ChargeEntry]: ...

    @abstractmethod
    def create_charge(self, entry: ChargeEntry) -> ChargeEntry: ...

    @abstractmethod
    def delete_charge(self, entry_id: Any) -> ChargeEntry: ...

    @abstractmethod
    def list_balance_payments(
        self, trip_id: Any, side: Optional[TransactionSide] = None
    ) -> List[BalancePaymentEntry]: ...

    @abstractmethod
    def create_balance_payment(self, entry: BalancePaymentEntry) -> BalancePaymentEntry: ...

    @abstractmethod
    def delete_balance_payment(self, entry_id: Any) -> BalancePaymentEntry: ...

    @abstractmethod
    def list_charge_types(self) -> List[ChargeTypeRecord]: ...

    @abstractmethod
    def get_charge_type(self, charge_type_id: Any) -> ChargeTypeRecord: ...

    @abstractmethod
    def create_charge_type(self, name: str, is_custom: bool) -> ChargeTypeRecord: ...


@contextmanager
def store_guard(db: Session, action: str):
    """Roll back and raise StoreError when a database call fails."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure while trying to {action}: {e}", exc_info=True)
        raise StoreError(f"Could not {action}") from e


def trip_record(trip: Trip) -> TripRecord:
    return TripRecord(
        id=trip.id,
        freight_party=trip.freight_party,
        freight_supplier=trip.freight_supplier,
        pod_uploaded=bool(trip.pod_uploaded),
        status=trip.status,
        date=trip.date,
        origin=trip.origin,
        destination=trip.destination,
        party_id=trip.party_id,
        vehicle_id=trip.vehicle_id,
        lr_number=trip.lr_number,
    )


def advance_entry(row: Advance) -> AdvanceEntry:
    return AdvanceEntry(
        id=row.id, trip_id=row.trip_id, side=row.side, amount=row.amount,
        received_date=row.received_date, payment_mode=row.payment_mode, notes=row.notes,
    )


def charge_entry(row: Charge) -> ChargeEntry:
    return ChargeEntry(
        id=row.id, trip_id=row.trip_id, side=row.side, charge_type_id=row.charge_type_id,
        operation=row.operation, amount=row.amount, notes=row.notes,
    )


def balance_payment_entry(row: BalancePayment) -> BalancePaymentEntry:
    return BalancePaymentEntry(
        id=row.id, trip_id=row.trip_id, side=row.side, amount=row.amount,
        received_date=row.received_date, payment_mode=row.payment_mode, notes=row.notes,
    )


def charge_type_record(row: ChargeType) -> ChargeTypeRecord:
    return ChargeTypeRecord(id=row.id, name=row.name, is_custom=bool(row.is_custom))


class SqlAlchemyLedgerGateway(LedgerGateway):
    """Gateway over the local SQLAlchemy models; commits per operation."""

    def __init__(self, db: Session):
        self.db = db

    def _store(self, action: str):
        return store_guard(self.db, action)

    def _get(self, model, entity: str, entity_id: Any):
        with self._store(f"load {entity.lower()} {entity_id}"):
            row = self.db.get(model, entity_id)
        if row is None:
            raise NotFoundError(entity, entity_id)
        return row

    def _list(self, model, trip_id: Any, side: Optional[TransactionSide], order_by):
        with self._store(f"list {model.__tablename__} for trip {trip_id}"):
            query = self.db.query(model).filter(model.trip_id == trip_id)
            if side is not None:
                query = query.filter(model.side == coerce_enum(TransactionSide, side, "side"))
            return query.order_by(*order_by).all()

    def _add(self, row, action: str):
        with self._store(action):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def _delete(self, model, entity: str, entity_id: Any, to_entry):
        row = self._get(model, entity, entity_id)
        entry = to_entry(row)
        with self._store(f"delete {entity.lower()} {entity_id}"):
            self.db.delete(row)
            self.db.commit()
        return entry

    # Trips

    def get_trip(self, trip_id: Any) -> TripRecord:
        return trip_record(self._get(Trip, "Trip", trip_id))

    def update_trip(self, trip_id: Any, **partial) -> TripRecord:
        cleaned = clean_trip_update(partial)
        trip = self._get(Trip, "Trip", trip_id)
        with self._store(f"update trip {trip_id}"):
            for key, value in cleaned.items():
                setattr(trip, key, value)
            self.db.commit()
            self.db.refresh(trip)
        return trip_record(trip)

    # Advances

    def list_advances(self, trip_id, side=None) -> List[AdvanceEntry]:
        rows = self._list(Advance, trip_id, side, (Advance.received_date.desc(), Advance.id.desc()))
        return [advance_entry(r) for r in rows]

    def create_advance(self, entry: AdvanceEntry) -> AdvanceEntry:
        self._get(Trip, "Trip", entry.trip_id)
        row = Advance(
            trip_id=entry.trip_id, side=entry.side, amount=entry.amount,
            received_date=entry.received_date, payment_mode=entry.payment_mode, notes=entry.notes,
        )
        return advance_entry(self._add(row, f"create advance for trip {entry.trip_id}"))

    def delete_advance(self, entry_id) -> AdvanceEntry:
        return self._delete(Advance, "Advance", entry_id, advance_entry)

    # Charges

    def list_charges(self, trip_id, side=None) -> List[ChargeEntry]:
        rows = self._list(Charge, trip_id, side, (Charge.created_at.desc(), Charge.id.desc()))
        return [charge_entry(r) for r in rows]

    def create_charge(self, entry: ChargeEntry) -> ChargeEntry:
        self._get(Trip, "Trip", entry.trip_id)
        self._get(ChargeType, "ChargeType", entry.charge_type_id)
        row = Charge(
            trip_id=entry.trip_id, side=entry.side, charge_type_id=entry.charge_type_id,
            operation=entry.operation, amount=entry.amount, notes=entry.notes,
        )
        return charge_entry(self._add(row, f"create charge for trip {entry.trip_id}"))

    def delete_charge(self, entry_id) -> ChargeEntry:
        return self._delete(Charge, "Charge", entry_id, charge_entry)

    # Balance payments

    def list_balance_payments(self, trip_id, side=None) -> List[BalancePaymentEntry]:
        rows = self._list(
            BalancePayment, trip_id, side,
            (BalancePayment.received_date.desc(), BalancePayment.id.desc()),
        )
        return [balance_payment_entry(r) for r in rows]

    def create_balance_payment(self, entry: BalancePaymentEntry) -> BalancePaymentEntry:
        self._get(Trip, "Trip", entry.trip_id)
        row = BalancePayment(
            trip_id=entry.trip_id, side=entry.side, amount=entry.amount,
            received_date=entry.received_date, payment_mode=entry.payment_mode, notes=entry.notes,
        )
        return balance_payment_entry(self._add(row, f"create balance payment for trip {entry.trip_id}"))

    def delete_balance_payment(self, entry_id) -> BalancePaymentEntry:
        return self._delete(BalancePayment, "BalancePayment", entry_id, balance_payment_entry)

    # Charge types

    def list_charge_types(self) -> List[ChargeTypeRecord]:
        with self._store("list charge types"):
            rows = self.db.query(ChargeType).order_by(ChargeType.is_custom, ChargeType.name).all()
        return [charge_type_record(r) for r in rows]

    def get_charge_type(self, charge_type_id) -> ChargeTypeRecord:
        return charge_type_record(self._get(ChargeType, "ChargeType", charge_type_id))

    def create_charge_type(self, name: str, is_custom: bool) -> ChargeTypeRecord:
        row = ChargeType(name=name, is_custom=is_custom)
        return charge_type_record(self._add(row, f"create charge type {name!r}"))
