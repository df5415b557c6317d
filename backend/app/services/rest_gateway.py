"""
Ledger gateway over a PostgREST-style remote data API.

Rows are addressed as ``/<table>?column=eq.value`` and writes ask for the
stored representation back (``Prefer: return=representation``). Transport
failures and non-2xx replies become StoreError; they are not retried here.
"""
import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import httpx
from app.core.exceptions import NotFoundError, StoreError, ValidationError
from app.models.ledger import TransactionSide
from app.services.ledger_entries import (
    AdvanceEntry, ChargeEntry, BalancePaymentEntry, ChargeTypeRecord, TripRecord,
    coerce_enum,
)
from app.services.ledger_gateway import LedgerGateway, clean_trip_update

logger = logging.getLogger(__name__)


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value[:10]) if value else None


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def _payload(**fields) -> Dict[str, Any]:
    return {key: _to_json(value) for key, value in fields.items()}


def trip_from_row(row: Dict[str, Any]) -> TripRecord:
    return TripRecord(
        id=row["id"],
        freight_party=row["freight_party"],
        freight_supplier=row["freight_supplier"],
        pod_uploaded=bool(row.get("pod_uploaded", False)),
        status=row.get("status", "open"),
        date=_parse_date(row.get("date")),
        origin=row.get("origin"),
        destination=row.get("destination"),
        party_id=row.get("party_id"),
        vehicle_id=row.get("vehicle_id"),
        lr_number=row.get("lr_number"),
    )


def advance_from_row(row: Dict[str, Any]) -> AdvanceEntry:
    return AdvanceEntry(
        id=row["id"], trip_id=row["trip_id"], side=row["side"], amount=row["amount"],
        received_date=_parse_date(row["received_date"]), payment_mode=row["payment_mode"],
        notes=row.get("notes"),
    )


def charge_from_row(row: Dict[str, Any]) -> ChargeEntry:
    return ChargeEntry(
        id=row["id"], trip_id=row["trip_id"], side=row["side"],
        charge_type_id=row["charge_type_id"], operation=row["operation"],
        amount=row["amount"], notes=row.get("notes"),
    )


def balance_payment_from_row(row: Dict[str, Any]) -> BalancePaymentEntry:
    return BalancePaymentEntry(
        id=row["id"], trip_id=row["trip_id"], side=row["side"], amount=row["amount"],
        received_date=_parse_date(row["received_date"]), payment_mode=row["payment_mode"],
        notes=row.get("notes"),
    )


def charge_type_from_row(row: Dict[str, Any]) -> ChargeTypeRecord:
    return ChargeTypeRecord(id=row["id"], name=row["name"], is_custom=bool(row.get("is_custom")))


class RestLedgerGateway(LedgerGateway):
    """Gateway that talks to the hosted database's REST interface."""

    def __init__(self, client: httpx.Client):
        self.client = client

    @classmethod
    def from_settings(cls, settings) -> "RestLedgerGateway":
        """Build a gateway with auth headers taken from settings."""
        headers = {"Content-Type": "application/json"}
        if settings.STORE_API_KEY:
            headers["apikey"] = settings.STORE_API_KEY
            headers["Authorization"] = f"Bearer {settings.STORE_API_KEY}"
        client = httpx.Client(
            base_url=settings.STORE_API_URL,
            headers=headers,
            timeout=settings.STORE_TIMEOUT_SECONDS,
        )
        return cls(client)

    def close(self) -> None:
        self.client.close()

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        headers = {"Prefer": "return=representation"} if method != "GET" else None
        try:
            response = self.client.request(method, f"/{table}", params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Store request timed out: {method} {table}")
            raise StoreError(f"Timed out calling {method} {table}") from e
        except httpx.HTTPError as e:
            logger.error(f"Store request failed: {method} {table}: {e}", exc_info=True)
            raise StoreError(f"Could not reach store for {method} {table}") from e

        if response.status_code >= 400:
            logger.error(f"Store error {response.status_code} on {method} {table}: {response.text}")
            raise StoreError(
                f"Store rejected {method} {table} with status {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Store returned a non-JSON body for {method} {table}: {response.text[:200]}")
            raise StoreError(
                f"Store returned an unreadable reply for {method} {table}",
                status_code=response.status_code,
            ) from e
        return data if isinstance(data, list) else [data]

    def _one(self, rows: List[Dict[str, Any]], entity: str, entity_id: Any) -> Dict[str, Any]:
        if not rows:
            raise NotFoundError(entity, entity_id)
        return rows[0]

    def _map(self, convert, row: Dict[str, Any], table: str):
        try:
            return convert(row)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"Malformed {table} row from store: {row!r}")
            raise StoreError(f"Store returned a malformed {table} row") from e

    def _created(self, rows: List[Dict[str, Any]], table: str) -> Dict[str, Any]:
        if not rows:
            raise StoreError(f"Store returned no row for insert into {table}")
        return rows[0]

    def _list(self, table: str, trip_id: Any, side: Optional[TransactionSide], order: str):
        params = {"trip_id": f"eq.{trip_id}", "order": order}
        if side is not None:
            params["side"] = f"eq.{coerce_enum(TransactionSide, side, 'side').value}"
        return self._request("GET", table, params=params)

    def _delete(self, table: str, entity: str, entity_id: Any) -> Dict[str, Any]:
        rows = self._request("DELETE", table, params={"id": f"eq.{entity_id}"})
        return self._one(rows, entity, entity_id)

    # Trips

    def get_trip(self, trip_id) -> TripRecord:
        rows = self._request("GET", "trips", params={"id": f"eq.{trip_id}"})
        return self._map(trip_from_row, self._one(rows, "Trip", trip_id), "trips")

    def update_trip(self, trip_id, **partial) -> TripRecord:
        cleaned = clean_trip_update(partial)
        rows = self._request("PATCH", "trips", params={"id": f"eq.{trip_id}"}, json=_payload(**cleaned))
        return self._map(trip_from_row, self._one(rows, "Trip", trip_id), "trips")

    # Advances

    def list_advances(self, trip_id, side=None) -> List[AdvanceEntry]:
        rows = self._list("advances", trip_id, side, "received_date.desc")
        return [self._map(advance_from_row, r, "advances") for r in rows]

    def create_advance(self, entry: AdvanceEntry) -> AdvanceEntry:
        self.get_trip(entry.trip_id)
        rows = self._request("POST", "advances", json=_payload(
            trip_id=entry.trip_id, side=entry.side, amount=entry.amount,
            received_date=entry.received_date, payment_mode=entry.payment_mode, notes=entry.notes,
        ))
        return self._map(advance_from_row, self._created(rows, "advances"), "advances")

    def delete_advance(self, entry_id) -> AdvanceEntry:
        return self._map(advance_from_row, self._delete("advances", "Advance", entry_id), "advances")

    # Charges

    def list_charges(self, trip_id, side=None) -> List[ChargeEntry]:
        rows = self._list("charges", trip_id, side, "created_at.desc")
        return [self._map(charge_from_row, r, "charges") for r in rows]

    def create_charge(self, entry: ChargeEntry) -> ChargeEntry:
        self.get_trip(entry.trip_id)
        self.get_charge_type(entry.charge_type_id)
        rows = self._request("POST", "charges", json=_payload(
            trip_id=entry.trip_id, side=entry.side, charge_type_id=entry.charge_type_id,
            operation=entry.operation, amount=entry.amount, notes=entry.notes,
        ))
        return self._map(charge_from_row, self._created(rows, "charges"), "charges")

    def delete_charge(self, entry_id) -> ChargeEntry:
        return self._map(charge_from_row, self._delete("charges", "Charge", entry_id), "charges")

    # Balance payments

    def list_balance_payments(self, trip_id, side=None) -> List[BalancePaymentEntry]:
        rows = self._list("balance_payments", trip_id, side, "received_date.desc")
        return [self._map(balance_payment_from_row, r, "balance_payments") for r in rows]

    def create_balance_payment(self, entry: BalancePaymentEntry) -> BalancePaymentEntry:
        self.get_trip(entry.trip_id)
        rows = self._request("POST", "balance_payments", json=_payload(
            trip_id=entry.trip_id, side=entry.side, amount=entry.amount,
            received_date=entry.received_date, payment_mode=entry.payment_mode, notes=entry.notes,
        ))
        return self._map(balance_payment_from_row, self._created(rows, "balance_payments"), "balance_payments")

    def delete_balance_payment(self, entry_id) -> BalancePaymentEntry:
        return self._map(
            balance_payment_from_row, self._delete("balance_payments", "BalancePayment", entry_id), "balance_payments"
        )

    # Charge types

    def list_charge_types(self) -> List[ChargeTypeRecord]:
        rows = self._request("GET", "charge_types", params={"order": "is_custom,name"})
        return [self._map(charge_type_from_row, r, "charge_types") for r in rows]

    def get_charge_type(self, charge_type_id) -> ChargeTypeRecord:
        rows = self._request("GET", "charge_types", params={"id": f"eq.{charge_type_id}"})
        return self._map(charge_type_from_row, self._one(rows, "ChargeType", charge_type_id), "charge_types")

    def create_charge_type(self, name: str, is_custom: bool) -> ChargeTypeRecord:
        rows = self._request("POST", "charge_types", json={"name": name, "is_custom": is_custom})
        return self._map(charge_type_from_row, self._created(rows, "charge_types"), "charge_types")
