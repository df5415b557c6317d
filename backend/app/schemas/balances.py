"""
Pydantic schemas for trip balances and statements.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date
from decimal import Decimal
from app.models.ledger import TransactionSide
from app.models.trip import TripStatus


class TripBalancesResponse(BaseModel):
    """Flat per-side totals for one trip (recomputed on every read)."""
    trip_id: int
    freight_party: Decimal
    freight_supplier: Decimal
    party_advances_total: Decimal
    party_charges_add: Decimal
    party_charges_deduct: Decimal
    party_balance_paid: Decimal
    party_balance_remaining: Decimal
    supplier_advances_total: Decimal
    supplier_charges_add: Decimal
    supplier_charges_deduct: Decimal
    supplier_balance_paid: Decimal
    supplier_balance_remaining: Decimal

    @classmethod
    def from_balances(cls, balances) -> "TripBalancesResponse":
        return cls(**balances.as_flat_dict())


class StatementTrip(BaseModel):
    """One trip line on a party or supplier statement."""
    trip_id: int
    date: date
    origin: str
    destination: str
    lr_number: Optional[str] = None
    status: TripStatus
    pod_uploaded: bool
    freight: Decimal
    advances_total: Decimal
    charges_add: Decimal
    charges_deduct: Decimal
    balance_paid: Decimal
    balance_remaining: Decimal


class StatementResponse(BaseModel):
    """Side-specific statement across all trips of a party or supplier."""
    side: TransactionSide
    owner_id: int
    owner_name: str
    trip_count: int
    freight_total: Decimal
    received_total: Decimal
    remaining_total: Decimal
    trips: List[StatementTrip] = []
