"""
Balance service: folds a trip's ledger into per-side balances.

balance_remaining(S) = freight(S) + charges_add(S) - charges_deduct(S)
                       - advances_total(S) - balance_paid(S)

The fold is a plain sum per side, so input order never matters and the same
inputs always produce the same TripBalances. Remaining balances are not
clamped: a negative value is an overpayment.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List
from app.models.ledger import TransactionSide, ChargeOperation
from app.services.ledger_entries import (
    AdvanceEntry, ChargeEntry, BalancePaymentEntry, TripRecord,
)

ZERO = Decimal("0")


@dataclass(frozen=True)
class SideBalance:
    """Totals for one side of a trip."""
    advances_total: Decimal
    charges_add: Decimal
    charges_deduct: Decimal
    balance_paid: Decimal
    balance_remaining: Decimal


@dataclass(frozen=True)
class TripBalances:
    """Derived, read-only view of a trip's ledger. Never stored."""
    trip_id: Any
    freight_party: Decimal
    freight_supplier: Decimal
    party: SideBalance
    supplier: SideBalance

    def for_side(self, side: TransactionSide) -> SideBalance:
        return self.party if TransactionSide(side) == TransactionSide.PARTY else self.supplier

    def as_flat_dict(self) -> Dict[str, Any]:
        """Flat party_*/supplier_* layout of the trip_balances view."""
        flat: Dict[str, Any] = {
            "trip_id": self.trip_id,
            "freight_party": self.freight_party,
            "freight_supplier": self.freight_supplier,
        }
        for side in TransactionSide:
            totals = self.for_side(side)
            flat[f"{side.value}_advances_total"] = totals.advances_total
            flat[f"{side.value}_charges_add"] = totals.charges_add
            flat[f"{side.value}_charges_deduct"] = totals.charges_deduct
            flat[f"{side.value}_balance_paid"] = totals.balance_paid
            flat[f"{side.value}_balance_remaining"] = totals.balance_remaining
        return flat


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def compute_side_balance(
    freight: Decimal,
    side: TransactionSide,
    advances: Iterable[AdvanceEntry],
    charges: Iterable[ChargeEntry],
    balance_payments: Iterable[BalancePaymentEntry],
) -> SideBalance:
    """Fold one side's entries; entries tagged with the other side are skipped."""
    advances_total = _sum(a.amount for a in advances if a.side == side)
    charges = [c for c in charges if c.side == side]
    charges_add = _sum(c.amount for c in charges if c.operation == ChargeOperation.ADD)
    charges_deduct = _sum(c.amount for c in charges if c.operation == ChargeOperation.DEDUCT)
    balance_paid = _sum(p.amount for p in balance_payments if p.side == side)

    return SideBalance(
        advances_total=advances_total,
        charges_add=charges_add,
        charges_deduct=charges_deduct,
        balance_paid=balance_paid,
        balance_remaining=freight + charges_add - charges_deduct - advances_total - balance_paid,
    )


def compute_trip_balances(
    trip: TripRecord,
    advances: Iterable[AdvanceEntry],
    charges: Iterable[ChargeEntry],
    balance_payments: Iterable[BalancePaymentEntry],
) -> TripBalances:
    """
    Compute TripBalances for a trip from its full transaction sets.
    Entries that belong to another trip are ignored.
    """
    advances = [a for a in advances if a.trip_id == trip.id]
    charges = [c for c in charges if c.trip_id == trip.id]
    balance_payments = [p for p in balance_payments if p.trip_id == trip.id]

    per_side = {
        side: compute_side_balance(trip.freight(side), side, advances, charges, balance_payments)
        for side in TransactionSide
    }

    return TripBalances(
        trip_id=trip.id,
        freight_party=trip.freight_party,
        freight_supplier=trip.freight_supplier,
        party=per_side[TransactionSide.PARTY],
        supplier=per_side[TransactionSide.SUPPLIER],
    )


def load_trip_balances(gateway, trip_id: Any) -> TripBalances:
    """Re-read the trip and its full ledger from the store, then fold."""
    trip = gateway.get_trip(trip_id)
    return compute_trip_balances(
        trip,
        gateway.list_advances(trip_id),
        gateway.list_charges(trip_id),
        gateway.list_balance_payments(trip_id),
    )


def is_fully_paid(balances: TripBalances) -> bool:
    """Both sides have nothing left to pay."""
    return balances.party.balance_remaining <= ZERO and balances.supplier.balance_remaining <= ZERO


@dataclass(frozen=True)
class OutstandingSummary:
    """Totals for a party or supplier statement."""
    side: TransactionSide
    trip_count: int
    freight_total: Decimal
    received_total: Decimal
    remaining_total: Decimal


def summarize_outstanding(balances: Iterable[TripBalances], side: TransactionSide) -> OutstandingSummary:
    """Aggregate one side across several trips (statement totals)."""
    side = TransactionSide(side)
    rows: List[TripBalances] = list(balances)
    per_side = [b.for_side(side) for b in rows]
    freight_total = _sum(
        b.freight_party if side == TransactionSide.PARTY else b.freight_supplier for b in rows
    )
    return OutstandingSummary(
        side=side,
        trip_count=len(rows),
        freight_total=freight_total,
        received_total=_sum(s.advances_total + s.balance_paid for s in per_side),
        remaining_total=_sum(s.balance_remaining for s in per_side),
    )
