"""
Statement service: per-party / per-supplier view across trips.
"""
from typing import Any, Iterable
from app.models.ledger import TransactionSide
from app.schemas.balances import StatementResponse, StatementTrip
from app.services.balance_service import summarize_outstanding


def build_statement(ledger, trips: Iterable[Any], side: TransactionSide, owner_id: int, owner_name: str) -> StatementResponse:
    """
    Build a statement for one side from the given trips.
    Balances are recomputed per trip through the ledger service.
    """
    side = TransactionSide(side)
    lines = []
    all_balances = []
    for trip in trips:
        balances = ledger.balances(trip.id)
        all_balances.append(balances)
        totals = balances.for_side(side)
        lines.append(StatementTrip(
            trip_id=trip.id,
            date=trip.date,
            origin=trip.origin,
            destination=trip.destination,
            lr_number=trip.lr_number,
            status=trip.status,
            pod_uploaded=trip.pod_uploaded,
            freight=balances.freight_party if side == TransactionSide.PARTY else balances.freight_supplier,
            advances_total=totals.advances_total,
            charges_add=totals.charges_add,
            charges_deduct=totals.charges_deduct,
            balance_paid=totals.balance_paid,
            balance_remaining=totals.balance_remaining,
        ))

    summary = summarize_outstanding(all_balances, side)
    return StatementResponse(
        side=side,
        owner_id=owner_id,
        owner_name=owner_name,
        trip_count=summary.trip_count,
        freight_total=summary.freight_total,
        received_total=summary.received_total,
        remaining_total=summary.remaining_total,
        trips=lines,
    )
