"""
POD gate: supplier balance payments need an uploaded proof of delivery.

Advances and charges on either side, and party balance payments, are never
gated. The gate is a business rule above storage; gateways do not enforce it.
"""
import logging
from app.core.exceptions import PodRequiredError
from app.models.ledger import TransactionSide
from app.services.ledger_entries import TripRecord, coerce_enum

logger = logging.getLogger(__name__)


def can_add_balance_payment(trip: TripRecord, side: TransactionSide) -> bool:
    """False iff the payment is on the supplier side and POD is not uploaded."""
    side = coerce_enum(TransactionSide, side, "side")
    return not (side == TransactionSide.SUPPLIER and not trip.pod_uploaded)


def ensure_balance_payment_allowed(trip: TripRecord, side: TransactionSide) -> None:
    """Raise PodRequiredError when the gate rejects the payment."""
    if not can_add_balance_payment(trip, side):
        logger.warning(f"Rejected supplier balance payment for trip {trip.id}: POD not uploaded")
        raise PodRequiredError(trip.id)
