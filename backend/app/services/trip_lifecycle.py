"""
Trip lifecycle: open -> pod_received (and back) by POD flag, settled by action.

Every change of ``pod_uploaded`` goes through set_pod_uploaded so the status
column can never disagree with the flag. ``settled`` is entered only through
settle() and left only through reopen(); the POD flag alone never moves a
trip in or out of it.
"""
import logging
from typing import Any
from app.models.trip import TripStatus
from app.services.ledger_entries import TripRecord

logger = logging.getLogger(__name__)


def status_for_pod(current: TripStatus, pod_uploaded: bool) -> TripStatus:
    """Status a trip should have after its POD flag is set to ``pod_uploaded``."""
    current = TripStatus(current)
    if current == TripStatus.SETTLED:
        return TripStatus.SETTLED
    return TripStatus.POD_RECEIVED if pod_uploaded else TripStatus.OPEN


def set_pod_uploaded(gateway, trip_id: Any, pod_uploaded: bool) -> TripRecord:
    """Write the POD flag and its derived status in a single update."""
    trip = gateway.get_trip(trip_id)
    new_status = status_for_pod(trip.status, bool(pod_uploaded))
    if trip.pod_uploaded == bool(pod_uploaded) and trip.status == new_status:
        return trip

    logger.info(
        f"Trip {trip_id}: pod_uploaded {trip.pod_uploaded} -> {bool(pod_uploaded)}, "
        f"status {trip.status.value} -> {new_status.value}"
    )
    return gateway.update_trip(trip_id, pod_uploaded=bool(pod_uploaded), status=new_status)


def toggle_pod(gateway, trip_id: Any) -> TripRecord:
    """Flip the POD flag."""
    trip = gateway.get_trip(trip_id)
    return set_pod_uploaded(gateway, trip_id, not trip.pod_uploaded)


def settle(gateway, trip_id: Any) -> TripRecord:
    """Mark a trip settled. Settling a settled trip is a no-op."""
    trip = gateway.get_trip(trip_id)
    if trip.status == TripStatus.SETTLED:
        return trip
    logger.info(f"Trip {trip_id}: settled (was {trip.status.value})")
    return gateway.update_trip(trip_id, status=TripStatus.SETTLED)


def reopen(gateway, trip_id: Any) -> TripRecord:
    """Undo a settlement; the status falls back to what the POD flag implies."""
    trip = gateway.get_trip(trip_id)
    if trip.status != TripStatus.SETTLED:
        return trip
    new_status = TripStatus.POD_RECEIVED if trip.pod_uploaded else TripStatus.OPEN
    logger.info(f"Trip {trip_id}: reopened as {new_status.value}")
    return gateway.update_trip(trip_id, status=new_status)
