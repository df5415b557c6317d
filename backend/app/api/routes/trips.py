"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.services.ledger_gateway import store_guard
from app.models.party import Party
from app.models.supplier import Vehicle
from app.models.trip import Trip, TripStatus
from app.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripDetailResponse,
    PodUpdate, TripStatusResponse,
)
from app.schemas.balances import TripBalancesResponse
from app.api.dependencies import get_ledger_service
from app.services.ledger_service import LedgerService, LedgerResult

router = APIRouter(prefix="/trips", tags=["trips"])


def get_trip_or_404(trip_id: int, db: Session) -> Trip:
    """Load a trip or raise 404."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )
    return trip


def check_references(party_id: Optional[int], vehicle_id: Optional[int], db: Session) -> None:
    """Ensure referenced party and vehicle exist."""
    if party_id is not None and not db.query(Party).filter(Party.id == party_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Party not found"
        )
    if vehicle_id is not None and not db.query(Vehicle).filter(Vehicle.id == vehicle_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )


def status_response(result: LedgerResult) -> TripStatusResponse:
    trip = result.record
    return TripStatusResponse(
        trip_id=trip.id,
        pod_uploaded=trip.pod_uploaded,
        status=trip.status,
        balances=TripBalancesResponse.from_balances(result.balances),
    )


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db)
):
    """Create a new trip. It starts open with no POD."""
    check_references(trip_data.party_id, trip_data.vehicle_id, db)

    new_trip = Trip(
        **trip_data.model_dump(),
        pod_uploaded=False,
        status=TripStatus.OPEN,
    )
    with store_guard(db, "create trip"):
        db.add(new_trip)
        db.commit()
        db.refresh(new_trip)

    return new_trip


@router.get("", response_model=List[TripResponse])
async def list_trips(
    party_id: Optional[int] = None,
    vehicle_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
    trip_status: Optional[TripStatus] = Query(None, alias="status"),
    pod_uploaded: Optional[bool] = None,
    lr_number: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List trips, newest first, with optional filters."""
    query = db.query(Trip)
    if party_id is not None:
        query = query.filter(Trip.party_id == party_id)
    if vehicle_id is not None:
        query = query.filter(Trip.vehicle_id == vehicle_id)
    if supplier_id is not None:
        query = query.join(Vehicle, Trip.vehicle_id == Vehicle.id).filter(Vehicle.supplier_id == supplier_id)
    if trip_status is not None:
        query = query.filter(Trip.status == trip_status)
    if pod_uploaded is not None:
        query = query.filter(Trip.pod_uploaded == pod_uploaded)
    if lr_number:
        query = query.filter(Trip.lr_number.ilike(f"%{lr_number}%"))
    return query.order_by(Trip.date.desc(), Trip.id.desc()).all()


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Get trip details with current balances."""
    trip = get_trip_or_404(trip_id, db)
    balances = ledger.balances(trip_id)

    return TripDetailResponse(
        **TripResponse.model_validate(trip).model_dump(),
        party_name=trip.party.name if trip.party else None,
        vehicle_no=trip.vehicle.vehicle_no if trip.vehicle else None,
        supplier_name=trip.vehicle.supplier.name if trip.vehicle else None,
        balances=TripBalancesResponse.from_balances(balances),
    )


@router.patch("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    db: Session = Depends(get_db)
):
    """Update trip details. POD flag and status are changed through their own endpoints."""
    trip = get_trip_or_404(trip_id, db)
    changes = trip_data.model_dump(exclude_unset=True)
    check_references(changes.get("party_id"), changes.get("vehicle_id"), db)

    for key, value in changes.items():
        setattr(trip, key, value)
    with store_guard(db, f"update trip {trip.id}"):
        db.commit()
        db.refresh(trip)

    return trip


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Delete a trip together with its ledger and POD records."""
    trip = get_trip_or_404(trip_id, db)
    with store_guard(db, f"delete trip {trip.id}"):
        db.delete(trip)
        db.commit()
    return None


@router.get("/{trip_id}/balances", response_model=TripBalancesResponse)
async def get_trip_balances(
    trip_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Recompute balances for both sides of a trip."""
    return TripBalancesResponse.from_balances(ledger.balances(trip_id))


@router.put("/{trip_id}/pod", response_model=TripStatusResponse)
async def set_pod(
    trip_id: int,
    pod: PodUpdate,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Set or clear the POD flag; status follows."""
    return status_response(ledger.set_pod_uploaded(trip_id, pod.pod_uploaded))


@router.post("/{trip_id}/pod/toggle", response_model=TripStatusResponse)
async def toggle_pod(
    trip_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Flip the POD flag."""
    return status_response(ledger.toggle_pod(trip_id))


@router.post("/{trip_id}/settle", response_model=TripStatusResponse)
async def settle_trip(
    trip_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Mark a trip settled."""
    return status_response(ledger.settle(trip_id))


@router.post("/{trip_id}/reopen", response_model=TripStatusResponse)
async def reopen_trip(
    trip_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Undo a settlement."""
    return status_response(ledger.reopen(trip_id))
