"""
POD image record routes. Files live in the cloud drive; only references are kept.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.services.ledger_gateway import store_guard
from app.models.pod import Pod
from app.schemas.pod import PodCreate, PodResponse
from app.api.routes.trips import get_trip_or_404

router = APIRouter(prefix="/trips/{trip_id}/pods", tags=["pods"])


@router.get("", response_model=List[PodResponse])
async def list_pods(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List POD images of a trip, newest first."""
    get_trip_or_404(trip_id, db)
    return db.query(Pod).filter(Pod.trip_id == trip_id).order_by(Pod.created_at.desc(), Pod.id.desc()).all()


@router.post("", response_model=PodResponse, status_code=status.HTTP_201_CREATED)
async def add_pod(
    trip_id: int,
    pod_data: PodCreate,
    db: Session = Depends(get_db)
):
    """Record a POD image that was uploaded to the drive."""
    get_trip_or_404(trip_id, db)
    pod = Pod(trip_id=trip_id, **pod_data.model_dump())
    with store_guard(db, "create pod"):
        db.add(pod)
        db.commit()
        db.refresh(pod)
    return pod


@router.delete("/{pod_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pod(
    trip_id: int,
    pod_id: int,
    db: Session = Depends(get_db)
):
    """Remove a POD image record."""
    pod = db.query(Pod).filter(Pod.id == pod_id, Pod.trip_id == trip_id).first()
    if not pod:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="POD not found"
        )
    with store_guard(db, f"delete pod {pod.id}"):
        db.delete(pod)
        db.commit()
    return None
