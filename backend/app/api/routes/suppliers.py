"""
Supplier (vehicle owner) and vehicle routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.services.ledger_gateway import store_guard
from app.models.supplier import Supplier, Vehicle
from app.models.trip import Trip
from app.models.ledger import TransactionSide
from app.schemas.supplier import (
    SupplierCreate, SupplierUpdate, SupplierResponse,
    VehicleCreate, VehicleResponse,
)
from app.schemas.balances import StatementResponse
from app.api.dependencies import get_ledger_service
from app.services.ledger_service import LedgerService
from app.services.statement_service import build_statement

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


def get_supplier_or_404(supplier_id: int, db: Session) -> Supplier:
    """Load a supplier or raise 404."""
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Supplier not found"
        )
    return supplier


def _supplier_trips(supplier_id: int, db: Session):
    return db.query(Trip).join(Vehicle, Trip.vehicle_id == Vehicle.id).filter(
        Vehicle.supplier_id == supplier_id
    )


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    supplier_data: SupplierCreate,
    db: Session = Depends(get_db)
):
    """Create a supplier, optionally with its vehicles."""
    supplier = Supplier(name=supplier_data.name, contact_no=supplier_data.contact_no)
    for vehicle_no in supplier_data.vehicle_nos:
        if vehicle_no.strip():
            supplier.vehicles.append(Vehicle(vehicle_no=vehicle_no.strip().upper()))
    with store_guard(db, "create supplier"):
        db.add(supplier)
        db.commit()
        db.refresh(supplier)
    return supplier


@router.get("", response_model=List[SupplierResponse])
async def list_suppliers(db: Session = Depends(get_db)):
    """List all suppliers with their vehicles."""
    return db.query(Supplier).order_by(Supplier.name).all()


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db)
):
    """Get a supplier with its vehicles."""
    return get_supplier_or_404(supplier_id, db)


@router.patch("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    supplier_data: SupplierUpdate,
    db: Session = Depends(get_db)
):
    """Update a supplier."""
    supplier = get_supplier_or_404(supplier_id, db)
    for key, value in supplier_data.model_dump(exclude_unset=True).items():
        setattr(supplier, key, value)
    with store_guard(db, f"update supplier {supplier.id}"):
        db.commit()
        db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db)
):
    """Delete a supplier whose vehicles have no trips."""
    supplier = get_supplier_or_404(supplier_id, db)
    if _supplier_trips(supplier_id, db).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Supplier has trips and cannot be deleted"
        )
    with store_guard(db, f"delete supplier {supplier.id}"):
        db.delete(supplier)
        db.commit()
    return None


@router.get("/{supplier_id}/vehicles", response_model=List[VehicleResponse])
async def list_vehicles(
    supplier_id: int,
    db: Session = Depends(get_db)
):
    """List a supplier's vehicles."""
    get_supplier_or_404(supplier_id, db)
    return db.query(Vehicle).filter(Vehicle.supplier_id == supplier_id).order_by(Vehicle.vehicle_no).all()


@router.post("/{supplier_id}/vehicles", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def add_vehicle(
    supplier_id: int,
    vehicle_data: VehicleCreate,
    db: Session = Depends(get_db)
):
    """Add a vehicle to a supplier."""
    get_supplier_or_404(supplier_id, db)
    vehicle_no = vehicle_data.vehicle_no.strip().upper()
    if not vehicle_no:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vehicle number is required"
        )
    vehicle = Vehicle(supplier_id=supplier_id, vehicle_no=vehicle_no)
    with store_guard(db, "create vehicle"):
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
    return vehicle


@router.get("/{supplier_id}/statement", response_model=StatementResponse)
async def get_supplier_statement(
    supplier_id: int,
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Supplier-side balances for every trip run by the supplier's vehicles."""
    supplier = get_supplier_or_404(supplier_id, db)
    trips = _supplier_trips(supplier_id, db).order_by(Trip.date.desc(), Trip.id.desc()).all()
    return build_statement(ledger, trips, TransactionSide.SUPPLIER, supplier.id, supplier.name)
