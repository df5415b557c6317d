"""
Party (customer) management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.services.ledger_gateway import store_guard
from app.models.party import Party
from app.models.trip import Trip
from app.models.ledger import TransactionSide
from app.schemas.party import PartyCreate, PartyUpdate, PartyResponse
from app.schemas.balances import StatementResponse
from app.api.dependencies import get_ledger_service
from app.services.ledger_service import LedgerService
from app.services.statement_service import build_statement

router = APIRouter(prefix="/parties", tags=["parties"])


def get_party_or_404(party_id: int, db: Session) -> Party:
    """Load a party or raise 404."""
    party = db.query(Party).filter(Party.id == party_id).first()
    if not party:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Party not found"
        )
    return party


@router.post("", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
async def create_party(
    party_data: PartyCreate,
    db: Session = Depends(get_db)
):
    """Create a new party."""
    party = Party(**party_data.model_dump())
    with store_guard(db, "create party"):
        db.add(party)
        db.commit()
        db.refresh(party)
    return party


@router.get("", response_model=List[PartyResponse])
async def list_parties(db: Session = Depends(get_db)):
    """List all parties by name."""
    return db.query(Party).order_by(Party.name).all()


@router.get("/{party_id}", response_model=PartyResponse)
async def get_party(
    party_id: int,
    db: Session = Depends(get_db)
):
    """Get a party."""
    return get_party_or_404(party_id, db)


@router.patch("/{party_id}", response_model=PartyResponse)
async def update_party(
    party_id: int,
    party_data: PartyUpdate,
    db: Session = Depends(get_db)
):
    """Update a party."""
    party = get_party_or_404(party_id, db)
    for key, value in party_data.model_dump(exclude_unset=True).items():
        setattr(party, key, value)
    with store_guard(db, f"update party {party.id}"):
        db.commit()
        db.refresh(party)
    return party


@router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_party(
    party_id: int,
    db: Session = Depends(get_db)
):
    """Delete a party that has no trips."""
    party = get_party_or_404(party_id, db)
    if db.query(Trip).filter(Trip.party_id == party_id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Party has trips and cannot be deleted"
        )
    with store_guard(db, f"delete party {party.id}"):
        db.delete(party)
        db.commit()
    return None


@router.get("/{party_id}/statement", response_model=StatementResponse)
async def get_party_statement(
    party_id: int,
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Party-side balances for every trip of the party."""
    party = get_party_or_404(party_id, db)
    trips = db.query(Trip).filter(Trip.party_id == party_id).order_by(Trip.date.desc(), Trip.id.desc()).all()
    return build_statement(ledger, trips, TransactionSide.PARTY, party.id, party.name)
