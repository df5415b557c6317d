"""
Ledger routes: advances, charges and balance payments of a trip.

Every create/delete answers with the affected entry and the trip's balances
recomputed from the store afterwards.
"""
from fastapi import APIRouter, Depends, status
from typing import List, Optional
from app.models.ledger import TransactionSide
from app.schemas.balances import TripBalancesResponse
from app.schemas.ledger import (
    AdvanceCreate, BalancePaymentCreate, ChargeCreate,
    PaymentResponse, ChargeResponse,
    PaymentMutationResponse, ChargeMutationResponse,
)
from app.api.dependencies import get_ledger_service
from app.services.ledger_entries import AdvanceEntry, BalancePaymentEntry, ChargeEntry
from app.services.ledger_service import LedgerService, LedgerResult

router = APIRouter(prefix="/trips/{trip_id}", tags=["ledger"])


def payment_mutation(result: LedgerResult) -> PaymentMutationResponse:
    return PaymentMutationResponse(
        entry=PaymentResponse.model_validate(result.record),
        balances=TripBalancesResponse.from_balances(result.balances),
    )


def charge_mutation(result: LedgerResult, charge_type_name: Optional[str] = None) -> ChargeMutationResponse:
    entry = ChargeResponse.model_validate(result.record)
    entry.charge_type_name = charge_type_name
    return ChargeMutationResponse(
        entry=entry,
        balances=TripBalancesResponse.from_balances(result.balances),
    )


# Advances

@router.get("/advances", response_model=List[PaymentResponse])
async def list_advances(
    trip_id: int,
    side: Optional[TransactionSide] = None,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """List advances of a trip, newest first."""
    ledger.gateway.get_trip(trip_id)
    return [PaymentResponse.model_validate(a) for a in ledger.gateway.list_advances(trip_id, side)]


@router.post("/advances", response_model=PaymentMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_advance(
    trip_id: int,
    advance_data: AdvanceCreate,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Record an advance on either side."""
    entry = AdvanceEntry(trip_id=trip_id, **advance_data.model_dump())
    return payment_mutation(ledger.add_advance(entry))


@router.delete("/advances/{advance_id}", response_model=PaymentMutationResponse)
async def delete_advance(
    trip_id: int,
    advance_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Delete an advance."""
    return payment_mutation(ledger.delete_advance(trip_id, advance_id))


# Charges

@router.get("/charges", response_model=List[ChargeResponse])
async def list_charges(
    trip_id: int,
    side: Optional[TransactionSide] = None,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """List charges of a trip with their type names."""
    ledger.gateway.get_trip(trip_id)
    names = {ct.id: ct.name for ct in ledger.gateway.list_charge_types()}
    charges = []
    for charge in ledger.gateway.list_charges(trip_id, side):
        response = ChargeResponse.model_validate(charge)
        response.charge_type_name = names.get(charge.charge_type_id)
        charges.append(response)
    return charges


@router.post("/charges", response_model=ChargeMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_charge(
    trip_id: int,
    charge_data: ChargeCreate,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Record a surcharge or deduction on either side."""
    entry = ChargeEntry(trip_id=trip_id, **charge_data.model_dump())
    result = ledger.add_charge(entry)
    return charge_mutation(result, ledger.gateway.get_charge_type(entry.charge_type_id).name)


@router.delete("/charges/{charge_id}", response_model=ChargeMutationResponse)
async def delete_charge(
    trip_id: int,
    charge_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Delete a charge."""
    result = ledger.delete_charge(trip_id, charge_id)
    return charge_mutation(result, ledger.gateway.get_charge_type(result.record.charge_type_id).name)


# Balance payments

@router.get("/balance-payments", response_model=List[PaymentResponse])
async def list_balance_payments(
    trip_id: int,
    side: Optional[TransactionSide] = None,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """List balance payments of a trip, newest first."""
    ledger.gateway.get_trip(trip_id)
    return [PaymentResponse.model_validate(p) for p in ledger.gateway.list_balance_payments(trip_id, side)]


@router.post("/balance-payments", response_model=PaymentMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_balance_payment(
    trip_id: int,
    payment_data: BalancePaymentCreate,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Record a balance payment. Supplier side requires the POD to be uploaded."""
    entry = BalancePaymentEntry(trip_id=trip_id, **payment_data.model_dump())
    return payment_mutation(ledger.add_balance_payment(entry))


@router.delete("/balance-payments/{payment_id}", response_model=PaymentMutationResponse)
async def delete_balance_payment(
    trip_id: int,
    payment_id: int,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Delete a balance payment."""
    return payment_mutation(ledger.delete_balance_payment(trip_id, payment_id))
