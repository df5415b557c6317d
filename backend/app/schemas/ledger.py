"""
Pydantic schemas for ledger entries (advances, charges, balance payments).
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal
from app.models.ledger import TransactionSide, PaymentMode, ChargeOperation
from app.schemas.balances import TripBalancesResponse


class PaymentCreate(BaseModel):
    """Shared body for advances and balance payments."""
    side: TransactionSide
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    received_date: date
    payment_mode: PaymentMode
    notes: Optional[str] = None


class AdvanceCreate(PaymentCreate):
    """Schema for advance creation."""
    pass


class BalancePaymentCreate(PaymentCreate):
    """Schema for balance payment creation."""
    pass


class ChargeCreate(BaseModel):
    """Schema for charge creation."""
    side: TransactionSide
    charge_type_id: int
    operation: ChargeOperation
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    """Schema for advance / balance payment response."""
    id: int
    trip_id: int
    side: TransactionSide
    amount: Decimal
    received_date: date
    payment_mode: PaymentMode
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ChargeResponse(BaseModel):
    """Schema for charge response."""
    id: int
    trip_id: int
    side: TransactionSide
    charge_type_id: int
    charge_type_name: Optional[str] = None
    operation: ChargeOperation
    amount: Decimal
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PaymentMutationResponse(BaseModel):
    """Created or deleted advance / balance payment plus recomputed balances."""
    entry: PaymentResponse
    balances: TripBalancesResponse


class ChargeMutationResponse(BaseModel):
    """Created or deleted charge plus recomputed balances."""
    entry: ChargeResponse
    balances: TripBalancesResponse
