"""
Ledger models: advances, charges and balance payments on either side of a trip.
"""
from sqlalchemy import Column, String, Numeric, Date, Text, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class TransactionSide(str, enum.Enum):
    """Which half of the trip a ledger entry belongs to."""
    PARTY = "party"
    SUPPLIER = "supplier"


class PaymentMode(str, enum.Enum):
    """How money changed hands."""
    UPI = "UPI"
    CASH = "Cash"
    BANK = "Bank"
    CHEQUE = "Cheque"
    FUEL = "Fuel"
    OTHERS = "Others"


class ChargeOperation(str, enum.Enum):
    """Whether a charge increases or decreases the amount owed."""
    ADD = "add"
    DEDUCT = "deduct"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Advance(BaseModel):
    """Payment received before final settlement."""
    __tablename__ = "advances"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    side = Column(SQLEnum(TransactionSide, values_callable=_values), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    received_date = Column(Date, nullable=False)
    payment_mode = Column(SQLEnum(PaymentMode, values_callable=_values), nullable=False)
    notes = Column(Text, nullable=True)

    trip = relationship("Trip", back_populates="advances")


class Charge(BaseModel):
    """Line-item surcharge or deduction."""
    __tablename__ = "charges"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    side = Column(SQLEnum(TransactionSide, values_callable=_values), nullable=False, index=True)
    charge_type_id = Column(Integer, ForeignKey("charge_types.id"), nullable=False, index=True)
    operation = Column(SQLEnum(ChargeOperation, values_callable=_values), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=True)

    trip = relationship("Trip", back_populates="charges")
    charge_type = relationship("ChargeType")


class BalancePayment(BaseModel):
    """Payment applied toward final settlement."""
    __tablename__ = "balance_payments"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    side = Column(SQLEnum(TransactionSide, values_callable=_values), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    received_date = Column(Date, nullable=False)
    payment_mode = Column(SQLEnum(PaymentMode, values_callable=_values), nullable=False)
    notes = Column(Text, nullable=True)

    trip = relationship("Trip", back_populates="balance_payments")
