"""Models package - Import all models for SQLAlchemy registration."""
from app.models.party import Party
from app.models.supplier import Supplier, Vehicle
from app.models.trip import Trip, TripStatus
from app.models.charge_type import ChargeType
from app.models.ledger import (
    Advance, Charge, BalancePayment,
    TransactionSide, PaymentMode, ChargeOperation,
)
from app.models.pod import Pod

__all__ = [
    "Party",
    "Supplier",
    "Vehicle",
    "Trip",
    "TripStatus",
    "ChargeType",
    "Advance",
    "Charge",
    "BalancePayment",
    "TransactionSide",
    "PaymentMode",
    "ChargeOperation",
    "Pod",
]
