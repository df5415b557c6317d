"""
Immutable ledger values the balance engine works with.

These are store-agnostic: gateways map their rows into these records and the
aggregator, POD gate and lifecycle functions only ever see these.
Construction validates every field and raises ValidationError naming the
offending one; nothing is silently coerced beyond literal -> enum and
number -> Decimal.
"""
from dataclasses import dataclass
import datetime as dt
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Type, TypeVar
from app.core.exceptions import ValidationError
from app.core.utils import parse_decimal
from app.models.ledger import TransactionSide, PaymentMode, ChargeOperation
from app.models.trip import TripStatus

E = TypeVar("E")

# Amount columns are Numeric(12, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")


def coerce_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    """Accept an enum member or its literal value."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(field_name, f"{value!r} is not one of: {allowed}")


def coerce_amount(value: Any, field_name: str = "amount", allow_zero: bool = False) -> Decimal:
    """Positive (or non-negative) finite Decimal that fits the amount columns exactly."""
    try:
        amount = parse_decimal(value)
    except ValueError as e:
        raise ValidationError(field_name, str(e))
    if not amount.is_finite():
        raise ValidationError(field_name, "must be a finite number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(field_name, "must be positive" if not allow_zero else "must not be negative")
    if amount > MAX_AMOUNT:
        raise ValidationError(field_name, f"must not exceed {MAX_AMOUNT}")
    if amount != amount.quantize(CENT):
        raise ValidationError(field_name, "must have at most 2 decimal places")
    return amount


def _set(obj, name, value):
    object.__setattr__(obj, name, value)


def _check_date(value: Any, field_name: str) -> None:
    if not isinstance(value, date):
        raise ValidationError(field_name, f"{value!r} is not a date")


@dataclass(frozen=True)
class AdvanceEntry:
    """Money received ahead of settlement; reduces the remaining balance."""
    trip_id: Any
    side: TransactionSide
    amount: Decimal
    received_date: date
    payment_mode: PaymentMode
    notes: Optional[str] = None
    id: Any = None

    def __post_init__(self):
        _set(self, "side", coerce_enum(TransactionSide, self.side, "side"))
        _set(self, "amount", coerce_amount(self.amount))
        _check_date(self.received_date, "received_date")
        _set(self, "payment_mode", coerce_enum(PaymentMode, self.payment_mode, "payment_mode"))


@dataclass(frozen=True)
class BalancePaymentEntry:
    """Settlement payment against the final balance."""
    trip_id: Any
    side: TransactionSide
    amount: Decimal
    received_date: date
    payment_mode: PaymentMode
    notes: Optional[str] = None
    id: Any = None

    def __post_init__(self):
        _set(self, "side", coerce_enum(TransactionSide, self.side, "side"))
        _set(self, "amount", coerce_amount(self.amount))
        _check_date(self.received_date, "received_date")
        _set(self, "payment_mode", coerce_enum(PaymentMode, self.payment_mode, "payment_mode"))


@dataclass(frozen=True)
class ChargeEntry:
    """Surcharge (add) or deduction (deduct) on the amount owed."""
    trip_id: Any
    side: TransactionSide
    charge_type_id: Any
    operation: ChargeOperation
    amount: Decimal
    notes: Optional[str] = None
    id: Any = None

    def __post_init__(self):
        _set(self, "side", coerce_enum(TransactionSide, self.side, "side"))
        _set(self, "operation", coerce_enum(ChargeOperation, self.operation, "operation"))
        _set(self, "amount", coerce_amount(self.amount))
        if self.charge_type_id is None:
            raise ValidationError("charge_type_id", "is required")


@dataclass(frozen=True)
class ChargeTypeRecord:
    id: Any
    name: str
    is_custom: bool = False


@dataclass(frozen=True)
class TripRecord:
    """Snapshot of the trip fields the ledger needs."""
    id: Any
    freight_party: Decimal
    freight_supplier: Decimal
    pod_uploaded: bool = False
    status: TripStatus = TripStatus.OPEN
    date: Optional[dt.date] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    party_id: Any = None
    vehicle_id: Any = None
    lr_number: Optional[str] = None

    def __post_init__(self):
        _set(self, "freight_party", coerce_amount(self.freight_party, "freight_party", allow_zero=True))
        _set(self, "freight_supplier", coerce_amount(self.freight_supplier, "freight_supplier", allow_zero=True))
        _set(self, "status", coerce_enum(TripStatus, self.status, "status"))
        if not isinstance(self.pod_uploaded, bool):
            raise ValidationError("pod_uploaded", f"{self.pod_uploaded!r} is not a boolean")

    def freight(self, side: TransactionSide) -> Decimal:
        return self.freight_party if side == TransactionSide.PARTY else self.freight_supplier
