"""
Shared request dependencies.
"""
from fastapi import Depends
from sqlalchemy.orm import Session
from app.core.config import settings
from app.db.session import get_db
from app.services.charge_type_service import ChargeTypeRegistry
from app.services.ledger_gateway import SqlAlchemyLedgerGateway
from app.services.ledger_service import LedgerService, TripLockRegistry

# Process-wide so concurrent requests on the same trip share one lock
trip_locks = TripLockRegistry()


def get_gateway(db: Session = Depends(get_db)) -> SqlAlchemyLedgerGateway:
    """Ledger gateway bound to the request's database session."""
    return SqlAlchemyLedgerGateway(db)


def get_ledger_service(gateway: SqlAlchemyLedgerGateway = Depends(get_gateway)) -> LedgerService:
    """Ledger service configured from settings."""
    return LedgerService(
        gateway,
        locks=trip_locks if settings.SERIALIZE_TRIP_MUTATIONS else None,
        auto_settle=settings.AUTO_SETTLE_ON_ZERO_BALANCE,
    )


def get_charge_type_registry(gateway: SqlAlchemyLedgerGateway = Depends(get_gateway)) -> ChargeTypeRegistry:
    return ChargeTypeRegistry(gateway)
