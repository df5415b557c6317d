"""
Gateway selection from settings.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session
from app.services.ledger_gateway import LedgerGateway, SqlAlchemyLedgerGateway
from app.services.rest_gateway import RestLedgerGateway

logger = logging.getLogger(__name__)


def build_gateway(settings, db: Optional[Session] = None) -> LedgerGateway:
    """
    Build the ledger gateway named by settings.STORE_BACKEND.

    "sql" needs an open session; "rest" needs STORE_API_URL.
    """
    backend = settings.STORE_BACKEND.lower()
    if backend == "sql":
        if db is None:
            raise ValueError("A database session is required for the sql store backend")
        return SqlAlchemyLedgerGateway(db)
    if backend == "rest":
        if not settings.STORE_API_URL:
            raise ValueError("STORE_API_URL must be set for the rest store backend")
        logger.info(f"Using remote store at {settings.STORE_API_URL}")
        return RestLedgerGateway.from_settings(settings)
    raise ValueError(f"Unknown store backend: {settings.STORE_BACKEND}")
