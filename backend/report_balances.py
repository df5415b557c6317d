"""
Print recomputed balances for one or more trips.

Usage: python report_balances.py <trip_id> [<trip_id> ...]
Uses the store named by STORE_BACKEND (local database or remote data API).
"""
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.core.exceptions import LedgerError
from app.core.logging_config import setup_logging
from app.db.session import SessionLocal
from app.models.ledger import TransactionSide
from app.services.balance_service import load_trip_balances, summarize_outstanding
from app.services.gateway_factory import build_gateway


def report(trip_ids):
    """Print per-side balances for each trip, then the outstanding totals."""
    db = SessionLocal() if settings.STORE_BACKEND.lower() == "sql" else None
    gateway = build_gateway(settings, db)
    all_balances = []
    try:
        for trip_id in trip_ids:
            try:
                balances = load_trip_balances(gateway, trip_id)
            except LedgerError as e:
                print(f"Trip {trip_id}: {e.message}")
                continue
            all_balances.append(balances)
            print(f"Trip {trip_id}")
            for side in TransactionSide:
                totals = balances.for_side(side)
                print(
                    f"  {side.value:<9} advances={totals.advances_total} "
                    f"+charges={totals.charges_add} -charges={totals.charges_deduct} "
                    f"paid={totals.balance_paid} remaining={totals.balance_remaining}"
                )

        for side in TransactionSide:
            summary = summarize_outstanding(all_balances, side)
            print(
                f"Outstanding {side.value}: {summary.remaining_total} "
                f"across {summary.trip_count} trips"
            )
    finally:
        if db is not None:
            db.close()
        elif hasattr(gateway, "close"):
            gateway.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    report(sys.argv[1:])
