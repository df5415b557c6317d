"""
Database initialization script.
"""
from app.core.config import settings
from app.db.session import SessionLocal, init_db
from app.services.charge_type_service import seed_builtin_charge_types
from app.services.ledger_gateway import SqlAlchemyLedgerGateway

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    db = SessionLocal()
    try:
        created = seed_builtin_charge_types(SqlAlchemyLedgerGateway(db), settings.BUILTIN_CHARGE_TYPES)
    finally:
        db.close()
    print(f"Seeded {len(created)} built-in charge types")
    print("Database initialized successfully!")
