"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import (
    parties, suppliers, trips, ledger, charge_types, pods
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(parties.router)
api_router.include_router(suppliers.router)
api_router.include_router(trips.router)
api_router.include_router(ledger.router)
api_router.include_router(charge_types.router)
api_router.include_router(pods.router)
