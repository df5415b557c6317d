"""
Charge type routes.
"""
from fastapi import APIRouter, Depends, status
from typing import List
from app.schemas.charge_type import ChargeTypeCreate, ChargeTypeResponse
from app.api.dependencies import get_charge_type_registry
from app.services.charge_type_service import ChargeTypeRegistry

router = APIRouter(prefix="/charge-types", tags=["charge-types"])


@router.get("", response_model=List[ChargeTypeResponse])
async def list_charge_types(
    registry: ChargeTypeRegistry = Depends(get_charge_type_registry)
):
    """List charge types, built-in first."""
    return [ChargeTypeResponse.model_validate(ct) for ct in registry.list()]


@router.post("", response_model=ChargeTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_charge_type(
    charge_type_data: ChargeTypeCreate,
    registry: ChargeTypeRegistry = Depends(get_charge_type_registry)
):
    """Create a charge type; an existing name returns the existing type."""
    return ChargeTypeResponse.model_validate(
        registry.create(charge_type_data.name, charge_type_data.is_custom)
    )
