"""
Pydantic schemas for Supplier and Vehicle entities.
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime


class SupplierBase(BaseModel):
    """Base supplier schema."""
    name: str
    contact_no: Optional[str] = None


class SupplierCreate(SupplierBase):
    """Schema for supplier creation, optionally with vehicle numbers."""
    vehicle_nos: List[str] = []


class SupplierUpdate(BaseModel):
    """Schema for supplier update."""
    name: Optional[str] = None
    contact_no: Optional[str] = None

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class VehicleCreate(BaseModel):
    """Schema for vehicle creation."""
    vehicle_no: str


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    supplier_id: int
    vehicle_no: str

    class Config:
        from_attributes = True


class SupplierResponse(SupplierBase):
    """Schema for supplier response."""
    id: int
    created_at: datetime
    updated_at: datetime
    vehicles: List[VehicleResponse] = []

    class Config:
        from_attributes = True
