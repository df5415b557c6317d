"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from app.models.trip import TripStatus
from app.schemas.balances import TripBalancesResponse


class TripBase(BaseModel):
    """Base trip schema."""
    date: date
    party_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    origin: str
    destination: str
    freight_party: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    freight_supplier: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    lr_number: Optional[str] = None
    material_desc: Optional[str] = None
    notes: Optional[str] = None


class TripCreate(TripBase):
    """Schema for trip creation. Status and POD flag start as open / not uploaded."""
    pass


class TripUpdate(BaseModel):
    """Schema for trip update. Status and POD flag have their own endpoints."""
    date: Optional[dt.date] = None
    party_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    freight_party: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    freight_supplier: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    lr_number: Optional[str] = None
    material_desc: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("date", "origin", "destination", "freight_party", "freight_supplier")
    @classmethod
    def reject_null(cls, v):
        """Required trip columns can be changed but not cleared."""
        if v is None:
            raise ValueError("cannot be null")
        return v


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    pod_uploaded: bool
    status: TripStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Trip with party/vehicle names and current balances."""
    party_name: Optional[str] = None
    vehicle_no: Optional[str] = None
    supplier_name: Optional[str] = None
    balances: TripBalancesResponse


class PodUpdate(BaseModel):
    """Schema for setting the POD flag."""
    pod_uploaded: bool


class TripStatusResponse(BaseModel):
    """POD flag / status after a lifecycle action, with balances."""
    trip_id: int
    pod_uploaded: bool
    status: TripStatus
    balances: TripBalancesResponse
