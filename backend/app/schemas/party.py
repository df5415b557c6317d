"""
Pydantic schemas for Party entity.
"""
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


class PartyBase(BaseModel):
    """Base party schema."""
    name: str
    contact_no: Optional[str] = None
    pod_address: Optional[str] = None


class PartyCreate(PartyBase):
    """Schema for party creation."""
    drive_folder_id: Optional[str] = None


class PartyUpdate(BaseModel):
    """Schema for party update."""
    name: Optional[str] = None
    contact_no: Optional[str] = None
    pod_address: Optional[str] = None
    drive_folder_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class PartyResponse(PartyBase):
    """Schema for party response."""
    id: int
    drive_folder_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
