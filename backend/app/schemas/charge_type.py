"""
Pydantic schemas for ChargeType entity.
"""
from pydantic import BaseModel


class ChargeTypeCreate(BaseModel):
    """Schema for charge type creation."""
    name: str
    is_custom: bool = True


class ChargeTypeResponse(BaseModel):
    """Schema for charge type response."""
    id: int
    name: str
    is_custom: bool

    class Config:
        from_attributes = True
