"""
Charge type model (shared reference table).
"""
from sqlalchemy import Column, String, Boolean
from app.db.base import BaseModel


class ChargeType(BaseModel):
    """Named category of charge, built-in or user created."""
    __tablename__ = "charge_types"

    name = Column(String(100), nullable=False, index=True)
    is_custom = Column(Boolean, default=False, nullable=False)
