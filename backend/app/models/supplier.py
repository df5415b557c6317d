"""
Supplier (vehicle owner) and vehicle models.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Supplier(BaseModel):
    """Vehicle owner who is paid freight for trips."""
    __tablename__ = "suppliers"

    name = Column(String(200), nullable=False, index=True)
    contact_no = Column(String(20), nullable=True)

    vehicles = relationship("Vehicle", back_populates="supplier", cascade="all, delete-orphan")


class Vehicle(BaseModel):
    """A truck owned by a supplier."""
    __tablename__ = "vehicles"

    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    vehicle_no = Column(String(20), nullable=False, index=True)

    supplier = relationship("Supplier", back_populates="vehicles")
    trips = relationship("Trip", back_populates="vehicle")
