"""
Trip model: one freight job between a party and a supplier's vehicle.
"""
from sqlalchemy import Column, String, Date, Boolean, Numeric, Text, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    OPEN = "open"
    POD_RECEIVED = "pod_received"
    SETTLED = "settled"


class Trip(BaseModel):
    """Trip model carrying the freight agreed with both sides."""
    __tablename__ = "trips"

    date = Column(Date, nullable=False, index=True)
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True, index=True)
    origin = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    freight_party = Column(Numeric(12, 2), nullable=False, default=0)  # Owed by the party
    freight_supplier = Column(Numeric(12, 2), nullable=False, default=0)  # Owed to the supplier
    lr_number = Column(String(50), nullable=True, index=True)
    material_desc = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    pod_uploaded = Column(Boolean, default=False, nullable=False)
    status = Column(
        SQLEnum(TripStatus, values_callable=lambda e: [m.value for m in e]),
        default=TripStatus.OPEN,
        nullable=False,
        index=True,
    )

    # Relationships
    party = relationship("Party", back_populates="trips")
    vehicle = relationship("Vehicle", back_populates="trips")
    advances = relationship("Advance", back_populates="trip", cascade="all, delete-orphan")
    charges = relationship("Charge", back_populates="trip", cascade="all, delete-orphan")
    balance_payments = relationship("BalancePayment", back_populates="trip", cascade="all, delete-orphan")
    pods = relationship("Pod", back_populates="trip", cascade="all, delete-orphan")
