"""
Party model (customer paying the freight).
"""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Party(BaseModel):
    """Customer who owes freight for trips."""
    __tablename__ = "parties"

    name = Column(String(200), nullable=False, index=True)
    contact_no = Column(String(20), nullable=True)
    pod_address = Column(Text, nullable=True)  # Where delivered PODs are sent
    drive_folder_id = Column(String(100), nullable=True)

    trips = relationship("Trip", back_populates="party")
