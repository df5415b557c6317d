"""
Proof-of-delivery image metadata.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Pod(BaseModel):
    """POD image stored in the cloud drive; only the reference lives here."""
    __tablename__ = "pods"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    image_url = Column(String(500), nullable=False)  # Drive web view link
    drive_file_id = Column(String(100), nullable=False)
    file_name = Column(String(255), nullable=False)

    trip = relationship("Trip", back_populates="pods")
