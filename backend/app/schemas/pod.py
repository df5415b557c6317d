"""
Pydantic schemas for POD image records.
"""
from pydantic import BaseModel
from datetime import datetime


class PodCreate(BaseModel):
    """Reference to an image already stored in the drive."""
    image_url: str
    drive_file_id: str
    file_name: str


class PodResponse(PodCreate):
    """Schema for POD response."""
    id: int
    trip_id: int
    created_at: datetime

    class Config:
        from_attributes = True
