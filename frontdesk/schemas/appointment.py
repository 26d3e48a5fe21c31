import datetime as dt
from pydantic import BaseModel, Field
from uuid import UUID
from typing import Optional, List

from frontdesk.db.models.enums import AppointmentStatus

class AppointmentCreate(BaseModel):
    doctor_id: UUID
    patient_id: UUID
    date: dt.date
    time: dt.time
    duration: int = Field(default=30, gt=0)
    reason: str
    notes: Optional[str] = None

class AppointmentUpdate(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    duration: Optional[int] = Field(default=None, gt=0)
    reason: Optional[str] = None
    notes: Optional[str] = None

class AppointmentResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    patient_id: UUID
    date: dt.date
    time: dt.time
    duration: int
    reason: str
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True

class AppointmentListResponse(BaseModel):
    appointments: List[AppointmentResponse]
    page: int
    limit: int
    total: int
    total_pages: int
