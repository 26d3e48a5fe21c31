from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from frontdesk.db.models.enums import Gender

class DoctorBase(BaseModel):
    name: str
    email: str
    phone: str
    specialization: str
    gender: Gender
    location: str
    available_slots: List[str] = []
    consult_duration_minutes: int = Field(default=15, gt=0)

class DoctorCreate(DoctorBase):
    pass

class DoctorUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    specialization: Optional[str] = None
    gender: Optional[Gender] = None
    location: Optional[str] = None
    available_slots: Optional[List[str]] = None
    consult_duration_minutes: Optional[int] = Field(default=None, gt=0)

class DoctorStatusUpdate(BaseModel):
    is_active: bool

class DoctorResponse(DoctorBase):
    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DoctorListResponse(BaseModel):
    doctors: List[DoctorResponse]
    page: int
    limit: int
    total: int
    total_pages: int
