from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from frontdesk.db.models.enums import Gender

class PatientBase(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    gender: Optional[Gender] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None

class PatientCreate(PatientBase):
    pass

class PatientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    gender: Optional[Gender] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None

class PatientResponse(PatientBase):
    id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PatientListResponse(BaseModel):
    patients: List[PatientResponse]
    page: int
    limit: int
    total: int
    total_pages: int
