from pydantic import BaseModel
from uuid import UUID
import datetime as dt
from typing import Optional, List

from frontdesk.db.models.enums import QueuePriority, QueueStatus

class QueueEntryCreate(BaseModel):
    patient_id: UUID
    doctor_id: UUID
    priority: QueuePriority = QueuePriority.NORMAL
    notes: Optional[str] = None
    appointment_id: Optional[UUID] = None

class QueueCheckIn(BaseModel):
    appointment_id: UUID
    priority: QueuePriority = QueuePriority.NORMAL
    notes: Optional[str] = None

class QueueStatusUpdate(BaseModel):
    status: QueueStatus
    notes: Optional[str] = None

class QueuePriorityUpdate(BaseModel):
    priority: QueuePriority

class QueueEntryResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID
    appointment_id: Optional[UUID] = None
    queue_number: int
    priority: QueuePriority
    status: QueueStatus
    notes: Optional[str] = None
    called_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True

class QueueEntryDetail(QueueEntryResponse):
    # Only set while the entry is still waiting
    position: Optional[int] = None
    estimated_wait_minutes: Optional[int] = None

class QueueResponse(BaseModel):
    queue: List[QueueEntryResponse]
    total: int

class QueueStatsResponse(BaseModel):
    date: dt.date
    doctor_id: Optional[UUID] = None
    total: int = 0
    waiting: int = 0
    with_doctor: int = 0
    completed: int = 0
    urgent: int = 0
    normal: int = 0
    average_wait_time: float = 0.0
    average_consultation_time: float = 0.0
