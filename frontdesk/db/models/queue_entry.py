from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4

from .enums import QueuePriority, QueueStatus

if TYPE_CHECKING:
    from .doctor import Doctor
    from .patient import Patient

class QueueEntry(SQLModel, table=True):
    __tablename__ = "queue_entries"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    patient_id: UUID = Field(foreign_key="patients.id", index=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    appointment_id: Optional[UUID] = Field(default=None, foreign_key="appointments.id")
    queue_number: int
    priority: QueuePriority = Field(default=QueuePriority.NORMAL)
    status: QueueStatus = Field(default=QueueStatus.WAITING, index=True)
    notes: Optional[str] = None
    called_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: Optional[datetime] = None

    doctor: "Doctor" = Relationship(back_populates="queue_entries")
    patient: "Patient" = Relationship(back_populates="queue_entries")
