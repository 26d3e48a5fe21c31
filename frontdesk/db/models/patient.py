from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4

from .enums import Gender

if TYPE_CHECKING:
    from .appointment import Appointment
    from .queue_entry import QueueEntry

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(index=True)
    email: Optional[str] = None
    phone: str
    age: Optional[int] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    appointments: List["Appointment"] = Relationship(back_populates="patient")
    queue_entries: List["QueueEntry"] = Relationship(back_populates="patient")
