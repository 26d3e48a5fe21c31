from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import JSON, Column
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4

from .enums import Gender

if TYPE_CHECKING:
    from .appointment import Appointment
    from .queue_entry import QueueEntry

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    email: str
    phone: str
    specialization: str = Field(index=True)
    gender: Gender
    location: str
    available_slots: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    consult_duration_minutes: int = Field(default=15)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    appointments: List["Appointment"] = Relationship(back_populates="doctor")
    queue_entries: List["QueueEntry"] = Relationship(back_populates="doctor")
