import datetime as dt
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from .enums import AppointmentStatus

if TYPE_CHECKING:
    from .doctor import Doctor
    from .patient import Patient

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    patient_id: UUID = Field(foreign_key="patients.id", index=True)
    date: dt.date = Field(index=True)
    time: dt.time
    duration: int = Field(default=30) # minutes
    reason: str
    notes: Optional[str] = None
    status: AppointmentStatus = Field(default=AppointmentStatus.BOOKED)
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: Optional[dt.datetime] = None

    doctor: "Doctor" = Relationship(back_populates="appointments")
    patient: "Patient" = Relationship(back_populates="appointments")
