from sqlmodel import SQLModel, Field
from uuid import UUID

class QueueCounter(SQLModel, table=True):
    """Last queue number issued for a doctor."""
    __tablename__ = "queue_counters"
    doctor_id: UUID = Field(foreign_key="doctors.id", primary_key=True)
    last_number: int = Field(default=0)
