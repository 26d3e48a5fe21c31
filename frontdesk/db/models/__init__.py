from sqlmodel import SQLModel
from .enums import UserRole, Gender, AppointmentStatus, QueueStatus, QueuePriority
from .user import User
from .doctor import Doctor
from .patient import Patient
from .appointment import Appointment
from .queue_entry import QueueEntry
from .counter import QueueCounter

__all__ = [
    "SQLModel",
    "UserRole",
    "Gender",
    "AppointmentStatus",
    "QueueStatus",
    "QueuePriority",
    "User",
    "Doctor",
    "Patient",
    "Appointment",
    "QueueEntry",
    "QueueCounter",
]
