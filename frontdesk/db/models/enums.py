from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    RECEPTIONIST = "receptionist"
    DOCTOR = "doctor"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class AppointmentStatus(str, Enum):
    BOOKED = "Booked"
    COMPLETED = "Completed"
    CANCELED = "Canceled"


class QueueStatus(str, Enum):
    WAITING = "Waiting"
    WITH_DOCTOR = "With Doctor"
    COMPLETED = "Completed"


class QueuePriority(str, Enum):
    NORMAL = "Normal"
    URGENT = "Urgent"
