from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime

from frontdesk.db.models.enums import UserRole

class UserBase(BaseModel):
    name: str
    email: str

class UserCreate(UserBase):
    password: str = Field(min_length=6)
    role: UserRole = UserRole.RECEPTIONIST

class UserResponse(UserBase):
    id: UUID
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
