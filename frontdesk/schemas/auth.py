from pydantic import BaseModel

from frontdesk.schemas.user import UserResponse

class LoginRequest(BaseModel):
    email: str
    password: str

class LoginResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse
