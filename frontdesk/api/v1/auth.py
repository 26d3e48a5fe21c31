from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.api.deps import admin_user, get_current_user, oauth2_scheme
from frontdesk.db.models import User
from frontdesk.db.session import get_session
from frontdesk.schemas.auth import LoginRequest, LoginResponse
from frontdesk.schemas.common import Message
from frontdesk.schemas.user import UserCreate, UserResponse
from frontdesk.services.auth_service import AuthService

router = APIRouter()

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return await service.login(login_data)

@router.post("/logout", response_model=Message)
async def logout(
    token: str = Depends(oauth2_scheme),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return await service.logout(token)

@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    return current_user

@router.post("/register", response_model=UserResponse, status_code=201, dependencies=[Depends(admin_user)])
async def register(
    user_data: UserCreate,
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return await service.register(user_data)
