import json
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from frontdesk.core.config import settings
from frontdesk.core.logger import logger
from frontdesk.core.redis import redis_client
from frontdesk.core.security import create_access_token, get_password_hash, verify_password
from frontdesk.db.models import User
from frontdesk.schemas.auth import LoginRequest, LoginResponse
from frontdesk.schemas.user import UserCreate, UserResponse

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def register(self, data: UserCreate) -> User:
        if await self.get_user_by_email(data.email):
            raise HTTPException(status_code=409, detail="User already exists")

        user = User(
            name=data.name,
            email=data.email.lower(),
            password_hash=get_password_hash(data.password),
            role=data.role,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)

        logger.info(f"User {user.id} registered with role {user.role.value}")
        return user

    async def login(self, login_data: LoginRequest) -> LoginResponse:
        # 1. Find User
        user = await self.get_user_by_email(login_data.email)

        # 2. Verify Password; same message either way
        if not user or not verify_password(login_data.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid credentials")
        if not user.is_active:
            raise HTTPException(status_code=403, detail="User is inactive")

        # 3. Generate Token
        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": str(user.id), "role": user.role.value}, expires_delta=access_token_expires
        )

        # 4. Store in Redis so logout can revoke it
        token_data = {
            "user_id": str(user.id),
            "role": user.role.value,
        }
        await redis_client.set_token(
            access_token,
            json.dumps(token_data),
            settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        )

        logger.info(f"User {user.id} logged in")
        return LoginResponse(
            access_token=access_token,
            token_type="bearer",
            user=UserResponse.model_validate(user),
        )

    async def logout(self, token: str) -> dict:
        await redis_client.delete_token(token)
        return {"message": "Logged out successfully"}
