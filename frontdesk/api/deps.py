from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jwt.exceptions import PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.core.config import settings
from frontdesk.core.redis import redis_client
from frontdesk.core.security import decode_access_token
from frontdesk.db.models import User, UserRole
from frontdesk.db.session import get_session

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        user_id = UUID(payload.get("sub"))
    except (PyJWTError, TypeError, ValueError):
        raise credentials_exception

    # Tokens are dropped from Redis on logout
    if await redis_client.get_token(token) is None:
        raise credentials_exception

    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise credentials_exception
    return user

def require_roles(*roles: UserRole):
    """Capability check run before the route handler."""
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return current_user
    return checker

staff_user = require_roles(UserRole.ADMIN, UserRole.RECEPTIONIST, UserRole.DOCTOR)
admin_user = require_roles(UserRole.ADMIN)
