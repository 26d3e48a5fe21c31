"""
Create the first admin account.

    python -m frontdesk.db.seed

Uses FIRST_ADMIN_EMAIL / FIRST_ADMIN_NAME / FIRST_ADMIN_PASSWORD from the
environment; a password is generated when none is configured.
"""
import asyncio
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.core.config import settings
from frontdesk.core.logger import logger
from frontdesk.core.utils import generate_password
from frontdesk.db.models import User, UserRole
from frontdesk.schemas.user import UserCreate
from frontdesk.services.auth_service import AuthService


async def seed_admin(
    session: AsyncSession, email: str, name: str, password: Optional[str] = None
) -> Tuple[User, Optional[str]]:
    """Returns the admin and the plain password, or None if the admin already existed."""
    service = AuthService(session)
    existing = await service.get_user_by_email(email)
    if existing:
        return existing, None

    password = password or generate_password()
    user = await service.register(UserCreate(name=name, email=email, password=password, role=UserRole.ADMIN))
    return user, password


async def main():
    from frontdesk.db.session import async_session, init_db

    await init_db()
    async with async_session() as session:
        user, password = await seed_admin(
            session, settings.FIRST_ADMIN_EMAIL, settings.FIRST_ADMIN_NAME, settings.FIRST_ADMIN_PASSWORD
        )

    if password:
        logger.info(f"Admin created: {user.email} / {password}")
    else:
        logger.info(f"Admin {user.email} already exists")


if __name__ == "__main__":
    asyncio.run(main())
