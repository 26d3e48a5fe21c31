from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from frontdesk.core.config import settings
from frontdesk.db import models  # noqa: F401  registers tables on SQLModel.metadata

engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, future=True)
async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def get_session():
    async with async_session() as session:
        yield session

async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
