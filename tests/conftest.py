import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from fakeredis import aioredis as fake_aioredis
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from frontdesk.core.redis import redis_client
from frontdesk.core.security import get_password_hash
from frontdesk.db.models import Gender, User, UserRole
from frontdesk.db.session import get_session
from frontdesk.main import app
from frontdesk.schemas.doctor import DoctorCreate
from frontdesk.schemas.patient import PatientCreate
from frontdesk.services.doctor_service import DoctorService
from frontdesk.services.patient_service import PatientService

ADMIN_EMAIL = "admin@clinic.test"
ADMIN_PASSWORD = "admin-pass"
RECEPTION_EMAIL = "desk@clinic.test"
RECEPTION_PASSWORD = "desk-pass"


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'frontdesk.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = fake_aioredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(redis_client, "redis", fake)
    return fake


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def staff_users(session):
    session.add(User(
        name="Admin",
        email=ADMIN_EMAIL,
        password_hash=get_password_hash(ADMIN_PASSWORD),
        role=UserRole.ADMIN,
    ))
    session.add(User(
        name="Front Desk",
        email=RECEPTION_EMAIL,
        password_hash=get_password_hash(RECEPTION_PASSWORD),
        role=UserRole.RECEPTIONIST,
    ))
    await session.commit()


async def login(client: AsyncClient, email: str, password: str) -> dict:
    res = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest_asyncio.fixture
async def admin_headers(client, staff_users):
    return await login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest_asyncio.fixture
async def desk_headers(client, staff_users):
    return await login(client, RECEPTION_EMAIL, RECEPTION_PASSWORD)


def doctor_payload(**overrides) -> dict:
    payload = {
        "name": "Dr. Asha Menon",
        "email": "asha@clinic.test",
        "phone": "555-0100",
        "specialization": "General Medicine",
        "gender": Gender.FEMALE.value,
        "location": "Room 1",
        "consult_duration_minutes": 15,
    }
    payload.update(overrides)
    return payload


def patient_payload(**overrides) -> dict:
    payload = {
        "name": "Ravi Kumar",
        "phone": "555-0199",
        "email": "ravi@example.test",
        "age": 34,
        "gender": Gender.MALE.value,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def doctor(session):
    return await DoctorService(session).create_doctor(DoctorCreate(**doctor_payload()))


@pytest_asyncio.fixture
async def other_doctor(session):
    return await DoctorService(session).create_doctor(
        DoctorCreate(**doctor_payload(name="Dr. Omar Haddad", email="omar@clinic.test"))
    )


@pytest_asyncio.fixture
async def patient(session):
    return await PatientService(session).create_patient(PatientCreate(**patient_payload()))


@pytest_asyncio.fixture
async def patients(session):
    service = PatientService(session)
    return [
        await service.create_patient(PatientCreate(**patient_payload(name=f"Patient {i}", phone=f"555-02{i:02d}")))
        for i in range(5)
    ]
