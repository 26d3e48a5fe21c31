import re

import pytest

from frontdesk.core.security import verify_password
from frontdesk.core.utils import generate_password, total_pages
from frontdesk.db.models import UserRole
from frontdesk.db.seed import seed_admin


def test_generated_password_shape():
    assert re.fullmatch(r"[A-Z][a-z]+-[A-Z][a-z]+-\d{3}", generate_password())


def test_total_pages():
    assert total_pages(0, 10) == 0
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2


@pytest.mark.asyncio
async def test_seed_admin_is_idempotent(session):
    user, password = await seed_admin(session, "Boss@Clinic.test", "Boss")

    assert user.role == UserRole.ADMIN
    assert user.email == "boss@clinic.test"
    assert verify_password(password, user.password_hash)

    again, second_password = await seed_admin(session, "boss@clinic.test", "Boss")
    assert again.id == user.id
    assert second_password is None


@pytest.mark.asyncio
async def test_health_reports_database(client):
    res = await client.get("/health")

    assert res.status_code == 200
    assert res.json()["database"] == "connected"
    assert res.json()["status"] == "ok"
