import pytest

from conftest import doctor_payload, patient_payload

QUEUE = "/api/v1/queue"


async def create_doctor(client, admin_headers, **overrides):
    res = await client.post("/api/v1/doctors/", json=doctor_payload(**overrides), headers=admin_headers)
    assert res.status_code == 201, res.text
    return res.json()


async def create_patient(client, headers, **overrides):
    res = await client.post("/api/v1/patients/", json=patient_payload(**overrides), headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_queue_requires_authentication(client):
    res = await client.get(f"{QUEUE}/")
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_walk_in_flow(client, admin_headers, desk_headers):
    doctor = await create_doctor(client, admin_headers)
    first = await create_patient(client, desk_headers, name="First", phone="555-1001")
    second = await create_patient(client, desk_headers, name="Second", phone="555-1002")

    res = await client.post(f"{QUEUE}/", json={"patient_id": first["id"], "doctor_id": doctor["id"]}, headers=desk_headers)
    assert res.status_code == 201
    normal = res.json()
    assert normal["queue_number"] == 1
    assert normal["status"] == "Waiting"
    assert normal["priority"] == "Normal"

    res = await client.post(
        f"{QUEUE}/",
        json={"patient_id": second["id"], "doctor_id": doctor["id"], "priority": "Urgent", "notes": "chest pain"},
        headers=desk_headers,
    )
    urgent = res.json()
    assert urgent["queue_number"] == 2

    res = await client.get(f"{QUEUE}/", params={"doctor_id": doctor["id"]}, headers=desk_headers)
    body = res.json()
    assert body["total"] == 2
    assert [e["id"] for e in body["queue"]] == [urgent["id"], normal["id"]]

    res = await client.get(f"{QUEUE}/{normal['id']}", headers=desk_headers)
    assert res.json()["position"] == 2
    assert res.json()["estimated_wait_minutes"] == 15

    res = await client.put(f"{QUEUE}/call-next/{doctor['id']}", headers=desk_headers)
    assert res.status_code == 200
    assert res.json()["id"] == urgent["id"]
    assert res.json()["status"] == "With Doctor"
    assert res.json()["called_at"] is not None

    res = await client.put(f"{QUEUE}/{urgent['id']}/status", json={"status": "Completed"}, headers=desk_headers)
    assert res.status_code == 200
    assert res.json()["completed_at"] is not None

    res = await client.put(f"{QUEUE}/{urgent['id']}/status", json={"status": "Waiting"}, headers=desk_headers)
    assert res.status_code == 400

    res = await client.get(f"{QUEUE}/today", params={"doctor_id": doctor["id"]}, headers=desk_headers)
    assert res.json()["total"] == 2

    res = await client.get(f"{QUEUE}/stats", params={"doctor_id": doctor["id"]}, headers=desk_headers)
    stats = res.json()
    assert stats["total"] == 2
    assert stats["completed"] == 1
    assert stats["waiting"] == 1
    assert stats["urgent"] == 1


@pytest.mark.asyncio
async def test_priority_update_and_removal(client, admin_headers, desk_headers):
    doctor = await create_doctor(client, admin_headers)
    patient = await create_patient(client, desk_headers)
    entries = []
    for _ in range(3):
        res = await client.post(f"{QUEUE}/", json={"patient_id": patient["id"], "doctor_id": doctor["id"]}, headers=desk_headers)
        entries.append(res.json())

    res = await client.put(f"{QUEUE}/{entries[2]['id']}/priority", json={"priority": "Urgent"}, headers=desk_headers)
    assert res.status_code == 200
    assert res.json()["priority"] == "Urgent"
    assert res.json()["queue_number"] == 3

    res = await client.delete(f"{QUEUE}/{entries[0]['id']}", headers=desk_headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Removed from queue"}

    res = await client.get(f"{QUEUE}/", params={"doctor_id": doctor["id"]}, headers=desk_headers)
    assert [e["queue_number"] for e in res.json()["queue"]] == [3, 2]

    res = await client.get(f"{QUEUE}/{entries[0]['id']}", headers=desk_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_queue_not_found_cases(client, admin_headers, desk_headers):
    doctor = await create_doctor(client, admin_headers)
    patient = await create_patient(client, desk_headers)

    res = await client.put(f"{QUEUE}/call-next/{doctor['id']}", headers=desk_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "No patients waiting in queue"

    res = await client.post(
        f"{QUEUE}/",
        json={"patient_id": patient["id"], "doctor_id": "00000000-0000-0000-0000-000000000000"},
        headers=desk_headers,
    )
    assert res.status_code == 404
    assert res.json()["detail"] == "Doctor or patient not found"

    res = await client.get(f"{QUEUE}/", headers=desk_headers)
    assert res.json() == {"queue": [], "total": 0}


@pytest.mark.asyncio
async def test_check_in_from_appointment(client, admin_headers, desk_headers):
    doctor = await create_doctor(client, admin_headers)
    patient = await create_patient(client, desk_headers)
    res = await client.post(
        "/api/v1/appointments/",
        json={"doctor_id": doctor["id"], "patient_id": patient["id"], "date": "2026-11-02", "time": "09:30", "reason": "Review"},
        headers=desk_headers,
    )
    appointment = res.json()

    res = await client.post(f"{QUEUE}/from-appointment", json={"appointment_id": appointment["id"]}, headers=desk_headers)

    assert res.status_code == 201
    assert res.json()["appointment_id"] == appointment["id"]
    assert res.json()["queue_number"] == 1


@pytest.mark.asyncio
async def test_invalid_status_value_is_rejected(client, admin_headers, desk_headers):
    doctor = await create_doctor(client, admin_headers)
    patient = await create_patient(client, desk_headers)
    res = await client.post(f"{QUEUE}/", json={"patient_id": patient["id"], "doctor_id": doctor["id"]}, headers=desk_headers)

    res = await client.put(f"{QUEUE}/{res.json()['id']}/status", json={"status": "Gone"}, headers=desk_headers)

    assert res.status_code == 422
