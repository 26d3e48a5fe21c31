from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.api.deps import admin_user, staff_user
from frontdesk.db.models import Gender
from frontdesk.db.session import get_session
from frontdesk.schemas.common import Message
from frontdesk.schemas.patient import PatientCreate, PatientListResponse, PatientResponse, PatientUpdate
from frontdesk.services.patient_service import PatientService

router = APIRouter(dependencies=[Depends(staff_user)])

async def get_patient_service(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.post("/", response_model=PatientResponse, status_code=201)
async def create_patient(
    payload: PatientCreate,
    service: PatientService = Depends(get_patient_service)
):
    return await service.create_patient(payload)

@router.get("/", response_model=PatientListResponse)
async def read_patients(
    search: Optional[str] = None,
    gender: Optional[Gender] = None,
    age_range: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    service: PatientService = Depends(get_patient_service)
):
    return await service.get_patients(search, gender, age_range, page, limit)

@router.get("/{patient_id}", response_model=PatientResponse)
async def read_patient(
    patient_id: UUID,
    service: PatientService = Depends(get_patient_service)
):
    return await service.get_patient(patient_id)

@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: UUID,
    payload: PatientUpdate,
    service: PatientService = Depends(get_patient_service)
):
    return await service.update_patient(patient_id, payload)

@router.delete("/{patient_id}", response_model=Message, dependencies=[Depends(admin_user)])
async def delete_patient(
    patient_id: UUID,
    service: PatientService = Depends(get_patient_service)
):
    return await service.delete_patient(patient_id)
