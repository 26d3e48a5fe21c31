from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.api.deps import admin_user, staff_user
from frontdesk.db.session import get_session
from frontdesk.schemas.common import Message
from frontdesk.schemas.doctor import (
    DoctorCreate,
    DoctorListResponse,
    DoctorResponse,
    DoctorStatusUpdate,
    DoctorUpdate,
)
from frontdesk.services.doctor_service import DoctorService

router = APIRouter(dependencies=[Depends(staff_user)])

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)

@router.post("/", response_model=DoctorResponse, status_code=201, dependencies=[Depends(admin_user)])
async def create_doctor(
    doctor: DoctorCreate,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.create_doctor(doctor)

@router.get("/", response_model=DoctorListResponse)
async def read_doctors(
    search: Optional[str] = None,
    specialization: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.get_doctors(search, specialization, is_active, page, limit)

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def read_doctor(
    doctor_id: UUID,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.get_doctor(doctor_id)

@router.put("/{doctor_id}", response_model=DoctorResponse, dependencies=[Depends(admin_user)])
async def update_doctor(
    doctor_id: UUID,
    doctor_update: DoctorUpdate,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.update_doctor(doctor_id, doctor_update)

@router.put("/{doctor_id}/status", response_model=DoctorResponse, dependencies=[Depends(admin_user)])
async def update_doctor_status(
    doctor_id: UUID,
    status_update: DoctorStatusUpdate,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.set_active(doctor_id, status_update.is_active)

@router.delete("/{doctor_id}", response_model=Message, dependencies=[Depends(admin_user)])
async def delete_doctor(
    doctor_id: UUID,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.delete_doctor(doctor_id)
