from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.api.deps import staff_user
from frontdesk.db.models import AppointmentStatus
from frontdesk.db.session import get_session
from frontdesk.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
)
from frontdesk.schemas.common import Message
from frontdesk.services.appointment_service import AppointmentService

router = APIRouter(dependencies=[Depends(staff_user)])

async def get_appointment_service(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

@router.post("/", response_model=AppointmentResponse, status_code=201)
async def book_appointment(
    request: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.book_appointment(request)

@router.get("/", response_model=AppointmentListResponse)
async def read_appointments(
    doctor_id: Optional[UUID] = None,
    patient_id: Optional[UUID] = None,
    status: Optional[AppointmentStatus] = None,
    day: Optional[date] = Query(default=None, alias="date"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_appointments(doctor_id, patient_id, status, day, page, limit)

@router.get("/today", response_model=List[AppointmentResponse])
async def read_today_appointments(
    doctor_id: Optional[UUID] = None,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_today_appointments(doctor_id)

@router.get("/upcoming", response_model=List[AppointmentResponse])
async def read_upcoming_appointments(
    limit: int = Query(default=10, ge=1, le=100),
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_upcoming_appointments(limit)

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def read_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_appointment(appointment_id)

@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: UUID,
    request: AppointmentUpdate,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.update_appointment(appointment_id, request)

@router.put("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.cancel_appointment(appointment_id)

@router.put("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.complete_appointment(appointment_id)

@router.delete("/{appointment_id}", response_model=Message)
async def delete_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.delete_appointment(appointment_id)
