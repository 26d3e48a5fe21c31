from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.api.deps import staff_user
from frontdesk.db.models import QueuePriority, QueueStatus
from frontdesk.db.session import get_session
from frontdesk.schemas.common import Message
from frontdesk.schemas.queue import (
    QueueCheckIn,
    QueueEntryCreate,
    QueueEntryDetail,
    QueueEntryResponse,
    QueuePriorityUpdate,
    QueueResponse,
    QueueStatsResponse,
    QueueStatusUpdate,
)
from frontdesk.services.queue_service import QueueService

router = APIRouter(dependencies=[Depends(staff_user)])

async def get_queue_service(session: AsyncSession = Depends(get_session)) -> QueueService:
    return QueueService(session)

@router.post("/", response_model=QueueEntryResponse, status_code=201)
async def add_to_queue(
    request: QueueEntryCreate,
    service: QueueService = Depends(get_queue_service)
):
    return await service.enroll(request)

@router.post("/from-appointment", response_model=QueueEntryResponse, status_code=201)
async def check_in_appointment(
    request: QueueCheckIn,
    service: QueueService = Depends(get_queue_service)
):
    return await service.check_in(request)

@router.get("/", response_model=QueueResponse)
async def get_queue(
    doctor_id: Optional[UUID] = None,
    status: Optional[QueueStatus] = None,
    priority: Optional[QueuePriority] = None,
    day: Optional[date] = Query(default=None, alias="date"),
    service: QueueService = Depends(get_queue_service)
):
    entries = await service.list_entries(doctor_id, status, priority, day)
    return QueueResponse(
        queue=[QueueEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )

@router.get("/today", response_model=QueueResponse)
async def get_today_queue(
    doctor_id: Optional[UUID] = None,
    service: QueueService = Depends(get_queue_service)
):
    entries = await service.get_today_queue(doctor_id)
    return QueueResponse(
        queue=[QueueEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )

@router.get("/stats", response_model=QueueStatsResponse)
async def get_queue_stats(
    day: Optional[date] = Query(default=None, alias="date"),
    doctor_id: Optional[UUID] = None,
    service: QueueService = Depends(get_queue_service)
):
    return await service.get_stats(day, doctor_id)

@router.put("/call-next/{doctor_id}", response_model=QueueEntryResponse)
async def call_next_patient(
    doctor_id: UUID,
    service: QueueService = Depends(get_queue_service)
):
    return await service.call_next(doctor_id)

@router.get("/{entry_id}", response_model=QueueEntryDetail)
async def get_queue_item(
    entry_id: UUID,
    service: QueueService = Depends(get_queue_service)
):
    return await service.get_entry_detail(entry_id)

@router.put("/{entry_id}/status", response_model=QueueEntryResponse)
async def update_queue_status(
    entry_id: UUID,
    request: QueueStatusUpdate,
    service: QueueService = Depends(get_queue_service)
):
    return await service.update_status(entry_id, request)

@router.put("/{entry_id}/priority", response_model=QueueEntryResponse)
async def update_queue_priority(
    entry_id: UUID,
    request: QueuePriorityUpdate,
    service: QueueService = Depends(get_queue_service)
):
    return await service.update_priority(entry_id, request)

@router.delete("/{entry_id}", response_model=Message)
async def remove_from_queue(
    entry_id: UUID,
    service: QueueService = Depends(get_queue_service)
):
    return await service.remove(entry_id)
