from datetime import date, datetime, time, timedelta
from statistics import mean
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func

from frontdesk.core.logger import logger
from frontdesk.core.utils import minutes_between, utc_today
from frontdesk.db.models import (
    Appointment,
    AppointmentStatus,
    Doctor,
    Patient,
    QueueCounter,
    QueueEntry,
    QueuePriority,
    QueueStatus,
)
from frontdesk.schemas.queue import (
    QueueCheckIn,
    QueueEntryCreate,
    QueueEntryDetail,
    QueuePriorityUpdate,
    QueueStatsResponse,
    QueueStatusUpdate,
)
from frontdesk.services.queue_policy import apply_status, can_transition, queue_order_by


def day_window(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class QueueService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _bump_counter(self, doctor_id: UUID) -> Optional[int]:
        # Single UPDATE ... RETURNING so concurrent enrolments never share a number
        stmt = (
            update(QueueCounter)
            .where(QueueCounter.doctor_id == doctor_id)
            .values(last_number=QueueCounter.last_number + 1)
            .returning(QueueCounter.last_number)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _highest_queue_number(self, doctor_id: UUID) -> int:
        stmt = select(func.coalesce(func.max(QueueEntry.queue_number), 0)).where(
            QueueEntry.doctor_id == doctor_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def _next_queue_number(self, doctor_id: UUID) -> int:
        while True:
            number = await self._bump_counter(doctor_id)
            if number is not None:
                return number

            # Doctor created before counters existed: continue after the highest issued number
            number = await self._highest_queue_number(doctor_id) + 1
            self.session.add(QueueCounter(doctor_id=doctor_id, last_number=number))
            try:
                await self.session.flush()
            except IntegrityError:
                await self.session.rollback()
                logger.warning(f"Queue counter for doctor {doctor_id} created concurrently, retrying")
                continue
            return number

    async def _create_entry(
        self,
        patient_id: UUID,
        doctor_id: UUID,
        priority: QueuePriority,
        notes: Optional[str],
        appointment_id: Optional[UUID],
    ) -> QueueEntry:
        queue_number = await self._next_queue_number(doctor_id)
        entry = QueueEntry(
            patient_id=patient_id,
            doctor_id=doctor_id,
            appointment_id=appointment_id,
            queue_number=queue_number,
            priority=priority,
            status=QueueStatus.WAITING,
            notes=notes,
        )
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)

        logger.info(
            f"Queue entry {entry.id} enrolled | Doctor: {doctor_id} | "
            f"Number: {queue_number} | Priority: {entry.priority.value}"
        )
        return entry

    async def enroll(self, data: QueueEntryCreate) -> QueueEntry:
        # 1. Validate references
        patient = await self.session.get(Patient, data.patient_id)
        doctor = await self.session.get(Doctor, data.doctor_id)
        if not patient or not doctor:
            raise HTTPException(status_code=404, detail="Doctor or patient not found")

        if data.appointment_id:
            appointment = await self.session.get(Appointment, data.appointment_id)
            if not appointment:
                raise HTTPException(status_code=404, detail="Appointment not found")
            if appointment.patient_id != data.patient_id or appointment.doctor_id != data.doctor_id:
                raise HTTPException(status_code=400, detail="Appointment belongs to a different patient or doctor")

        # 2. Issue number and persist
        return await self._create_entry(
            data.patient_id, data.doctor_id, data.priority, data.notes, data.appointment_id
        )

    async def check_in(self, data: QueueCheckIn) -> QueueEntry:
        appointment = await self.session.get(Appointment, data.appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        if appointment.status != AppointmentStatus.BOOKED:
            raise HTTPException(status_code=400, detail="Only booked appointments can be checked in")

        return await self.enroll(QueueEntryCreate(
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            priority=data.priority,
            notes=data.notes,
            appointment_id=appointment.id,
        ))

    async def list_entries(
        self,
        doctor_id: Optional[UUID] = None,
        status: Optional[QueueStatus] = None,
        priority: Optional[QueuePriority] = None,
        day: Optional[date] = None,
    ) -> List[QueueEntry]:
        stmt = select(QueueEntry)
        if doctor_id:
            stmt = stmt.where(QueueEntry.doctor_id == doctor_id)
        if status:
            stmt = stmt.where(QueueEntry.status == status)
        if priority:
            stmt = stmt.where(QueueEntry.priority == priority)
        if day:
            start, end = day_window(day)
            stmt = stmt.where(QueueEntry.created_at >= start, QueueEntry.created_at < end)

        stmt = stmt.order_by(*queue_order_by())
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_today_queue(self, doctor_id: Optional[UUID] = None) -> List[QueueEntry]:
        return await self.list_entries(doctor_id=doctor_id, day=utc_today())

    async def get_entry(self, entry_id: UUID) -> QueueEntry:
        entry = await self.session.get(QueueEntry, entry_id)
        if not entry:
            raise HTTPException(status_code=404, detail="Queue entry not found")
        return entry

    async def get_entry_detail(self, entry_id: UUID) -> QueueEntryDetail:
        entry = await self.get_entry(entry_id)
        detail = QueueEntryDetail.model_validate(entry)
        if entry.status != QueueStatus.WAITING:
            return detail

        stmt = select(QueueEntry.id).where(
            QueueEntry.doctor_id == entry.doctor_id,
            QueueEntry.status == QueueStatus.WAITING,
        ).order_by(*queue_order_by())
        result = await self.session.execute(stmt)
        waiting_ids = list(result.scalars().all())

        doctor = await self.session.get(Doctor, entry.doctor_id)
        duration = doctor.consult_duration_minutes if doctor else 0

        detail.position = waiting_ids.index(entry.id) + 1
        detail.estimated_wait_minutes = (detail.position - 1) * duration
        return detail

    async def update_status(self, entry_id: UUID, data: QueueStatusUpdate) -> QueueEntry:
        entry = await self.get_entry(entry_id)
        current = QueueStatus(entry.status)
        if not can_transition(current, data.status):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot move queue entry from '{current.value}' back to '{data.status.value}'",
            )

        apply_status(entry, data.status, datetime.utcnow())
        if data.notes is not None:
            entry.notes = data.notes

        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)

        logger.info(f"Queue entry {entry.id} status: {current.value} -> {data.status.value}")
        return entry

    async def update_priority(self, entry_id: UUID, data: QueuePriorityUpdate) -> QueueEntry:
        entry = await self.get_entry(entry_id)
        entry.priority = data.priority
        entry.updated_at = datetime.utcnow()

        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)

        logger.info(f"Queue entry {entry.id} priority set to {data.priority.value}")
        return entry

    async def remove(self, entry_id: UUID) -> dict:
        entry = await self.get_entry(entry_id)
        await self.session.delete(entry)
        await self.session.commit()

        logger.info(f"Queue entry {entry_id} removed")
        return {"message": "Removed from queue"}

    async def _find_next_waiting_id(self, doctor_id: UUID) -> Optional[UUID]:
        stmt = select(QueueEntry.id).where(
            QueueEntry.doctor_id == doctor_id,
            QueueEntry.status == QueueStatus.WAITING,
        ).order_by(*queue_order_by()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def call_next(self, doctor_id: UUID) -> QueueEntry:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise HTTPException(status_code=404, detail="Doctor not found")

        while True:
            candidate_id = await self._find_next_waiting_id(doctor_id)
            if candidate_id is None:
                raise HTTPException(status_code=404, detail="No patients waiting in queue")

            # Only succeeds if nobody advanced the candidate since it was selected
            now = datetime.utcnow()
            stmt = (
                update(QueueEntry)
                .where(QueueEntry.id == candidate_id, QueueEntry.status == QueueStatus.WAITING)
                .values(status=QueueStatus.WITH_DOCTOR, called_at=now, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            claimed = result.rowcount == 1
            await self.session.commit()
            if claimed:
                break
            logger.warning(f"Queue entry {candidate_id} was already called, trying the next one")

        entry = await self.session.get(QueueEntry, candidate_id, populate_existing=True)
        logger.info(f"Doctor {doctor_id} called queue entry {entry.id} (number {entry.queue_number})")
        return entry

    async def get_stats(self, day: Optional[date] = None, doctor_id: Optional[UUID] = None) -> QueueStatsResponse:
        day = day or utc_today()
        start, end = day_window(day)
        filters = [QueueEntry.created_at >= start, QueueEntry.created_at < end]
        if doctor_id:
            filters.append(QueueEntry.doctor_id == doctor_id)

        status_stmt = select(QueueEntry.status, func.count(QueueEntry.id)).where(*filters).group_by(QueueEntry.status)
        by_status = {QueueStatus(s): n for s, n in (await self.session.execute(status_stmt)).all()}

        priority_stmt = select(QueueEntry.priority, func.count(QueueEntry.id)).where(*filters).group_by(QueueEntry.priority)
        by_priority = {QueuePriority(p): n for p, n in (await self.session.execute(priority_stmt)).all()}

        # Wait = check-in until called; consultation = called until completed
        times_stmt = select(QueueEntry.created_at, QueueEntry.called_at, QueueEntry.completed_at).where(
            *filters,
            QueueEntry.status == QueueStatus.COMPLETED,
            QueueEntry.called_at.is_not(None),
        )
        rows = (await self.session.execute(times_stmt)).all()
        waits = [minutes_between(created, called) for created, called, _ in rows]
        consultations = [minutes_between(called, completed) for _, called, completed in rows if completed]

        return QueueStatsResponse(
            date=day,
            doctor_id=doctor_id,
            total=sum(by_status.values()),
            waiting=by_status.get(QueueStatus.WAITING, 0),
            with_doctor=by_status.get(QueueStatus.WITH_DOCTOR, 0),
            completed=by_status.get(QueueStatus.COMPLETED, 0),
            urgent=by_priority.get(QueuePriority.URGENT, 0),
            normal=by_priority.get(QueuePriority.NORMAL, 0),
            average_wait_time=round(mean(waits), 1) if waits else 0.0,
            average_consultation_time=round(mean(consultations), 1) if consultations else 0.0,
        )
