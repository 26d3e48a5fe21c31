from datetime import date, datetime, time
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from frontdesk.core.logger import logger
from frontdesk.core.utils import total_pages, utc_today
from frontdesk.db.models import Appointment, AppointmentStatus, Doctor, Patient, QueueEntry
from frontdesk.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
)

class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _ensure_slot_free(
        self, doctor_id: UUID, appt_date: date, appt_time: time, exclude_id: Optional[UUID] = None
    ):
        stmt = select(Appointment.id).where(
            Appointment.doctor_id == doctor_id,
            Appointment.date == appt_date,
            Appointment.time == appt_time,
            Appointment.status != AppointmentStatus.CANCELED,
        )
        if exclude_id:
            stmt = stmt.where(Appointment.id != exclude_id)
        result = await self.session.execute(stmt)
        if result.scalars().first():
            raise HTTPException(status_code=409, detail="Slot already booked for this time")

    async def book_appointment(self, data: AppointmentCreate) -> Appointment:
        # 1. Validate Doctor and Patient
        doctor = await self.session.get(Doctor, data.doctor_id)
        patient = await self.session.get(Patient, data.patient_id)
        if not doctor or not patient:
            raise HTTPException(status_code=404, detail="Doctor or patient not found")

        # 2. Prevent double booking
        await self._ensure_slot_free(data.doctor_id, data.date, data.time)

        # 3. Create Appointment
        appointment = Appointment(**data.model_dump(), status=AppointmentStatus.BOOKED)
        self.session.add(appointment)
        await self.session.commit()
        await self.session.refresh(appointment)

        logger.info(f"Appointment {appointment.id} booked | Doctor: {doctor.id} | {data.date} {data.time}")
        return appointment

    async def get_appointments(
        self,
        doctor_id: Optional[UUID] = None,
        patient_id: Optional[UUID] = None,
        status: Optional[AppointmentStatus] = None,
        appt_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> AppointmentListResponse:
        filters = []
        if doctor_id:
            filters.append(Appointment.doctor_id == doctor_id)
        if patient_id:
            filters.append(Appointment.patient_id == patient_id)
        if status:
            filters.append(Appointment.status == status)
        if appt_date:
            filters.append(Appointment.date == appt_date)

        count_stmt = select(func.count(Appointment.id)).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(Appointment)
            .where(*filters)
            .order_by(Appointment.date, Appointment.time)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)

        return AppointmentListResponse(
            appointments=[AppointmentResponse.model_validate(a) for a in result.scalars().all()],
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit),
        )

    async def get_today_appointments(self, doctor_id: Optional[UUID] = None) -> List[Appointment]:
        stmt = select(Appointment).where(Appointment.date == utc_today())
        if doctor_id:
            stmt = stmt.where(Appointment.doctor_id == doctor_id)
        stmt = stmt.order_by(Appointment.time)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_upcoming_appointments(self, limit: int = 10) -> List[Appointment]:
        stmt = select(Appointment).where(
            Appointment.date >= utc_today(),
            Appointment.status == AppointmentStatus.BOOKED,
        ).order_by(Appointment.date, Appointment.time).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_appointment(self, appointment_id: UUID) -> Appointment:
        appointment = await self.session.get(Appointment, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    async def update_appointment(self, appointment_id: UUID, appointment_update: AppointmentUpdate) -> Appointment:
        appointment = await self.get_appointment(appointment_id)
        update_data = appointment_update.model_dump(exclude_unset=True)

        if "date" in update_data or "time" in update_data:
            await self._ensure_slot_free(
                appointment.doctor_id,
                update_data.get("date", appointment.date),
                update_data.get("time", appointment.time),
                exclude_id=appointment.id,
            )

        for key, value in update_data.items():
            setattr(appointment, key, value)
        appointment.updated_at = datetime.utcnow()

        self.session.add(appointment)
        await self.session.commit()
        await self.session.refresh(appointment)
        return appointment

    async def _close(self, appointment_id: UUID, status: AppointmentStatus) -> Appointment:
        appointment = await self.get_appointment(appointment_id)
        if appointment.status != AppointmentStatus.BOOKED:
            raise HTTPException(
                status_code=400,
                detail=f"Appointment is already {AppointmentStatus(appointment.status).value.lower()}",
            )

        appointment.status = status
        appointment.updated_at = datetime.utcnow()
        self.session.add(appointment)
        await self.session.commit()
        await self.session.refresh(appointment)

        logger.info(f"Appointment {appointment.id} marked {status.value}")
        return appointment

    async def cancel_appointment(self, appointment_id: UUID) -> Appointment:
        return await self._close(appointment_id, AppointmentStatus.CANCELED)

    async def complete_appointment(self, appointment_id: UUID) -> Appointment:
        return await self._close(appointment_id, AppointmentStatus.COMPLETED)

    async def delete_appointment(self, appointment_id: UUID) -> dict:
        appointment = await self.get_appointment(appointment_id)
        # Queue entries outlive the booking they came from
        await self.session.execute(
            update(QueueEntry)
            .where(QueueEntry.appointment_id == appointment_id)
            .values(appointment_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.session.delete(appointment)
        await self.session.commit()
        return {"message": "Appointment deleted successfully"}
