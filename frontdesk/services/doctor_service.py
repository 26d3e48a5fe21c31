from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import or_
from sqlmodel import delete, func, select

from frontdesk.core.logger import logger
from frontdesk.core.utils import total_pages
from frontdesk.db.models import Doctor, QueueCounter
from frontdesk.schemas.doctor import DoctorCreate, DoctorListResponse, DoctorResponse, DoctorUpdate

class DoctorService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        doctor = Doctor(**data.model_dump())
        self.session.add(doctor)
        await self.session.flush()

        # Every doctor gets its own queue number sequence
        self.session.add(QueueCounter(doctor_id=doctor.id, last_number=0))
        await self.session.commit()
        await self.session.refresh(doctor)

        logger.info(f"Doctor {doctor.id} created ({doctor.name})")
        return doctor

    async def get_doctors(
        self,
        search: Optional[str] = None,
        specialization: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 10,
    ) -> DoctorListResponse:
        filters = []
        if search:
            pattern = f"%{search}%"
            filters.append(or_(
                Doctor.name.ilike(pattern),
                Doctor.email.ilike(pattern),
                Doctor.specialization.ilike(pattern),
            ))
        if specialization:
            filters.append(Doctor.specialization == specialization)
        if is_active is not None:
            filters.append(Doctor.is_active == is_active)

        count_stmt = select(func.count(Doctor.id)).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = select(Doctor).where(*filters).order_by(Doctor.name).offset((page - 1) * limit).limit(limit)
        result = await self.session.execute(stmt)
        doctors = result.scalars().all()

        return DoctorListResponse(
            doctors=[DoctorResponse.model_validate(d) for d in doctors],
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit),
        )

    async def get_doctor(self, doctor_id: UUID) -> Doctor:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise HTTPException(status_code=404, detail="Doctor not found")
        return doctor

    async def update_doctor(self, doctor_id: UUID, doctor_update: DoctorUpdate) -> Doctor:
        doctor = await self.get_doctor(doctor_id)

        update_data = doctor_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(doctor, key, value)
        doctor.updated_at = datetime.utcnow()

        self.session.add(doctor)
        await self.session.commit()
        await self.session.refresh(doctor)
        return doctor

    async def set_active(self, doctor_id: UUID, is_active: bool) -> Doctor:
        doctor = await self.get_doctor(doctor_id)
        doctor.is_active = is_active
        doctor.updated_at = datetime.utcnow()

        self.session.add(doctor)
        await self.session.commit()
        await self.session.refresh(doctor)

        logger.info(f"Doctor {doctor.id} {'activated' if is_active else 'deactivated'}")
        return doctor

    async def delete_doctor(self, doctor_id: UUID) -> dict:
        doctor = await self.get_doctor(doctor_id)
        try:
            await self.session.execute(delete(QueueCounter).where(QueueCounter.doctor_id == doctor_id))
            await self.session.delete(doctor)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise HTTPException(status_code=409, detail="Doctor has appointments or queue entries")

        logger.info(f"Doctor {doctor_id} deleted")
        return {"message": "Doctor deleted successfully"}
