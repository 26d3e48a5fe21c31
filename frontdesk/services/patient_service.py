from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from frontdesk.core.logger import logger
from frontdesk.core.utils import total_pages
from frontdesk.db.models import Gender, Patient
from frontdesk.schemas.patient import PatientCreate, PatientListResponse, PatientResponse, PatientUpdate

AGE_RANGES = ("child", "adult", "senior")

class PatientService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_patient(self, data: PatientCreate) -> Patient:
        patient = Patient(**data.model_dump())
        self.session.add(patient)
        await self.session.commit()
        await self.session.refresh(patient)

        logger.info(f"Patient {patient.id} registered")
        return patient

    async def get_patients(
        self,
        search: Optional[str] = None,
        gender: Optional[Gender] = None,
        age_range: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> PatientListResponse:
        filters = []
        if search:
            pattern = f"%{search}%"
            filters.append(or_(
                Patient.name.ilike(pattern),
                Patient.email.ilike(pattern),
                Patient.phone.ilike(pattern),
            ))
        if gender:
            filters.append(Patient.gender == gender)
        if age_range == "child":
            filters.append(Patient.age < 18)
        elif age_range == "adult":
            filters.append(Patient.age >= 18)
            filters.append(Patient.age < 65)
        elif age_range == "senior":
            filters.append(Patient.age >= 65)
        elif age_range:
            raise HTTPException(status_code=400, detail=f"age_range must be one of: {', '.join(AGE_RANGES)}")

        count_stmt = select(func.count(Patient.id)).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(Patient)
            .where(*filters)
            .order_by(Patient.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        patients = result.scalars().all()

        return PatientListResponse(
            patients=[PatientResponse.model_validate(p) for p in patients],
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit),
        )

    async def get_patient(self, patient_id: UUID) -> Patient:
        patient = await self.session.get(Patient, patient_id)
        if not patient:
            raise HTTPException(status_code=404, detail="Patient not found")
        return patient

    async def update_patient(self, patient_id: UUID, patient_update: PatientUpdate) -> Patient:
        patient = await self.get_patient(patient_id)

        update_data = patient_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(patient, key, value)
        patient.updated_at = datetime.utcnow()

        self.session.add(patient)
        await self.session.commit()
        await self.session.refresh(patient)
        return patient

    async def delete_patient(self, patient_id: UUID) -> dict:
        patient = await self.get_patient(patient_id)
        try:
            await self.session.delete(patient)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise HTTPException(status_code=409, detail="Patient has appointments or queue entries")

        logger.info(f"Patient {patient_id} deleted")
        return {"message": "Patient deleted successfully"}
