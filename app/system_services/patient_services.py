# app/system_services/patient_services.py
import math
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import (
    Pagination,
    PatientCreate,
    PatientUpdate,
)


def _search_filter(search: str):
    pattern = f"%{search}%"
    return or_(
        Patient.name.ilike(pattern),
        Patient.email.ilike(pattern),
        Patient.phone.ilike(pattern),
    )


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit)
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


async def list_patients(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
) -> Tuple[List[Patient], Pagination]:
    """Newest-first page of patients, optionally filtered by name/email/phone."""
    query = select(Patient)
    count_query = select(func.count()).select_from(Patient)

    if search:
        query = query.where(_search_filter(search))
        count_query = count_query.where(_search_filter(search))

    query = (
        query.order_by(Patient.created_at.desc(), Patient.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    )

    patients = (await db.execute(query)).scalars().all()
    total = (await db.execute(count_query)).scalar_one()

    return list(patients), build_pagination(page, limit, total)


async def get_patient(db: AsyncSession, patient_id: int) -> Optional[Patient]:
    return await db.get(Patient, patient_id)


async def create_patient(
    db: AsyncSession,
    patient: PatientCreate,
    created_by: Optional[int] = None,
) -> Patient:
    """Create a new patient."""
    db_patient = Patient(**patient.model_dump(), created_by=created_by)
    db.add(db_patient)
    await db.commit()
    await db.refresh(db_patient)
    return db_patient


async def update_patient(
    db: AsyncSession, patient_id: int, patient: PatientUpdate
) -> Optional[Patient]:
    """Overwrite every mutable field. Returns None if the patient does not exist."""
    db_patient = await db.get(Patient, patient_id)
    if db_patient is None:
        return None

    for field, value in patient.model_dump().items():
        setattr(db_patient, field, value)

    await db.commit()
    await db.refresh(db_patient)
    return db_patient


async def delete_patient(db: AsyncSession, patient_id: int) -> bool:
    """Delete a patient (messages cascade). Returns False if nothing was deleted."""
    result = await db.execute(delete(Patient).where(Patient.id == patient_id))
    await db.commit()
    return result.rowcount > 0
