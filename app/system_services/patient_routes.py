# app/system_services/patient_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.shared.query_params import positive_int_or_default
from app.system_models.patient_model.patient_schemas import (
    PatientCreate,
    PatientDeleteResponse,
    PatientDetailResponse,
    PatientListResponse,
    PatientPage,
    PatientResponse,
    PatientUpdate,
)
from app.system_services.patient_services import (
    create_patient,
    delete_patient,
    get_patient,
    list_patients,
    update_patient,
)
from app.users.auth_dependencies import get_current_user_id

logger = logging.getLogger(__name__)

# All routes require authentication
router = APIRouter(dependencies=[Depends(get_current_user_id)])

PATIENT_NOT_FOUND = "Patient not found"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


@router.get("", response_model=PatientListResponse)
async def list_patients_endpoint(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Paginated patient list, newest first, with optional substring search."""
    page = positive_int_or_default(page, DEFAULT_PAGE)
    limit = positive_int_or_default(limit, DEFAULT_PAGE_SIZE)
    try:
        patients, pagination = await list_patients(db, page, limit, search.strip() if search else None)
    except SQLAlchemyError:
        logger.exception("❌ Get patients error")
        raise HTTPException(status_code=500, detail="Failed to fetch patients")

    return PatientListResponse(
        data=PatientPage(
            patients=[PatientResponse.model_validate(p) for p in patients],
            pagination=pagination,
        )
    )


@router.get("/{patient_id}", response_model=PatientDetailResponse)
async def get_patient_endpoint(patient_id: int, db: AsyncSession = Depends(get_db)):
    try:
        db_patient = await get_patient(db, patient_id)
    except SQLAlchemyError:
        logger.exception("❌ Get patient error")
        raise HTTPException(status_code=500, detail="Failed to fetch patient")

    if db_patient is None:
        raise HTTPException(status_code=404, detail=PATIENT_NOT_FOUND)
    return PatientDetailResponse(data=PatientResponse.model_validate(db_patient))


@router.post("", response_model=PatientDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_patient_endpoint(
    patient: PatientCreate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Create a new patient owned by the calling user."""
    try:
        db_patient = await create_patient(db, patient, created_by=user_id)
    except SQLAlchemyError:
        logger.exception("❌ Create patient error")
        raise HTTPException(status_code=500, detail="Failed to create patient")

    logger.info(f"🦷 Patient {db_patient.id} created by user {user_id}")
    return PatientDetailResponse(
        message="Patient created successfully",
        data=PatientResponse.model_validate(db_patient),
    )


@router.put("/{patient_id}", response_model=PatientDetailResponse)
async def update_patient_endpoint(
    patient_id: int,
    patient: PatientUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        db_patient = await update_patient(db, patient_id, patient)
    except SQLAlchemyError:
        logger.exception("❌ Update patient error")
        raise HTTPException(status_code=500, detail="Failed to update patient")

    if db_patient is None:
        raise HTTPException(status_code=404, detail=PATIENT_NOT_FOUND)
    return PatientDetailResponse(
        message="Patient updated successfully",
        data=PatientResponse.model_validate(db_patient),
    )


@router.delete("/{patient_id}", response_model=PatientDeleteResponse)
async def delete_patient_endpoint(patient_id: int, db: AsyncSession = Depends(get_db)):
    try:
        deleted = await delete_patient(db, patient_id)
    except SQLAlchemyError:
        logger.exception("❌ Delete patient error")
        raise HTTPException(status_code=500, detail="Failed to delete patient")

    if not deleted:
        raise HTTPException(status_code=404, detail=PATIENT_NOT_FOUND)

    logger.info(f"🗑️ Patient {patient_id} deleted")
    return PatientDeleteResponse(message="Patient deleted successfully")
