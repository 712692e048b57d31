# app/system_models/patient_model/patient_schemas.py
from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class PatientBase(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    medical_notes: Optional[str] = None

    @field_validator("name", mode="before")
    def validate_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email", "phone", "date_of_birth", "medical_notes", mode="before")
    def blank_to_none(cls, v):
        # Optional text fields arrive trimmed; empty means "not provided"
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("email")
    def normalize_email(cls, v):
        return v.lower() if v else v


class PatientCreate(PatientBase):
    pass


class PatientUpdate(PatientBase):
    """Full replacement of every mutable field; omitted optionals are cleared."""
    pass


class PatientResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    medical_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")
    has_next: bool = Field(..., alias="hasNext")
    has_prev: bool = Field(..., alias="hasPrev")

    model_config = ConfigDict(populate_by_name=True)


class PatientPage(BaseModel):
    patients: List[PatientResponse]
    pagination: Pagination


# Response envelopes
class PatientListResponse(BaseModel):
    success: bool = True
    data: PatientPage


class PatientDetailResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: PatientResponse


class PatientDeleteResponse(BaseModel):
    success: bool = True
    message: str
