# app/users/user_models/schemas.py


from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Allowed values as constants
ROLES = Literal["admin", "user"]


# ✅ Request schema for registration
class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    role: ROLES = "user"

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("name", mode="before")
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


# ✅ User login request
class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ Response schema for user info
class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: ROLES
    is_active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ✅ Response schema for user login
class UserLoginResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse
