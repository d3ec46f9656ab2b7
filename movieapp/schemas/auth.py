from pydantic import EmailStr, Field, field_validator, ValidationInfo
from datetime import datetime
from typing import List, Optional

from movieapp.schemas.base import CamelModel, as_utc


def normalize_email(value: str) -> str:
    """Emails identify accounts case-insensitively"""
    return value.strip().lower()


# Schema for user registration
class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: str
    user_name: Optional[str] = Field(None, max_length=255)

    @field_validator('email')
    @classmethod
    def lowercase_email(cls, v):
        return normalize_email(v)

    @field_validator('confirm_password')
    @classmethod
    def confirm_matches(cls, v, info: ValidationInfo):
        password = info.data.get('password')
        if password and v != password:
            raise ValueError("'ConfirmPassword' and 'Password' do not match.")
        return v

    @field_validator('user_name')
    @classmethod
    def blank_user_name(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


# Schema for user login
class LoginRequest(CamelModel):
    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def lowercase_email(cls, v):
        return normalize_email(v)


# Outcome of register/login; failures carry every error message
class AuthResult(CamelModel):
    success: bool
    token: Optional[str] = None
    errors: List[str] = Field(default_factory=list)


# Schema for user response
class UserResponse(CamelModel):
    id: int
    email: str
    user_name: str
    is_active: bool
    created_at: datetime

    @field_validator('created_at')
    @classmethod
    def utc_timestamps(cls, v):
        return as_utc(v)
