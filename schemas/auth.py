# Pydantic Schemas for Authentication
# Request bodies use camelCase aliases; each alias is declared explicitly per field

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from database.models import UserType


PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
PHONE_PATTERN = r"^[+]?[1-9]\d{1,14}$"
INSTAGRAM_HANDLE_PATTERN = r"^[a-zA-Z0-9_]{1,30}$"
OTP_PATTERN = r"^\d{6}$"
# bcrypt only reads the first 72 bytes and newer releases refuse anything longer
PASSWORD_MAX_BYTES = 72


def check_password_strength(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, and one number"
        )
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# REGISTRATION & LOGIN
# ============================================================================

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: Optional[str] = Field(None, alias="firstName", min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, alias="lastName", min_length=2, max_length=50)
    full_name: Optional[str] = Field(None, alias="fullName", min_length=2, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: UserType = UserType.INFLUENCER
    company_name: Optional[str] = Field(None, alias="companyName", min_length=2, max_length=255)
    instagram_handle: Optional[str] = Field(None, alias="instagramHandle", pattern=INSTAGRAM_HANDLE_PATTERN)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v):
        return check_password_strength(v)

    @field_validator("role")
    @classmethod
    def self_service_role(cls, v):
        if v == UserType.ADMIN:
            raise ValueError("Role must be INFLUENCER or BRAND")
        return v

    @model_validator(mode="after")
    def role_specific_fields(self):
        if self.role == UserType.BRAND and not self.company_name:
            raise ValueError("Company name is required for brand accounts")
        if self.full_name and not (self.first_name or self.last_name):
            first, _, last = self.full_name.strip().partition(" ")
            self.first_name = first
            self.last_name = last.strip() or None
        if self.role == UserType.INFLUENCER and not (self.first_name and self.last_name) and not self.full_name:
            raise ValueError("First and last name (or full name) are required for influencers")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# ============================================================================
# ONE-TIME CODES & PASSWORD RESET
# ============================================================================

class OtpVerifyRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=OTP_PATTERN)


class EmailRequest(CamelModel):
    email: EmailStr


class PasswordResetConfirmRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=OTP_PATTERN)
    new_password: str = Field(..., alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v):
        return check_password_strength(v)
