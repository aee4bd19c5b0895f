import re
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, Any, Dict

PASSWORD_MIN_LENGTH = 8
# bcrypt only hashes the first 72 bytes and bcrypt>=5 rejects longer input
PASSWORD_MAX_BYTES = 72
_PHONE_RE = re.compile(r"^\+?[0-9]{10,15}$")
_SPECIAL_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def validate_password_strength(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain an uppercase letter")
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain a lowercase letter")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain a digit")
    if not _SPECIAL_RE.search(value):
        raise ValueError("Password must contain a special character")
    return value


def _optional_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = re.sub(r"[\s\-()]", "", value)
    if not cleaned:
        return None
    if not _PHONE_RE.match(cleaned):
        raise ValueError("Invalid phone number")
    return cleaned


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class CompanyLoginRequest(BaseModel):
    recruiter_mail: EmailStr
    password: str


class UserSignupRequest(BaseModel):
    email: EmailStr
    password: str
    firstname: str
    lastname: str
    phone: Optional[str] = None
    bio_pro: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return validate_password_strength(value)

    @field_validator("firstname", "lastname")
    @classmethod
    def required_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        if len(value) > 100:
            raise ValueError("Must be at most 100 characters")
        return value

    @field_validator("phone")
    @classmethod
    def phone_format(cls, value: Optional[str]) -> Optional[str]:
        return _optional_phone(value)


class CompanySignupRequest(BaseModel):
    name: str
    description: str
    recruiter_mail: EmailStr
    password: str
    website: Optional[str] = None
    recruiter_firstname: Optional[str] = None
    recruiter_lastname: Optional[str] = None
    recruiter_phone: Optional[str] = None
    industry: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    employees_number: Optional[str] = None
    founded_year: Optional[int] = None

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return validate_password_strength(value)

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        value = value.strip()
        if not 2 <= len(value) <= 200:
            raise ValueError("Company name must be between 2 and 200 characters")
        return value

    @field_validator("description")
    @classmethod
    def description_length(cls, value: str) -> str:
        value = value.strip()
        if not 10 <= len(value) <= 2000:
            raise ValueError("Description must be between 10 and 2000 characters")
        return value

    @field_validator("website")
    @classmethod
    def website_scheme(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        if not re.match(r"^https?://.+", value.strip(), re.IGNORECASE):
            raise ValueError("Website must start with http:// or https://")
        return value.strip()

    @field_validator("recruiter_phone")
    @classmethod
    def phone_format(cls, value: Optional[str]) -> Optional[str]:
        return _optional_phone(value)

    @field_validator("founded_year")
    @classmethod
    def founded_year_range(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        if not 1800 <= value <= datetime.now().year:
            raise ValueError("Founded year must be between 1800 and the current year")
        return value


class SessionResponse(BaseModel):
    """Minimal profile returned by login; the full profile comes from /auth/me"""
    id: int
    email: str
    role: str
    name: Optional[str] = None
    message: str = "Login successful"


class SignupResponse(BaseModel):
    id: int
    email: str
    message: str


class WhoAmIResponse(BaseModel):
    role: str
    profile: Dict[str, Any]
