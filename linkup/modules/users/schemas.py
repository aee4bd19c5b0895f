from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, List, Union
from datetime import datetime

from linkup.modules.auth.schemas import validate_password_strength


class UserUpdate(BaseModel):
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    phone: Optional[str] = None
    bio_pro: Optional[str] = None
    website: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    description: Optional[str] = None
    skills: Optional[List[str]] = None
    job_title: Optional[str] = None
    experience_level: Optional[str] = None
    availability: Optional[bool] = None
    portfolio_link: Optional[str] = None
    linkedin_link: Optional[str] = None


class AdminUserCreate(BaseModel):
    email: EmailStr
    password: str
    firstname: str
    lastname: str
    role: str = "user"
    phone: Optional[str] = None

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return validate_password_strength(value)

    @field_validator("role")
    @classmethod
    def known_role(cls, value: str) -> str:
        if value not in ("user", "admin"):
            raise ValueError("role must be 'user' or 'admin'")
        return value


class AdminUserUpdate(UserUpdate):
    role: Optional[str] = None

    @field_validator("role")
    @classmethod
    def known_role(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in ("user", "admin"):
            raise ValueError("role must be 'user' or 'admin'")
        return value


class PasswordChange(BaseModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return validate_password_strength(value)


class UserResponse(BaseModel):
    id_user: int
    email: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    phone: Optional[str] = None
    role: str = "user"
    bio_pro: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    job_title: Optional[str] = None
    experience_level: Optional[str] = None
    skills: Optional[List[str]] = None
    availability: Optional[bool] = None
    portfolio_link: Optional[str] = None
    linkedin_link: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None
    updated_at: Optional[Union[datetime, str]] = None

    class Config:
        from_attributes = True


class PublicUserResponse(BaseModel):
    """Profile visible to other accounts (no contact details)"""
    id_user: int
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    bio_pro: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    job_title: Optional[str] = None
    experience_level: Optional[str] = None
    skills: Optional[List[str]] = None
    portfolio_link: Optional[str] = None
    linkedin_link: Optional[str] = None

    class Config:
        from_attributes = True
