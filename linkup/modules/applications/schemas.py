from pydantic import BaseModel, field_validator
from typing import Optional, Union, Dict, Any
from datetime import datetime

from linkup.modules.applications.models import APPLICATION_STATUSES


def check_status(value: str) -> str:
    if value not in APPLICATION_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(APPLICATION_STATUSES)}")
    return value


class ApplicationCreate(BaseModel):
    id_job_offer: int
    notes: Optional[str] = None


class AdminApplicationCreate(ApplicationCreate):
    id_user: int
    status: str = "pending"

    @field_validator("status")
    @classmethod
    def known_status(cls, value: str) -> str:
        return check_status(value)


class ApplicationStatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = None
    # candidate whose application is updated; required for company updates
    id_user: Optional[int] = None

    @field_validator("status")
    @classmethod
    def known_status(cls, value: str) -> str:
        return check_status(value)


class ApplicationResponse(BaseModel):
    id_user: int
    id_job_offer: int
    status: str = "pending"
    notes: Optional[str] = None
    application_date: Optional[Union[datetime, str]] = None
    job_offer: Optional[Dict[str, Any]] = None
    user_: Optional[Dict[str, Any]] = None
    matching: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
