from pydantic import BaseModel
from typing import Optional, List, Union, Dict, Any
from datetime import datetime


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    recruiter_firstname: Optional[str] = None
    recruiter_lastname: Optional[str] = None
    recruiter_phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    employees_number: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    founded_year: Optional[int] = None
    logo: Optional[str] = None


class CompanyResponse(BaseModel):
    id_company: int
    name: str
    description: Optional[str] = None
    recruiter_mail: str
    recruiter_firstname: Optional[str] = None
    recruiter_lastname: Optional[str] = None
    recruiter_phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    employees_number: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    founded_year: Optional[int] = None
    logo: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None
    updated_at: Optional[Union[datetime, str]] = None

    class Config:
        from_attributes = True


class CompanyWithJobsResponse(CompanyResponse):
    jobs: List[Dict[str, Any]] = []


class CompanyStatsResponse(BaseModel):
    """Hiring dashboard figures of one company"""
    total_jobs: int = 0
    active_jobs: int = 0
    total_applications: int = 0
    new_applications: int = 0
    interviews_scheduled: int = 0
    hired_candidates: int = 0
