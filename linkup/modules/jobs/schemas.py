from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, Union, Dict, Any
from datetime import datetime


def check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_min < 0:
        raise ValueError("salary_min must be positive")
    if salary_max is not None and salary_max < 0:
        raise ValueError("salary_max must be positive")
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValueError("salary_min must be lower than or equal to salary_max")


class JobBase(BaseModel):
    location: Optional[str] = None
    contract_type: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    remote: Optional[Union[bool, str]] = None
    experience: Optional[str] = None
    industry: Optional[str] = None
    education: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None

    @model_validator(mode="after")
    def salary_range(self):
        check_salary_range(self.salary_min, self.salary_max)
        return self


class JobCreate(JobBase):
    title: str
    description: str

    @field_validator("title", "description")
    @classmethod
    def required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        return value


class AdminJobCreate(JobCreate):
    id_company: int


class JobUpdate(JobBase):
    title: Optional[str] = None
    description: Optional[str] = None


class JobResponse(BaseModel):
    id_job_offer: int
    id_company: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    contract_type: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    remote: Optional[Union[bool, str]] = None
    experience: Optional[str] = None
    industry: Optional[str] = None
    education: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    published_at: Optional[Union[datetime, str]] = None
    company: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
