from pydantic import BaseModel, field_validator
from typing import Optional, Any


class FilterCreate(BaseModel):
    name: str
    type: str
    options: Optional[Any] = None
    is_active: bool = True

    @field_validator("name", "type")
    @classmethod
    def required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        return value


class FilterUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    options: Optional[Any] = None
    is_active: Optional[bool] = None


class FilterResponse(BaseModel):
    id_filter: int
    name: str
    type: str
    options: Optional[Any] = None
    is_active: bool = True

    class Config:
        from_attributes = True
