from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class PersonnelBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    rank: Optional[str] = None
    assigned_unit: Optional[str] = None


class PersonnelCreate(PersonnelBase):
    service_number: str = Field(..., min_length=1, max_length=100)


class PersonnelUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    rank: Optional[str] = None
    assigned_unit: Optional[str] = None
    is_active: Optional[bool] = None


class Personnel(PersonnelBase):
    id: int
    service_number: str
    base_id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
