from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class MilitaryBaseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = None


class MilitaryBaseCreate(MilitaryBaseBase):
    pass


class MilitaryBaseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = None


class MilitaryBase(MilitaryBaseBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
