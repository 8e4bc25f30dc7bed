from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from mams.models.user import UserRole


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    role: UserRole
    base_id: Optional[int] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[UserRole] = None
    base_id: Optional[int] = None
    is_active: Optional[bool] = None


class LogisticsOfficerCreate(BaseModel):
    """Commander-side creation: role and base are implied."""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class LogisticsOfficerUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class User(UserBase):
    id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
