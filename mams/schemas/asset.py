from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class AssetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    serial_number: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class AssetCreate(AssetBase):
    pass


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    serial_number: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class Asset(AssetBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
