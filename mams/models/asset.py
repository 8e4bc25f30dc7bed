# File: mams/models/asset.py
from sqlalchemy import Column, String, Text
from mams.models.base import BaseModel


class Asset(BaseModel):
    __tablename__ = "assets"

    name = Column(String(255), nullable=False)
    serial_number = Column(String(100), unique=True, nullable=True)
    description = Column(Text, nullable=True)
