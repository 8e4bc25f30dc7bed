# File: mams/models/military_base.py
from sqlalchemy import Column, String
from mams.models.base import BaseModel


class MilitaryBase(BaseModel):
    """A physical installation holding its own asset stock."""
    __tablename__ = "bases"

    name = Column(String(255), unique=True, nullable=False, index=True)
    location = Column(String(255), nullable=True)
