# File: mams/models/personnel.py
from sqlalchemy import Column, String, Boolean, Integer, ForeignKey
from sqlalchemy.orm import relationship
from mams.models.base import BaseModel


class Personnel(BaseModel):
    __tablename__ = "personnel"

    name = Column(String(255), nullable=False)
    rank = Column(String(100), nullable=True)
    service_number = Column(String(100), unique=True, nullable=False, index=True)
    base_id = Column(Integer, ForeignKey("bases.id"), nullable=False, index=True)
    assigned_unit = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    base = relationship("MilitaryBase")
