# File: mams/models/user.py
from sqlalchemy import Column, String, Boolean, Enum, Integer, ForeignKey
from sqlalchemy.orm import relationship
from mams.models.base import BaseModel
import enum


class UserRole(enum.Enum):
    ADMIN = "admin"
    COMMANDER = "commander"
    LOGISTICS = "logistics"


class User(BaseModel):
    __tablename__ = "users"

    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False)
    # Required for commanders and logistics officers, empty for the admin
    base_id = Column(Integer, ForeignKey("bases.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    base = relationship("MilitaryBase")
