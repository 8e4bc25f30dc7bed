# File: mams/models/audit_log.py
from sqlalchemy import Column, Integer, String, JSON
from mams.models.base import BaseModel


class AuditLog(BaseModel):
    __tablename__ = "audit_logs"

    user_id = Column(Integer, nullable=True, index=True)
    role = Column(String(50), nullable=True)
    action = Column(String(100), nullable=False, index=True)
    target = Column(String(255), nullable=True)
    details = Column(JSON, nullable=True)
