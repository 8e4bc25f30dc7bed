# File: mams/models/transfer_request.py
from sqlalchemy import Column, Integer, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from mams.models.base import BaseModel
import enum


class TransferStatus(enum.Enum):
    REQUESTED = "requested"
    COMPLETED = "completed"
    REJECTED = "rejected"


class TransferRequest(BaseModel):
    __tablename__ = "transfer_requests"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_transfer_requests_quantity_positive"),
        CheckConstraint("from_base <> to_base", name="ck_transfer_requests_distinct_bases"),
    )

    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False, index=True)
    from_base = Column(Integer, ForeignKey("bases.id"), nullable=False, index=True)
    to_base = Column(Integer, ForeignKey("bases.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    status = Column(Enum(TransferStatus), nullable=False, default=TransferStatus.REQUESTED, index=True)
    requested_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    asset = relationship("Asset")
