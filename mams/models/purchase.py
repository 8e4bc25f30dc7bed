# File: mams/models/purchase.py
from sqlalchemy import Column, Integer, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from mams.models.base import BaseModel
import enum


class PurchaseStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Purchase(BaseModel):
    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
    )

    base_id = Column(Integer, ForeignKey("bases.id"), nullable=False, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    status = Column(Enum(PurchaseStatus), nullable=False, default=PurchaseStatus.PENDING, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    base = relationship("MilitaryBase")
    asset = relationship("Asset")
