# File: mams/models/base_asset.py
from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from mams.models.base import BaseModel


class BaseAsset(BaseModel):
    """Ledger row: stock of one asset at one base."""
    __tablename__ = "base_assets"
    __table_args__ = (
        UniqueConstraint("base_id", "asset_id", name="uq_base_assets_base_asset"),
        CheckConstraint("available_qty >= 0", name="ck_base_assets_available_non_negative"),
        CheckConstraint("assigned_qty >= 0", name="ck_base_assets_assigned_non_negative"),
    )

    base_id = Column(Integer, ForeignKey("bases.id"), nullable=False, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False, index=True)
    available_qty = Column(Integer, nullable=False, default=0)
    assigned_qty = Column(Integer, nullable=False, default=0)

    base = relationship("MilitaryBase")
    asset = relationship("Asset")

    @property
    def total_qty(self) -> int:
        return self.available_qty + self.assigned_qty
