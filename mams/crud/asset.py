# File: mams/crud/asset.py
from typing import Optional
from sqlalchemy.orm import Session
from mams.crud.base import CRUDBase
from mams.models.asset import Asset
from mams.schemas.asset import AssetCreate, AssetUpdate


class CRUDAsset(CRUDBase[Asset, AssetCreate, AssetUpdate]):

    def get_by_serial(self, db: Session, *, serial_number: str, exclude_id: Optional[int] = None) -> Optional[Asset]:
        query = db.query(Asset).filter(Asset.serial_number == serial_number)
        if exclude_id is not None:
            query = query.filter(Asset.id != exclude_id)
        return query.first()


asset = CRUDAsset(Asset)
