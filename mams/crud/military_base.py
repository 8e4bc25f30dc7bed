# File: mams/crud/military_base.py
from typing import List, Optional
from sqlalchemy.orm import Session
from mams.crud.base import CRUDBase
from mams.models.military_base import MilitaryBase
from mams.schemas.military_base import MilitaryBaseCreate, MilitaryBaseUpdate


class CRUDMilitaryBase(CRUDBase[MilitaryBase, MilitaryBaseCreate, MilitaryBaseUpdate]):

    def get_by_name(self, db: Session, *, name: str) -> Optional[MilitaryBase]:
        return db.query(MilitaryBase).filter(MilitaryBase.name == name).first()

    def search(
        self, db: Session, *, name: Optional[str] = None, location: Optional[str] = None
    ) -> List[MilitaryBase]:
        query = db.query(MilitaryBase)
        if name:
            query = query.filter(MilitaryBase.name.ilike(f"%{name}%"))
        if location:
            query = query.filter(MilitaryBase.location.ilike(f"%{location}%"))
        return query.order_by(MilitaryBase.id).all()


military_base = CRUDMilitaryBase(MilitaryBase)
