# File: mams/crud/personnel.py
from typing import List, Optional
from sqlalchemy.orm import Session
from mams.crud.base import CRUDBase
from mams.models.personnel import Personnel
from mams.schemas.personnel import PersonnelCreate, PersonnelUpdate


class CRUDPersonnel(CRUDBase[Personnel, PersonnelCreate, PersonnelUpdate]):

    def get_by_service_number(self, db: Session, *, service_number: str) -> Optional[Personnel]:
        return db.query(Personnel).filter(Personnel.service_number == service_number).first()

    def get_by_base(self, db: Session, *, base_id: int, active_only: bool = False) -> List[Personnel]:
        query = db.query(Personnel).filter(Personnel.base_id == base_id)
        if active_only:
            query = query.filter(Personnel.is_active == True)
        return query.order_by(Personnel.id).all()


personnel = CRUDPersonnel(Personnel)
