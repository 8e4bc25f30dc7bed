# File: mams/api/v1/endpoints/bases.py
from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mams import crud, schemas
from mams.api import deps
from mams.core.exceptions import InvalidInput, NotFound
from mams.db.database import get_db, transaction
from mams.models.assignment import Assignment
from mams.models.base_asset import BaseAsset
from mams.models.personnel import Personnel
from mams.models.purchase import Purchase
from mams.models.transfer_request import TransferRequest
from mams.models.user import User
from mams.schemas.audit import EntityDetails
from mams.services import audit_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[schemas.MilitaryBase])
def read_bases(
    db: Session = Depends(get_db),
    name: Optional[str] = Query(None, description="Substring match on base name"),
    location: Optional[str] = Query(None, description="Substring match on location"),
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    return crud.military_base.search(db, name=name, location=location)


@router.get("/{base_id}", response_model=schemas.MilitaryBase)
def read_base(
    base_id: int,
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    base = crud.military_base.get(db, id=base_id)
    if not base:
        raise NotFound(f"Base {base_id} not found")
    return base


@router.post("/", response_model=schemas.MilitaryBase, status_code=status.HTTP_201_CREATED)
def create_base(
    *,
    db: Session = Depends(get_db),
    base_in: schemas.MilitaryBaseCreate,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    with transaction(db):
        if crud.military_base.get_by_name(db, name=base_in.name):
            raise InvalidInput(f"Base '{base_in.name}' already exists")
        base = crud.military_base.create(db, obj_in=base_in)
        details = EntityDetails(entity="base", entity_id=base.id, base_id=base.id, changes=base_in.model_dump())

    logger.info(f"Base {details.entity_id} created by user {identity.id}")
    audit_service.record(db, identity, "create_base", "bases", details)
    return base


@router.put("/{base_id}", response_model=schemas.MilitaryBase)
def update_base(
    *,
    db: Session = Depends(get_db),
    base_id: int,
    base_in: schemas.MilitaryBaseUpdate,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    changes = base_in.model_dump(exclude_unset=True)
    with transaction(db):
        base = crud.military_base.get(db, id=base_id)
        if not base:
            raise NotFound(f"Base {base_id} not found")
        if base_in.name and base_in.name != base.name and crud.military_base.get_by_name(db, name=base_in.name):
            raise InvalidInput(f"Base '{base_in.name}' already exists")
        base = crud.military_base.update(db, db_obj=base, obj_in=base_in)

    audit_service.record(
        db, identity, "update_base", "bases",
        EntityDetails(entity="base", entity_id=base_id, base_id=base_id, changes=changes),
    )
    return base


@router.delete("/{base_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_base(
    *,
    db: Session = Depends(get_db),
    base_id: int,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> None:
    with transaction(db):
        base = crud.military_base.get(db, id=base_id)
        if not base:
            raise NotFound(f"Base {base_id} not found")

        stocked = db.query(BaseAsset.id).filter(
            BaseAsset.base_id == base_id,
            (BaseAsset.available_qty + BaseAsset.assigned_qty) > 0,
        ).first()
        if stocked:
            raise InvalidInput("Base still holds stock")
        if db.query(User.id).filter(User.base_id == base_id).first():
            raise InvalidInput("Base still has users assigned")
        if db.query(Personnel.id).filter(Personnel.base_id == base_id).first():
            raise InvalidInput("Base still has personnel assigned")
        if db.query(Assignment.id).filter(Assignment.base_id == base_id).first():
            raise InvalidInput("Base still has open assignments")
        referenced = (
            db.query(Purchase.id).filter(Purchase.base_id == base_id).first()
            or db.query(TransferRequest.id).filter(
                (TransferRequest.from_base == base_id) | (TransferRequest.to_base == base_id)
            ).first()
        )
        if referenced:
            raise InvalidInput("Base is referenced by purchase or transfer history")

        db.query(BaseAsset).filter(BaseAsset.base_id == base_id).delete(synchronize_session=False)
        crud.military_base.remove(db, id=base_id)

    logger.info(f"Base {base_id} deleted by user {identity.id}")
    audit_service.record(db, identity, "delete_base", "bases", EntityDetails(entity="base", entity_id=base_id))
