# File: mams/api/v1/endpoints/personnel.py
from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mams import crud, schemas
from mams.api import deps
from mams.core.exceptions import InvalidInput, NotFound
from mams.core.permissions import BaseScope, require_role, resolve_scope
from mams.db.database import get_db, transaction
from mams.models.assignment import Assignment
from mams.models.personnel import Personnel
from mams.models.user import UserRole
from mams.schemas.audit import EntityDetails
from mams.services import audit_service

logger = logging.getLogger(__name__)
router = APIRouter()

# Admins read personnel everywhere but only the base's own staff change them
PERSONNEL_MANAGERS = (UserRole.COMMANDER, UserRole.LOGISTICS)


def _get_visible(db: Session, scope: BaseScope, personnel_id: int) -> Personnel:
    person = crud.personnel.get(db, id=personnel_id)
    if not person:
        raise NotFound(f"Personnel {personnel_id} not found")
    scope.require_visible(person.base_id, "Personnel", personnel_id)
    return person


@router.get("/", response_model=List[schemas.Personnel])
def read_personnel(
    db: Session = Depends(get_db),
    base_id: Optional[int] = None,
    active_only: bool = False,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    scope = resolve_scope(db, identity)
    query = scope.restrict(db.query(Personnel), Personnel.base_id)
    if base_id is not None:
        scope.require(base_id)
        query = query.filter(Personnel.base_id == base_id)
    if active_only:
        query = query.filter(Personnel.is_active == True)
    return query.order_by(Personnel.id).all()


@router.get("/{personnel_id}", response_model=schemas.Personnel)
def read_personnel_member(
    personnel_id: int,
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return _get_visible(db, resolve_scope(db, identity), personnel_id)


@router.post("/", response_model=schemas.Personnel, status_code=status.HTTP_201_CREATED)
def create_personnel(
    *,
    db: Session = Depends(get_db),
    personnel_in: schemas.PersonnelCreate,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    # Personnel are always created at the caller's own base
    base_id = identity.base_id

    with transaction(db):
        scope = resolve_scope(db, identity)
        require_role(identity, *PERSONNEL_MANAGERS)
        scope.require(base_id)
        if not crud.military_base.get(db, id=base_id):
            raise NotFound(f"Base {base_id} not found")
        if crud.personnel.get_by_service_number(db, service_number=personnel_in.service_number):
            raise InvalidInput(f"Service number '{personnel_in.service_number}' is already registered")

        data = personnel_in.model_dump()
        data["base_id"] = base_id
        person = crud.personnel.create(db, obj_in=data)
        details = EntityDetails(entity="personnel", entity_id=person.id, base_id=base_id, changes=data)

    logger.info(f"Personnel {details.entity_id} added to base {base_id} by user {identity.id}")
    audit_service.record(db, identity, "create_personnel", "personnel", details)
    return person


@router.put("/{personnel_id}", response_model=schemas.Personnel)
def update_personnel(
    *,
    db: Session = Depends(get_db),
    personnel_id: int,
    personnel_in: schemas.PersonnelUpdate,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    changes = personnel_in.model_dump(exclude_unset=True)
    with transaction(db):
        scope = resolve_scope(db, identity)
        require_role(identity, *PERSONNEL_MANAGERS)
        person = _get_visible(db, scope, personnel_id)
        base_id = person.base_id
        person = crud.personnel.update(db, db_obj=person, obj_in=changes)

    audit_service.record(
        db, identity, "update_personnel", "personnel",
        EntityDetails(entity="personnel", entity_id=personnel_id, base_id=base_id, changes=changes),
    )
    return person


@router.post("/{personnel_id}/deactivate", response_model=schemas.Personnel)
def deactivate_personnel(
    *,
    db: Session = Depends(get_db),
    personnel_id: int,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    with transaction(db):
        scope = resolve_scope(db, identity)
        require_role(identity, *PERSONNEL_MANAGERS)
        person = _get_visible(db, scope, personnel_id)
        base_id = person.base_id
        person = crud.personnel.update(db, db_obj=person, obj_in={"is_active": False})

    logger.info(f"Personnel {personnel_id} deactivated by user {identity.id}")
    audit_service.record(
        db, identity, "deactivate_personnel", "personnel",
        EntityDetails(entity="personnel", entity_id=personnel_id, base_id=base_id, changes={"is_active": False}),
    )
    return person


@router.delete("/{personnel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_personnel(
    *,
    db: Session = Depends(get_db),
    personnel_id: int,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> None:
    with transaction(db):
        scope = resolve_scope(db, identity)
        require_role(identity, *PERSONNEL_MANAGERS)
        person = _get_visible(db, scope, personnel_id)
        base_id = person.base_id
        if db.query(Assignment.id).filter(Assignment.assignee_personnel_id == personnel_id).first():
            raise InvalidInput(f"Personnel {personnel_id} still holds assigned assets")
        crud.personnel.remove(db, id=personnel_id)

    logger.info(f"Personnel {personnel_id} deleted by user {identity.id}")
    audit_service.record(
        db, identity, "delete_personnel", "personnel",
        EntityDetails(entity="personnel", entity_id=personnel_id, base_id=base_id),
    )
