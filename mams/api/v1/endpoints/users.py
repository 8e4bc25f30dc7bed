# File: mams/api/v1/endpoints/users.py
from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mams import crud, schemas
from mams.api import deps
from mams.core.exceptions import InvalidInput, NotFound
from mams.core.permissions import resolve_scope
from mams.db.database import get_db, transaction
from mams.models.assignment import Assignment
from mams.models.user import User, UserRole
from mams.schemas.audit import EntityDetails
from mams.services import audit_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_username_free(db: Session, username: str, exclude_id: Optional[int] = None) -> None:
    existing = crud.user.get_by_username(db, username=username)
    if existing and existing.id != exclude_id:
        raise InvalidInput(f"Username '{username}' is already taken")


def _check_base(db: Session, role: UserRole, base_id: Optional[int]) -> None:
    if base_id is None:
        raise InvalidInput(f"A {role.value} must be assigned to a base")
    if not crud.military_base.get(db, id=base_id):
        raise NotFound(f"Base {base_id} not found")


def _check_not_holding_assets(db: Session, user_id: int) -> None:
    if db.query(Assignment.id).filter(Assignment.assignee_user_id == user_id).first():
        raise InvalidInput(f"User {user_id} still holds assigned assets")


def _get_logistics_officer(db: Session, identity: schemas.Identity, user_id: int) -> User:
    """Commanders only see logistics officers of their own base."""
    officer = crud.user.get(db, id=user_id)
    if not officer or officer.role != UserRole.LOGISTICS or officer.base_id != identity.base_id:
        raise NotFound(f"Logistics officer {user_id} not found")
    return officer


# ---------------------------------------------------------------------------
# Commander: logistics officers of the commander's base
# ---------------------------------------------------------------------------

@router.get("/logistics", response_model=List[schemas.User])
def read_logistics_officers(
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_commander),
) -> Any:
    resolve_scope(db, identity)
    return crud.user.get_by_base(db, base_id=identity.base_id, role=UserRole.LOGISTICS)


@router.post("/logistics", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_logistics_officer(
    *,
    db: Session = Depends(get_db),
    officer_in: schemas.LogisticsOfficerCreate,
    identity: schemas.Identity = Depends(deps.get_current_commander),
) -> Any:
    with transaction(db):
        resolve_scope(db, identity)
        _check_username_free(db, officer_in.username)
        officer = crud.user.create(
            db,
            obj_in={
                "username": officer_in.username,
                "password": officer_in.password,
                "role": UserRole.LOGISTICS,
                "base_id": identity.base_id,
            },
        )
        details = EntityDetails(
            entity="user", entity_id=officer.id, base_id=identity.base_id,
            changes={"username": officer_in.username, "role": UserRole.LOGISTICS.value},
        )

    logger.info(f"Logistics officer {details.entity_id} created by commander {identity.id}")
    audit_service.record(db, identity, "create_logistics_officer", "users", details)
    return officer


@router.put("/logistics/{user_id}", response_model=schemas.User)
def update_logistics_officer(
    *,
    db: Session = Depends(get_db),
    user_id: int,
    officer_in: schemas.LogisticsOfficerUpdate,
    identity: schemas.Identity = Depends(deps.get_current_commander),
) -> Any:
    changes = officer_in.model_dump(exclude_unset=True)
    with transaction(db):
        resolve_scope(db, identity)
        officer = _get_logistics_officer(db, identity, user_id)
        if officer_in.username:
            _check_username_free(db, officer_in.username, exclude_id=user_id)
        officer = crud.user.update(db, db_obj=officer, obj_in=changes)

    audit_service.record(
        db, identity, "update_logistics_officer", "users",
        EntityDetails(entity="user", entity_id=user_id, base_id=identity.base_id, changes=changes),
    )
    return officer


@router.delete("/logistics/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_logistics_officer(
    *,
    db: Session = Depends(get_db),
    user_id: int,
    identity: schemas.Identity = Depends(deps.get_current_commander),
) -> None:
    with transaction(db):
        resolve_scope(db, identity)
        _get_logistics_officer(db, identity, user_id)
        _check_not_holding_assets(db, user_id)
        crud.user.remove(db, id=user_id)

    logger.info(f"Logistics officer {user_id} deleted by commander {identity.id}")
    audit_service.record(
        db, identity, "delete_logistics_officer", "users",
        EntityDetails(entity="user", entity_id=user_id, base_id=identity.base_id),
    )


# ---------------------------------------------------------------------------
# Admin: every non-admin account
# ---------------------------------------------------------------------------

@router.get("/", response_model=List[schemas.User])
def read_users(
    db: Session = Depends(get_db),
    role: Optional[UserRole] = None,
    base_id: Optional[int] = None,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    if base_id is not None:
        query = query.filter(User.base_id == base_id)
    return query.order_by(User.id).all()


@router.get("/{user_id}", response_model=schemas.User)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    user = crud.user.get(db, id=user_id)
    if not user:
        raise NotFound(f"User {user_id} not found")
    return user


@router.post("/", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user(
    *,
    db: Session = Depends(get_db),
    user_in: schemas.UserCreate,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    with transaction(db):
        if user_in.role == UserRole.ADMIN:
            raise InvalidInput("Only one admin account is allowed")
        _check_username_free(db, user_in.username)
        _check_base(db, user_in.role, user_in.base_id)
        user = crud.user.create(db, obj_in=user_in)
        details = EntityDetails(
            entity="user", entity_id=user.id, base_id=user_in.base_id,
            changes=user_in.model_dump(mode="json", exclude={"password"}),
        )

    logger.info(f"User {details.entity_id} ({user_in.role.value}) created by admin {identity.id}")
    audit_service.record(db, identity, "create_user", "users", details)
    return user


@router.put("/{user_id}", response_model=schemas.User)
def update_user(
    *,
    db: Session = Depends(get_db),
    user_id: int,
    user_in: schemas.UserUpdate,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    changes = user_in.model_dump(mode="json", exclude_unset=True, exclude={"password"})
    with transaction(db):
        user = crud.user.get(db, id=user_id)
        if not user:
            raise NotFound(f"User {user_id} not found")

        new_role = user_in.role or user.role
        if (user.role == UserRole.ADMIN) != (new_role == UserRole.ADMIN):
            raise InvalidInput("The admin role cannot be granted or revoked")
        if user_in.username:
            _check_username_free(db, user_in.username, exclude_id=user_id)
        if new_role != UserRole.ADMIN:
            new_base = user_in.base_id if "base_id" in user_in.model_fields_set else user.base_id
            _check_base(db, new_role, new_base)

        user = crud.user.update(db, db_obj=user, obj_in=user_in)

    audit_service.record(
        db, identity, "update_user", "users",
        EntityDetails(entity="user", entity_id=user_id, changes=changes),
    )
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    *,
    db: Session = Depends(get_db),
    user_id: int,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> None:
    with transaction(db):
        user = crud.user.get(db, id=user_id)
        if not user:
            raise NotFound(f"User {user_id} not found")
        if user.role == UserRole.ADMIN:
            raise InvalidInput("The admin account cannot be deleted")
        _check_not_holding_assets(db, user_id)
        crud.user.remove(db, id=user_id)

    logger.info(f"User {user_id} deleted by admin {identity.id}")
    audit_service.record(db, identity, "delete_user", "users", EntityDetails(entity="user", entity_id=user_id))
