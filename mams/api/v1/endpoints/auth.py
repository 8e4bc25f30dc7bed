# File: mams/api/v1/endpoints/auth.py
from datetime import timedelta
from typing import Any
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from mams import crud, schemas
from mams.api import deps
from mams.core import security
from mams.core.config import settings
from mams.db.database import get_db, transaction
from mams.schemas.audit import LoginDetails
from mams.services import audit_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=schemas.Token)
def login_access_token(
    db: Session = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """OAuth2 compatible token login, get an access token for future requests"""
    with transaction(db):
        user = crud.user.authenticate(db, username=form_data.username, password=form_data.password)
        if user is not None:
            identity = schemas.Identity(id=user.id, role=user.role, base_id=user.base_id)
            is_active = user.is_active

    if user is None:
        logger.warning(f"Failed login attempt for username: {form_data.username}")
        audit_service.record(db, None, "login_failed", "auth", LoginDetails(username=form_data.username))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not is_active:
        logger.warning(f"Inactive user {identity.id} attempted to log in")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    access_token = security.create_access_token(
        subject=identity.id,
        role=identity.role.value,
        base_id=identity.base_id,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    logger.info(f"User {identity.id} ({identity.role.value}) logged in")
    audit_service.record(db, identity, "login", f"user:{identity.id}", LoginDetails(username=form_data.username))

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user_id": identity.id,
        "role": identity.role,
        "base_id": identity.base_id,
    }


@router.get("/me", response_model=schemas.Identity)
def read_current_identity(
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return identity
