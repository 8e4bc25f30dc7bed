# File: mams/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from mams.core.permissions import require_role
from mams.core.security import decode_token
from mams.models.user import UserRole
from mams.schemas.auth import Identity

security = HTTPBearer()


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Identity:
    """The token is trusted verbatim: id, role and base come from its claims."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise credentials_exception

    try:
        return Identity(id=int(payload["sub"]), role=payload.get("role"), base_id=payload.get("base_id"))
    except (ValueError, ValidationError):
        raise credentials_exception


def get_current_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    require_role(identity, UserRole.ADMIN)
    return identity


def get_current_commander(identity: Identity = Depends(get_current_identity)) -> Identity:
    require_role(identity, UserRole.COMMANDER)
    return identity
