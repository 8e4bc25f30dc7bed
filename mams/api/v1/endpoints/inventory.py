# File: mams/api/v1/endpoints/inventory.py
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mams import schemas
from mams.api import deps
from mams.core.exceptions import InvalidInput, NotFound
from mams.core.permissions import resolve_scope
from mams.db.database import get_db
from mams.models.military_base import MilitaryBase
from mams.services import ledger_service

router = APIRouter()


@router.get("/", response_model=List[schemas.InventoryRow])
def read_inventory(
    db: Session = Depends(get_db),
    base_id: Optional[int] = None,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    """Stock per asset at one base. Admins pick the base; everyone else sees their own."""
    scope = resolve_scope(db, identity)
    if not identity.is_admin:
        base_id = identity.base_id
    elif base_id is None:
        raise InvalidInput("base_id is required")
    scope.require(base_id)

    if db.query(MilitaryBase.id).filter(MilitaryBase.id == base_id).first() is None:
        raise NotFound(f"Base {base_id} not found")
    return ledger_service.list_inventory(db, base_id)


@router.get("/{asset_id}", response_model=schemas.StockLevel)
def read_stock(
    asset_id: int,
    db: Session = Depends(get_db),
    base_id: Optional[int] = None,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    scope = resolve_scope(db, identity)
    if not identity.is_admin:
        base_id = identity.base_id
    elif base_id is None:
        raise InvalidInput("base_id is required")
    scope.require(base_id)
    return ledger_service.get_stock(db, base_id, asset_id)
