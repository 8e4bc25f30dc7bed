# File: mams/api/v1/endpoints/purchases.py
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mams import schemas
from mams.api import deps
from mams.db.database import get_db
from mams.models.purchase import PurchaseStatus
from mams.services import purchase_service

router = APIRouter()


@router.get("/", response_model=List[schemas.Purchase])
def read_purchases(
    db: Session = Depends(get_db),
    status: Optional[PurchaseStatus] = None,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return purchase_service.list_purchases(db, identity, status=status)


@router.get("/{purchase_id}", response_model=schemas.Purchase)
def read_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return purchase_service.get_purchase(db, identity, purchase_id)


@router.post("/", response_model=schemas.Purchase, status_code=status.HTTP_201_CREATED)
def request_purchase(
    *,
    db: Session = Depends(get_db),
    purchase_in: schemas.PurchaseCreate,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return purchase_service.request_purchase(
        db, identity, purchase_in.base_id, purchase_in.asset_id, purchase_in.quantity
    )


@router.post("/{purchase_id}/decision", response_model=schemas.Purchase)
def decide_purchase(
    *,
    db: Session = Depends(get_db),
    purchase_id: int,
    decision: schemas.PurchaseDecision,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return purchase_service.decide_purchase(db, identity, purchase_id, decision.approve)
