# File: mams/api/v1/endpoints/transfers.py
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mams import schemas
from mams.api import deps
from mams.db.database import get_db
from mams.models.transfer_request import TransferStatus
from mams.services import transfer_service

router = APIRouter()


@router.get("/", response_model=List[schemas.TransferRequest])
def read_transfers(
    db: Session = Depends(get_db),
    status: Optional[TransferStatus] = None,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    """Requests into or out of the caller's bases."""
    return transfer_service.list_transfers(db, identity, status=status)


@router.get("/{request_id}", response_model=schemas.TransferRequest)
def read_transfer(
    request_id: int,
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return transfer_service.get_transfer(db, identity, request_id)


@router.post("/", response_model=schemas.TransferRequest, status_code=status.HTTP_201_CREATED)
def request_transfer(
    *,
    db: Session = Depends(get_db),
    transfer_in: schemas.TransferCreate,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return transfer_service.request_transfer(
        db,
        identity,
        from_base=transfer_in.from_base,
        asset_id=transfer_in.asset_id,
        quantity=transfer_in.quantity,
        to_base=transfer_in.to_base,
    )


@router.post("/{request_id}/review", response_model=schemas.TransferRequest)
def review_transfer(
    *,
    db: Session = Depends(get_db),
    request_id: int,
    review: schemas.TransferReview,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    return transfer_service.review_transfer(db, identity, request_id, review.decision)
