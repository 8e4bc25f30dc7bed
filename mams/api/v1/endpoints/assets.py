# File: mams/api/v1/endpoints/assets.py
from typing import Any, List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mams import crud, schemas
from mams.api import deps
from mams.core.exceptions import InvalidInput, NotFound
from mams.db.database import get_db, transaction
from mams.models.assignment import Assignment
from mams.models.base_asset import BaseAsset
from mams.models.purchase import Purchase
from mams.models.transfer_request import TransferRequest
from mams.schemas.audit import EntityDetails
from mams.services import audit_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[schemas.Asset])
def read_assets(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    """Asset catalogue; every role needs it to file requests."""
    return crud.asset.get_multi(db, skip=skip, limit=limit)


@router.get("/{asset_id}", response_model=schemas.Asset)
def read_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    asset = crud.asset.get(db, id=asset_id)
    if not asset:
        raise NotFound(f"Asset {asset_id} not found")
    return asset


@router.post("/", response_model=schemas.Asset, status_code=status.HTTP_201_CREATED)
def create_asset(
    *,
    db: Session = Depends(get_db),
    asset_in: schemas.AssetCreate,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    with transaction(db):
        if asset_in.serial_number and crud.asset.get_by_serial(db, serial_number=asset_in.serial_number):
            raise InvalidInput(f"Serial number '{asset_in.serial_number}' is already registered")
        asset = crud.asset.create(db, obj_in=asset_in)
        details = EntityDetails(entity="asset", entity_id=asset.id, changes=asset_in.model_dump())

    logger.info(f"Asset {details.entity_id} created by admin {identity.id}")
    audit_service.record(db, identity, "create_asset", "assets", details)
    return asset


@router.put("/{asset_id}", response_model=schemas.Asset)
def update_asset(
    *,
    db: Session = Depends(get_db),
    asset_id: int,
    asset_in: schemas.AssetUpdate,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> Any:
    changes = asset_in.model_dump(exclude_unset=True)
    with transaction(db):
        asset = crud.asset.get(db, id=asset_id)
        if not asset:
            raise NotFound(f"Asset {asset_id} not found")
        if asset_in.serial_number and crud.asset.get_by_serial(
            db, serial_number=asset_in.serial_number, exclude_id=asset_id
        ):
            raise InvalidInput(f"Serial number '{asset_in.serial_number}' is already registered")
        asset = crud.asset.update(db, db_obj=asset, obj_in=changes)

    audit_service.record(
        db, identity, "update_asset", "assets",
        EntityDetails(entity="asset", entity_id=asset_id, changes=changes),
    )
    return asset


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(
    *,
    db: Session = Depends(get_db),
    asset_id: int,
    identity: schemas.Identity = Depends(deps.get_current_admin),
) -> None:
    with transaction(db):
        asset = crud.asset.get(db, id=asset_id)
        if not asset:
            raise NotFound(f"Asset {asset_id} not found")

        stocked = db.query(BaseAsset.id).filter(
            BaseAsset.asset_id == asset_id,
            (BaseAsset.available_qty + BaseAsset.assigned_qty) > 0,
        ).first()
        if stocked:
            raise InvalidInput("Asset still has stock at one or more bases")
        if db.query(Assignment.id).filter(Assignment.asset_id == asset_id).first():
            raise InvalidInput("Asset still has open assignments")
        referenced = (
            db.query(Purchase.id).filter(Purchase.asset_id == asset_id).first()
            or db.query(TransferRequest.id).filter(TransferRequest.asset_id == asset_id).first()
        )
        if referenced:
            raise InvalidInput("Asset is referenced by purchase or transfer history")

        # Empty ledger rows go with the asset
        db.query(BaseAsset).filter(BaseAsset.asset_id == asset_id).delete(synchronize_session=False)
        crud.asset.remove(db, id=asset_id)

    logger.info(f"Asset {asset_id} deleted by admin {identity.id}")
    audit_service.record(db, identity, "delete_asset", "assets", EntityDetails(entity="asset", entity_id=asset_id))
