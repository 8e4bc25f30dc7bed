"""
Per-(base, asset) stock ledger.

All quantity changes go through ``adjust``/``apply_adjustments``. Each change
is a single conditional UPDATE, so the non-negativity check and the write
happen under the same row lock; callers wrap them in ``transaction(db)``.
"""
from typing import Iterable, List, Tuple
import logging
import numbers

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from mams.core.exceptions import InsufficientStock, InvalidInput
from mams.models.asset import Asset
from mams.models.base_asset import BaseAsset
from mams.schemas.inventory import InventoryRow, StockLevel

logger = logging.getLogger(__name__)

Adjustment = Tuple[int, int, int, int]  # base_id, asset_id, delta_available, delta_assigned


def require_positive_quantity(quantity) -> int:
    """Accept positive integers (including integral floats such as 5.0)."""
    if isinstance(quantity, bool) or not isinstance(quantity, numbers.Real):
        raise InvalidInput("Quantity must be a positive integer")
    if isinstance(quantity, float):
        if not quantity.is_integer():
            raise InvalidInput("Quantity must be a positive integer")
        quantity = int(quantity)
    if quantity <= 0:
        raise InvalidInput("Quantity must be a positive integer")
    return int(quantity)


def get_stock(db: Session, base_id: int, asset_id: int, *, for_update: bool = False) -> StockLevel:
    query = db.query(BaseAsset).filter(BaseAsset.base_id == base_id, BaseAsset.asset_id == asset_id)
    if for_update:
        query = query.with_for_update()
    row = query.first()
    if row is None:
        return StockLevel()
    return StockLevel(available=row.available_qty, assigned=row.assigned_qty)


def _row_exists(db: Session, base_id: int, asset_id: int) -> bool:
    return db.query(BaseAsset.id).filter(
        BaseAsset.base_id == base_id, BaseAsset.asset_id == asset_id
    ).first() is not None


def _ensure_row(db: Session, base_id: int, asset_id: int) -> None:
    """Create an empty ledger row, tolerating a concurrent insert of the same key."""
    if _row_exists(db, base_id, asset_id):
        return

    values = {"base_id": base_id, "asset_id": asset_id, "available_qty": 0, "assigned_qty": 0}
    dialect = db.get_bind().dialect.name

    if dialect == "postgresql":
        stmt = pg_insert(BaseAsset).values(**values).on_conflict_do_nothing(
            index_elements=["base_id", "asset_id"]
        )
    elif dialect == "sqlite":
        stmt = sqlite_insert(BaseAsset).values(**values).on_conflict_do_nothing(
            index_elements=["base_id", "asset_id"]
        )
    else:
        db.add(BaseAsset(**values))
        db.flush()
        return

    db.execute(stmt)


def adjust(db: Session, base_id: int, asset_id: int, delta_available: int = 0, delta_assigned: int = 0) -> None:
    """
    Shift stock at one (base, asset) pair.

    Raises InsufficientStock if either quantity would drop below zero. A missing
    row is created only when both deltas are non-negative.
    """
    if delta_available >= 0 and delta_assigned >= 0:
        _ensure_row(db, base_id, asset_id)

    updated = (
        db.query(BaseAsset)
        .filter(
            BaseAsset.base_id == base_id,
            BaseAsset.asset_id == asset_id,
            BaseAsset.available_qty + delta_available >= 0,
            BaseAsset.assigned_qty + delta_assigned >= 0,
        )
        .update(
            {
                BaseAsset.available_qty: BaseAsset.available_qty + delta_available,
                BaseAsset.assigned_qty: BaseAsset.assigned_qty + delta_assigned,
            },
            synchronize_session=False,
        )
    )

    if not updated:
        stock = get_stock(db, base_id, asset_id)
        logger.warning(
            f"Ledger refused adjustment base={base_id} asset={asset_id} "
            f"delta=({delta_available}, {delta_assigned}) stock=({stock.available}, {stock.assigned})"
        )
        raise InsufficientStock(
            base_id,
            asset_id,
            f"Insufficient stock of asset {asset_id} at base {base_id}: "
            f"{stock.available} available, {stock.assigned} assigned",
        )

    logger.debug(f"Ledger adjusted base={base_id} asset={asset_id} delta=({delta_available}, {delta_assigned})")


def apply_adjustments(db: Session, adjustments: Iterable[Adjustment]) -> None:
    """Apply several adjustments in (base_id, asset_id) order to keep lock order consistent."""
    for base_id, asset_id, delta_available, delta_assigned in sorted(adjustments, key=lambda a: (a[0], a[1])):
        adjust(db, base_id, asset_id, delta_available, delta_assigned)


def list_inventory(db: Session, base_id: int) -> List[InventoryRow]:
    rows = (
        db.query(BaseAsset, Asset)
        .join(Asset, BaseAsset.asset_id == Asset.id)
        .filter(BaseAsset.base_id == base_id)
        .order_by(Asset.name, Asset.id)
        .all()
    )
    return [
        InventoryRow(
            base_id=ledger.base_id,
            asset_id=asset.id,
            asset_name=asset.name,
            serial_number=asset.serial_number,
            available_qty=ledger.available_qty,
            assigned_qty=ledger.assigned_qty,
        )
        for ledger, asset in rows
    ]
