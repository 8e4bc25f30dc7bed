"""
Purchase workflow: pending -> approved | rejected.

Approval credits the requesting base's available stock exactly once; the
status change and the ledger credit commit together or not at all.
"""
from typing import List, Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from mams.core.exceptions import AlreadyProcessed, NotFound, WorkflowError
from mams.core.permissions import require_role, resolve_scope
from mams.db.database import transaction
from mams.models.asset import Asset
from mams.models.military_base import MilitaryBase
from mams.models.purchase import Purchase, PurchaseStatus
from mams.models.user import UserRole
from mams.schemas.audit import PurchaseDetails
from mams.schemas.auth import Identity
from mams.services import audit_service, ledger_service

logger = logging.getLogger(__name__)


def request_purchase(db: Session, identity: Identity, base_id: int, asset_id: int, quantity) -> Purchase:
    try:
        with transaction(db):
            scope = resolve_scope(db, identity)
            require_role(identity, UserRole.ADMIN, UserRole.COMMANDER)
            scope.require(base_id)
            quantity = ledger_service.require_positive_quantity(quantity)

            if db.query(MilitaryBase.id).filter(MilitaryBase.id == base_id).first() is None:
                raise NotFound(f"Base {base_id} not found")
            if db.query(Asset.id).filter(Asset.id == asset_id).first() is None:
                raise NotFound(f"Asset {asset_id} not found")

            purchase = Purchase(
                base_id=base_id,
                asset_id=asset_id,
                quantity=quantity,
                status=PurchaseStatus.PENDING,
                created_by=identity.id,
            )
            db.add(purchase)
            db.flush()
            purchase_id = purchase.id
    except WorkflowError as e:
        audit_service.record_refusal(db, identity, "request_purchase", "purchases", e, base_id=base_id)
        raise

    logger.info(f"Purchase {purchase_id} requested by user {identity.id}: {quantity} x asset {asset_id} for base {base_id}")
    audit_service.record(
        db, identity, "request_purchase", "purchases",
        PurchaseDetails(purchase_id=purchase_id, base_id=base_id, asset_id=asset_id, quantity=quantity),
    )
    return purchase


def decide_purchase(db: Session, identity: Identity, purchase_id: int, approve: bool) -> Purchase:
    try:
        with transaction(db):
            resolve_scope(db, identity)
            require_role(identity, UserRole.ADMIN)

            purchase = (
                db.query(Purchase)
                .filter(Purchase.id == purchase_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if purchase is None:
                raise NotFound(f"Purchase {purchase_id} not found")
            if purchase.status != PurchaseStatus.PENDING:
                raise AlreadyProcessed("Purchase", purchase_id, purchase.status.value)

            new_status = PurchaseStatus.APPROVED if approve else PurchaseStatus.REJECTED

            # The pending -> terminal flip is the single-writer gate
            claimed = (
                db.query(Purchase)
                .filter(Purchase.id == purchase_id, Purchase.status == PurchaseStatus.PENDING)
                .update({Purchase.status: new_status, Purchase.approved_by: identity.id}, synchronize_session=False)
            )
            if not claimed:
                db.refresh(purchase)
                raise AlreadyProcessed("Purchase", purchase_id, purchase.status.value)
            set_committed_value(purchase, "status", new_status)
            set_committed_value(purchase, "approved_by", identity.id)

            if approve:
                ledger_service.adjust(db, purchase.base_id, purchase.asset_id, delta_available=purchase.quantity)

            details = PurchaseDetails(
                purchase_id=purchase.id,
                base_id=purchase.base_id,
                asset_id=purchase.asset_id,
                quantity=purchase.quantity,
            )
    except WorkflowError as e:
        audit_service.record_refusal(db, identity, "decide_purchase", f"purchase:{purchase_id}", e)
        raise

    action = "approve_purchase" if approve else "reject_purchase"
    logger.info(f"Purchase {purchase_id} {new_status.value} by user {identity.id}")
    audit_service.record(db, identity, action, f"base:{details.base_id}", details)

    return purchase


def list_purchases(db: Session, identity: Identity, status: Optional[PurchaseStatus] = None) -> List[Purchase]:
    scope = resolve_scope(db, identity)
    query = scope.restrict(db.query(Purchase), Purchase.base_id)
    if status is not None:
        query = query.filter(Purchase.status == status)
    return query.order_by(Purchase.id.desc()).all()


def get_purchase(db: Session, identity: Identity, purchase_id: int) -> Purchase:
    scope = resolve_scope(db, identity)
    purchase = db.query(Purchase).filter(Purchase.id == purchase_id).first()
    if purchase is None:
        raise NotFound(f"Purchase {purchase_id} not found")
    scope.require_visible(purchase.base_id, "Purchase", purchase_id)
    return purchase
