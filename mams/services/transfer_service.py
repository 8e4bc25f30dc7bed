"""
Transfer workflow between bases: requested -> completed | rejected.

A commander files a request to pull stock into their own base; the commander
of the source base (or an admin) reviews it. Completion debits the source,
credits the destination and flips the status in one transaction.
"""
from typing import List, Optional
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from mams.core.exceptions import AlreadyProcessed, Forbidden, InvalidInput, NotFound, WorkflowError
from mams.core.permissions import require_role, resolve_scope
from mams.db.database import transaction
from mams.models.asset import Asset
from mams.models.military_base import MilitaryBase
from mams.models.transfer_request import TransferRequest, TransferStatus
from mams.models.user import UserRole
from mams.schemas.audit import TransferDetails
from mams.schemas.auth import Identity
from mams.services import audit_service, ledger_service

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"


def _base_exists(db: Session, base_id: Optional[int]) -> bool:
    if base_id is None:
        return False
    return db.query(MilitaryBase.id).filter(MilitaryBase.id == base_id).first() is not None


def request_transfer(
    db: Session,
    identity: Identity,
    from_base: int,
    asset_id: int,
    quantity,
    to_base: Optional[int] = None,
) -> TransferRequest:
    try:
        with transaction(db):
            scope = resolve_scope(db, identity)
            require_role(identity, UserRole.ADMIN, UserRole.COMMANDER)

            if identity.role == UserRole.COMMANDER:
                to_base = identity.base_id
            elif to_base is None:
                raise InvalidInput("Destination base is required")
            scope.require(to_base)

            quantity = ledger_service.require_positive_quantity(quantity)

            if not _base_exists(db, from_base):
                raise NotFound(f"Source base {from_base} not found")
            if not _base_exists(db, to_base):
                raise NotFound(f"Destination base {to_base} not found")
            if from_base == to_base:
                raise InvalidInput("Source and destination bases must differ")
            if db.query(Asset.id).filter(Asset.id == asset_id).first() is None:
                raise NotFound(f"Asset {asset_id} not found")

            transfer = TransferRequest(
                asset_id=asset_id,
                from_base=from_base,
                to_base=to_base,
                quantity=quantity,
                status=TransferStatus.REQUESTED,
                requested_by=identity.id,
            )
            db.add(transfer)
            db.flush()
            details = TransferDetails(
                request_id=transfer.id,
                asset_id=asset_id,
                from_base=from_base,
                to_base=to_base,
                quantity=quantity,
            )
    except WorkflowError as e:
        audit_service.record_refusal(db, identity, "request_transfer", "transfer_requests", e, base_id=to_base)
        raise

    logger.info(
        f"Transfer {details.request_id} requested by user {identity.id}: "
        f"{quantity} x asset {asset_id} from base {from_base} to base {to_base}"
    )
    audit_service.record(db, identity, "request_transfer", "transfer_requests", details)
    return transfer


def review_transfer(db: Session, identity: Identity, request_id: int, decision: str) -> TransferRequest:
    try:
        with transaction(db):
            resolve_scope(db, identity)
            require_role(identity, UserRole.ADMIN, UserRole.COMMANDER)
            if decision not in (APPROVE, REJECT):
                raise InvalidInput("Decision must be 'approve' or 'reject'")

            transfer = (
                db.query(TransferRequest)
                .filter(TransferRequest.id == request_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if transfer is None:
                raise NotFound(f"Transfer request {request_id} not found")

            # Only the source base's commander (or an admin) releases its stock
            if not identity.is_admin and transfer.from_base != identity.base_id:
                raise Forbidden("You cannot review transfers that are not from your base")

            if transfer.status != TransferStatus.REQUESTED:
                raise AlreadyProcessed("Transfer request", request_id, transfer.status.value)

            new_status = TransferStatus.COMPLETED if decision == APPROVE else TransferStatus.REJECTED
            claimed = (
                db.query(TransferRequest)
                .filter(TransferRequest.id == request_id, TransferRequest.status == TransferStatus.REQUESTED)
                .update(
                    {TransferRequest.status: new_status, TransferRequest.approved_by: identity.id},
                    synchronize_session=False,
                )
            )
            if not claimed:
                db.refresh(transfer)
                raise AlreadyProcessed("Transfer request", request_id, transfer.status.value)
            set_committed_value(transfer, "status", new_status)
            set_committed_value(transfer, "approved_by", identity.id)

            if decision == APPROVE:
                # Stock may have moved since the request was filed; the debit re-checks it
                ledger_service.apply_adjustments(
                    db,
                    [
                        (transfer.from_base, transfer.asset_id, -transfer.quantity, 0),
                        (transfer.to_base, transfer.asset_id, transfer.quantity, 0),
                    ],
                )

            details = TransferDetails(
                request_id=transfer.id,
                asset_id=transfer.asset_id,
                from_base=transfer.from_base,
                to_base=transfer.to_base,
                quantity=transfer.quantity,
            )
    except WorkflowError as e:
        audit_service.record_refusal(db, identity, "review_transfer", f"transfer_request:{request_id}", e)
        raise

    action = "approve_transfer" if decision == APPROVE else "reject_transfer"
    logger.info(f"Transfer {request_id} {new_status.value} by user {identity.id}")
    audit_service.record(db, identity, action, "transfer_requests", details)

    return transfer


def list_transfers(db: Session, identity: Identity, status: Optional[TransferStatus] = None) -> List[TransferRequest]:
    scope = resolve_scope(db, identity)
    query = db.query(TransferRequest)
    if not scope.all_bases:
        query = query.filter(
            or_(TransferRequest.from_base.in_(scope.base_ids), TransferRequest.to_base.in_(scope.base_ids))
        )
    if status is not None:
        query = query.filter(TransferRequest.status == status)
    return query.order_by(TransferRequest.id.desc()).all()


def get_transfer(db: Session, identity: Identity, request_id: int) -> TransferRequest:
    scope = resolve_scope(db, identity)
    transfer = db.query(TransferRequest).filter(TransferRequest.id == request_id).first()
    if transfer is None or not (scope.includes(transfer.from_base) or scope.includes(transfer.to_base)):
        raise NotFound(f"Transfer request {request_id} not found")
    return transfer
