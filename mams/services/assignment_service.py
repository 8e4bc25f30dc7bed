"""
Assignment workflow: move stock from available to assigned at a base, and back.
"""
from typing import List, Optional, Union
import logging

from sqlalchemy.orm import Session

from mams.core.exceptions import InvalidAssignee, InvalidInput, NotFound, WorkflowError
from mams.core.permissions import require_role, resolve_scope
from mams.db.database import transaction
from mams.models.asset import Asset
from mams.models.assignment import AssigneeType, Assignment
from mams.models.military_base import MilitaryBase
from mams.models.personnel import Personnel
from mams.models.user import User, UserRole
from mams.schemas.assignment import PersonnelAssignee, UserAssignee
from mams.schemas.audit import AssignmentDetails
from mams.schemas.auth import Identity
from mams.services import audit_service, ledger_service

logger = logging.getLogger(__name__)


def _check_assignee(db: Session, base_id: int, assignee: Union[UserAssignee, PersonnelAssignee]) -> None:
    if isinstance(assignee, PersonnelAssignee):
        person = (
            db.query(Personnel)
            .filter(Personnel.id == assignee.id)
            .with_for_update(read=True)
            .populate_existing()
            .first()
        )
        if person is None:
            raise InvalidAssignee(f"Personnel {assignee.id} not found")
        if person.base_id != base_id:
            raise InvalidAssignee(f"Personnel {assignee.id} does not belong to base {base_id}")
        if not person.is_active:
            raise InvalidAssignee(f"Personnel {assignee.id} is not active")
        return

    user = (
        db.query(User)
        .filter(User.id == assignee.id)
        .with_for_update(read=True)
        .populate_existing()
        .first()
    )
    if user is None:
        raise InvalidAssignee(f"User {assignee.id} not found")
    if user.base_id != base_id:
        raise InvalidAssignee(f"User {assignee.id} does not belong to base {base_id}")
    if not user.is_active:
        raise InvalidAssignee(f"User {assignee.id} is not active")


def assign(
    db: Session,
    identity: Identity,
    base_id: Optional[int],
    asset_id: int,
    assignee: Union[UserAssignee, PersonnelAssignee],
    quantity,
) -> Assignment:
    if base_id is None and identity.role != UserRole.ADMIN:
        base_id = identity.base_id

    try:
        with transaction(db):
            scope = resolve_scope(db, identity)
            require_role(identity, UserRole.ADMIN, UserRole.COMMANDER)
            if base_id is None:
                raise InvalidInput("Base is required")
            scope.require(base_id)

            quantity = ledger_service.require_positive_quantity(quantity)

            if db.query(MilitaryBase.id).filter(MilitaryBase.id == base_id).first() is None:
                raise NotFound(f"Base {base_id} not found")
            if db.query(Asset.id).filter(Asset.id == asset_id).first() is None:
                raise NotFound(f"Asset {asset_id} not found")

            _check_assignee(db, base_id, assignee)

            ledger_service.adjust(db, base_id, asset_id, delta_available=-quantity, delta_assigned=quantity)

            is_user = isinstance(assignee, UserAssignee)
            assignment = Assignment(
                base_id=base_id,
                asset_id=asset_id,
                assignee_type=AssigneeType.USER if is_user else AssigneeType.PERSONNEL,
                assignee_user_id=assignee.id if is_user else None,
                assignee_personnel_id=None if is_user else assignee.id,
                quantity=quantity,
                assigned_by=identity.id,
            )
            db.add(assignment)
            db.flush()
            details = AssignmentDetails(
                assignment_id=assignment.id,
                base_id=base_id,
                asset_id=asset_id,
                assignee_type=assignee.type,
                assignee_id=assignee.id,
                quantity=quantity,
            )
    except WorkflowError as e:
        audit_service.record_refusal(db, identity, "assign_asset", "assignments", e, base_id=base_id)
        raise

    logger.info(
        f"Assignment {details.assignment_id}: {quantity} x asset {asset_id} at base {base_id} "
        f"to {assignee.type} {assignee.id} by user {identity.id}"
    )
    audit_service.record(db, identity, "assign_asset", "assignments", details)
    return assignment


def return_assignment(db: Session, identity: Identity, assignment_id: int) -> AssignmentDetails:
    try:
        with transaction(db):
            scope = resolve_scope(db, identity)
            require_role(identity, UserRole.ADMIN, UserRole.COMMANDER)

            assignment = (
                db.query(Assignment)
                .filter(Assignment.id == assignment_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if assignment is None:
                raise NotFound(f"Assignment {assignment_id} not found")
            scope.require_visible(assignment.base_id, "Assignment", assignment_id)

            details = AssignmentDetails(
                assignment_id=assignment.id,
                base_id=assignment.base_id,
                asset_id=assignment.asset_id,
                assignee_type=assignment.assignee_type.value,
                assignee_id=assignment.assignee_id,
                quantity=assignment.quantity,
            )

            # Deleting the row is the gate: a second concurrent return deletes nothing
            deleted = (
                db.query(Assignment)
                .filter(Assignment.id == assignment_id)
                .delete(synchronize_session=False)
            )
            if not deleted:
                raise NotFound(f"Assignment {assignment_id} not found")

            ledger_service.adjust(
                db,
                details.base_id,
                details.asset_id,
                delta_available=details.quantity,
                delta_assigned=-details.quantity,
            )
    except WorkflowError as e:
        audit_service.record_refusal(db, identity, "return_asset", f"assignment:{assignment_id}", e)
        raise

    logger.info(f"Assignment {assignment_id} returned by user {identity.id}")
    audit_service.record(db, identity, "return_asset", "assignments", details)
    return details


def list_assignments(db: Session, identity: Identity, base_id: Optional[int] = None) -> List[Assignment]:
    scope = resolve_scope(db, identity)
    query = scope.restrict(db.query(Assignment), Assignment.base_id)
    if base_id is not None:
        scope.require(base_id)
        query = query.filter(Assignment.base_id == base_id)
    return query.order_by(Assignment.id.desc()).all()
