"""Best-effort audit trail. A failed write is logged and never reaches the caller."""
from typing import Optional
import logging

from sqlalchemy.orm import Session

from mams.core.exceptions import WorkflowError
from mams.models.audit_log import AuditLog
from mams.schemas.audit import AuditDetails, RefusalDetails
from mams.schemas.auth import Identity

logger = logging.getLogger(__name__)


def record(
    db: Session,
    identity: Optional[Identity],
    action: str,
    target: str,
    details: Optional[AuditDetails] = None,
) -> None:
    """Write one audit row in its own session so it never joins the caller's transaction."""
    audit_db = Session(bind=db.get_bind())
    try:
        audit_db.add(
            AuditLog(
                user_id=identity.id if identity else None,
                role=identity.role.value if identity else None,
                action=action,
                target=target,
                details=details.model_dump(mode="json") if details is not None else None,
            )
        )
        audit_db.commit()
    except Exception as e:
        audit_db.rollback()
        logger.error(f"Failed to write audit record {action} on {target}: {e}")
    finally:
        audit_db.close()


def record_refusal(
    db: Session,
    identity: Identity,
    action: str,
    target: str,
    error: WorkflowError,
    base_id: Optional[int] = None,
) -> None:
    logger.warning(f"{action} refused for user {identity.id}: {error.kind}: {error.message}")
    record(
        db,
        identity,
        f"{action}_refused",
        target,
        RefusalDetails(error=error.kind, message=error.message, base_id=base_id),
    )
