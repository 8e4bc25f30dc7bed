# File: mams/api/v1/endpoints/assignments.py
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mams import schemas
from mams.api import deps
from mams.db.database import get_db
from mams.schemas.audit import AssignmentDetails
from mams.services import assignment_service

router = APIRouter()


@router.get("/", response_model=List[schemas.Assignment])
def read_assignments(
    db: Session = Depends(get_db),
    base_id: Optional[int] = None,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    assignments = assignment_service.list_assignments(db, identity, base_id=base_id)
    return [schemas.Assignment.from_model(a) for a in assignments]


@router.post("/", response_model=schemas.Assignment, status_code=status.HTTP_201_CREATED)
def assign_asset(
    *,
    db: Session = Depends(get_db),
    assignment_in: schemas.AssignmentCreate,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    assignment = assignment_service.assign(
        db,
        identity,
        base_id=assignment_in.base_id,
        asset_id=assignment_in.asset_id,
        assignee=assignment_in.assignee,
        quantity=assignment_in.quantity,
    )
    return schemas.Assignment.from_model(assignment)


@router.post("/return", response_model=AssignmentDetails)
def return_assignment(
    *,
    db: Session = Depends(get_db),
    return_in: schemas.AssignmentReturn,
    identity: schemas.Identity = Depends(deps.get_current_identity),
) -> Any:
    """Move the assigned quantity back to available stock and close the assignment."""
    return assignment_service.return_assignment(db, identity, return_in.assignment_id)
