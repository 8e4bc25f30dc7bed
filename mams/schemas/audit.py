"""Typed payloads for audit records, one variant per kind of action."""
from pydantic import BaseModel
from typing import Any, Dict, Literal, Optional, Union


class LoginDetails(BaseModel):
    kind: Literal["login"] = "login"
    username: str


class EntityDetails(BaseModel):
    kind: Literal["entity"] = "entity"
    entity: str
    entity_id: Optional[int] = None
    base_id: Optional[int] = None
    changes: Dict[str, Any] = {}


class PurchaseDetails(BaseModel):
    kind: Literal["purchase"] = "purchase"
    purchase_id: Optional[int] = None
    base_id: int
    asset_id: int
    quantity: int


class TransferDetails(BaseModel):
    kind: Literal["transfer"] = "transfer"
    request_id: Optional[int] = None
    asset_id: int
    from_base: int
    to_base: int
    quantity: int


class AssignmentDetails(BaseModel):
    kind: Literal["assignment"] = "assignment"
    assignment_id: Optional[int] = None
    base_id: int
    asset_id: int
    assignee_type: str
    assignee_id: int
    quantity: int


class RefusalDetails(BaseModel):
    kind: Literal["refused"] = "refused"
    error: str
    message: str
    base_id: Optional[int] = None


AuditDetails = Union[
    LoginDetails, EntityDetails, PurchaseDetails, TransferDetails, AssignmentDetails, RefusalDetails
]
