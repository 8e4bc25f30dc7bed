from .base import BaseModel
from .military_base import MilitaryBase
from .user import User, UserRole
from .asset import Asset
from .base_asset import BaseAsset
from .purchase import Purchase, PurchaseStatus
from .transfer_request import TransferRequest, TransferStatus
from .personnel import Personnel
from .assignment import Assignment, AssigneeType
from .audit_log import AuditLog

__all__ = [
    "BaseModel", "MilitaryBase", "User", "UserRole", "Asset", "BaseAsset",
    "Purchase", "PurchaseStatus", "TransferRequest", "TransferStatus",
    "Personnel", "Assignment", "AssigneeType", "AuditLog",
]
