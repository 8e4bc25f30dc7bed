from pydantic import BaseModel
from typing import Optional, Union
from datetime import datetime
from mams.models.purchase import PurchaseStatus


class PurchaseCreate(BaseModel):
    base_id: int
    asset_id: int
    # Validated by the workflow so non-integers surface as invalid_input
    quantity: Union[int, float]


class PurchaseDecision(BaseModel):
    approve: bool


class Purchase(BaseModel):
    id: int
    base_id: int
    asset_id: int
    quantity: int
    status: PurchaseStatus
    created_by: Optional[int] = None
    approved_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
