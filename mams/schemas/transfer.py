from pydantic import BaseModel
from typing import Literal, Optional, Union
from datetime import datetime
from mams.models.transfer_request import TransferStatus


class TransferCreate(BaseModel):
    from_base: int
    asset_id: int
    quantity: Union[int, float]
    # Ignored for commanders, whose own base is always the destination
    to_base: Optional[int] = None


class TransferReview(BaseModel):
    decision: Literal["approve", "reject"]


class TransferRequest(BaseModel):
    id: int
    asset_id: int
    from_base: int
    to_base: int
    quantity: int
    status: TransferStatus
    requested_by: Optional[int] = None
    approved_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
