from typing import Optional
from pydantic import BaseModel


class StockLevel(BaseModel):
    available: int = 0
    assigned: int = 0

    @property
    def total(self) -> int:
        return self.available + self.assigned


class InventoryRow(BaseModel):
    base_id: int
    asset_id: int
    asset_name: str
    serial_number: Optional[str] = None
    available_qty: int
    assigned_qty: int
