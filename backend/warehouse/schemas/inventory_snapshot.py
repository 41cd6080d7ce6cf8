from datetime import datetime

from pydantic import BaseModel


class InventorySnapshotResponse(BaseModel):
    id: int
    product_id: int
    year: int
    month: int
    opening_quantity: int
    stock_in_quantity: int
    stock_out_quantity: int
    closing_quantity: int
    computed_at: datetime

    class Config:
        from_attributes = True
