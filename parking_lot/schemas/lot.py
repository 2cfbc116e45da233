# parking_lot/schemas/lot.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class LotCreate(BaseModel):
    total_spaces: int = Field(..., description="Number of spaces, numbered 1..N")


class SpaceOut(BaseModel):
    number: int
    occupied: bool
    in_maintenance: bool
    entry_time: Optional[datetime]

    class Config:
        from_attributes = True


class LotOut(BaseModel):
    id: int
    total_spaces: int
    created_at: datetime
    spaces: list[SpaceOut]

    class Config:
        from_attributes = True


class MaintenanceUpdate(BaseModel):
    in_maintenance: bool


class MaintenanceOut(BaseModel):
    lot_id: int
    space_number: int
    in_maintenance: bool
    occupied: bool
    message: str = "Maintenance mode updated"
