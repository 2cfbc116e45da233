# parking_lot/schemas/parking.py
from pydantic import BaseModel
from datetime import datetime


class VehicleRequest(BaseModel):
    license_plate: str


class ParkOut(BaseModel):
    lot_id: int
    space_number: int
    license_plate: str
    entry_time: datetime

    class Config:
        from_attributes = True


class UnparkOut(BaseModel):
    lot_id: int
    license_plate: str
    fee: int
    entry_time: datetime
    exit_time: datetime
    parking_hours: float

    class Config:
        from_attributes = True


class OccupiedSpaceOut(BaseModel):
    space_number: int
    license_plate: str
    entry_time: datetime

    class Config:
        from_attributes = True


class LotStatusOut(BaseModel):
    lot_id: int
    total_spaces: int
    occupied_count: int
    maintenance_count: int
    available_count: int
    vehicles: list[OccupiedSpaceOut]

    class Config:
        from_attributes = True
