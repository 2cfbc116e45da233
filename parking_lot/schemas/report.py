# parking_lot/schemas/report.py
from pydantic import BaseModel
from datetime import date


class DailyStatsOut(BaseModel):
    day: date
    total_vehicles: int
    total_parking_hours: float
    total_fee: int

    class Config:
        from_attributes = True
