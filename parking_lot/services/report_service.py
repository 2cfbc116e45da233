# parking_lot/services/report_service.py
"""
Daily usage report, derived from completed parking transactions.
Grouped by the calendar date of exit_time: a stay across midnight
counts entirely toward the exit day. Hours are raw fractional hours,
not the rounded billing hours.
"""

from dataclasses import dataclass
from datetime import date
from sqlalchemy import extract, func
from sqlalchemy.orm import Session
from parking_lot.database import unit_of_work
from parking_lot.models.parking_transaction import ParkingTransaction
from parking_lot.services.lot_registry import find_lot


@dataclass
class DailyStats:
    day: date
    total_vehicles: int
    total_parking_hours: float
    total_fee: int


def _parking_hours(dialect_name: str):
    if dialect_name == "sqlite":
        return (func.julianday(ParkingTransaction.exit_time)
                - func.julianday(ParkingTransaction.entry_time)) * 24
    return extract("epoch", ParkingTransaction.exit_time - ParkingTransaction.entry_time) / 3600


def daily_report(db: Session, lot_id: int) -> list[DailyStats]:
    with unit_of_work(db):
        find_lot(db, lot_id)
        day = func.date(ParkingTransaction.exit_time).label("day")
        hours = _parking_hours(db.get_bind().dialect.name)
        rows = (
            db.query(
                day,
                func.count(ParkingTransaction.id),
                func.coalesce(func.sum(hours), 0),
                func.coalesce(func.sum(ParkingTransaction.fee), 0),
            )
            .filter(ParkingTransaction.lot_id == lot_id)
            .group_by(day)
            .order_by(day)
            .all()
        )

    return [
        DailyStats(
            day=d if isinstance(d, date) else date.fromisoformat(d),
            total_vehicles=int(count),
            total_parking_hours=float(total_hours),
            total_fee=int(total_fee),
        )
        for d, count, total_hours, total_fee in rows
    ]
