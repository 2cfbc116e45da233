# parking_lot/routers/reports.py
"""Daily usage statistics."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_lot.database import get_db
from parking_lot.schemas.report import DailyStatsOut
from parking_lot.services.report_service import daily_report

router = APIRouter()


@router.get("/lots/{lot_id}/reports/daily", response_model=list[DailyStatsOut], summary="Per-day totals")
def get_daily_report(lot_id: int, db: Session = Depends(get_db)):
    """Vehicles, raw parking hours and fees per exit date, oldest first."""
    return daily_report(db, lot_id)
