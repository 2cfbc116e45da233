# parking_lot/routers/lots.py
"""Lot provisioning and lookup endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from parking_lot.database import get_db
from parking_lot.schemas.lot import LotCreate, LotOut
from parking_lot.services.lot_registry import create_lot, get_lot

router = APIRouter()


@router.post("/lots", response_model=LotOut, status_code=201, summary="Create a parking lot")
def create_parking_lot(body: LotCreate, request: Request, db: Session = Depends(get_db)):
    """Creates a lot with `total_spaces` free spaces numbered 1..N."""
    return create_lot(db, body.total_spaces, max_spaces=request.app.state.settings.MAX_LOT_SPACES)


@router.get("/lots/{lot_id}", response_model=LotOut, summary="Get a lot with all spaces")
def read_parking_lot(lot_id: int, db: Session = Depends(get_db)):
    return get_lot(db, lot_id)
