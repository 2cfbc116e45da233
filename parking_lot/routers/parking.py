# parking_lot/routers/parking.py
"""Park / unpark / live status endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from parking_lot.database import get_db
from parking_lot.schemas.parking import VehicleRequest, ParkOut, UnparkOut, LotStatusOut
from parking_lot.services.lot_locks import LotLockRegistry, get_lot_locks
from parking_lot.services.occupancy_ledger import close_occupancy, lot_status
from parking_lot.services.space_allocator import allocate_space

router = APIRouter()


@router.post("/lots/{lot_id}/park", response_model=ParkOut, summary="Park a vehicle in the nearest free space")
def park_vehicle(
    lot_id: int,
    body: VehicleRequest,
    db: Session = Depends(get_db),
    locks: LotLockRegistry = Depends(get_lot_locks),
):
    return allocate_space(db, locks, lot_id, body.license_plate)


@router.post("/lots/{lot_id}/unpark", response_model=UnparkOut, summary="Unpark a vehicle and charge the fee")
def unpark_vehicle(
    lot_id: int,
    body: VehicleRequest,
    request: Request,
    db: Session = Depends(get_db),
    locks: LotLockRegistry = Depends(get_lot_locks),
):
    """Fee = started hours × hourly rate, minimum one hour."""
    return close_occupancy(db, locks, lot_id, body.license_plate,
                           hourly_rate=request.app.state.settings.HOURLY_RATE)


@router.get("/lots/{lot_id}/status", response_model=LotStatusOut, summary="Currently parked vehicles")
def view_lot_status(lot_id: int, db: Session = Depends(get_db)):
    return lot_status(db, lot_id)
