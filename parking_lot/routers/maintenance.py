# parking_lot/routers/maintenance.py
"""Space maintenance toggle."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_lot.database import get_db
from parking_lot.schemas.lot import MaintenanceUpdate, MaintenanceOut
from parking_lot.services.lot_locks import LotLockRegistry, get_lot_locks
from parking_lot.services.maintenance_service import set_maintenance

router = APIRouter()


@router.put(
    "/lots/{lot_id}/spaces/{space_number}/maintenance",
    response_model=MaintenanceOut,
    summary="Put a space into or out of maintenance",
)
def toggle_maintenance(
    lot_id: int,
    space_number: int,
    body: MaintenanceUpdate,
    db: Session = Depends(get_db),
    locks: LotLockRegistry = Depends(get_lot_locks),
):
    """
    A space in maintenance is never allocated.
    An occupied space keeps its vehicle; it just won't be reused until maintenance ends.
    """
    space = set_maintenance(db, locks, lot_id, space_number, body.in_maintenance)
    return MaintenanceOut(
        lot_id=lot_id,
        space_number=space.number,
        in_maintenance=space.in_maintenance,
        occupied=space.occupied,
    )
