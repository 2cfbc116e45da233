# parking_lot/services/maintenance_service.py
"""
Maintenance toggle for a single space.
Only the in_maintenance flag changes. An occupied space may be put into
maintenance; its occupant stays and can still unpark normally.
"""

from sqlalchemy.orm import Session
from parking_lot.database import unit_of_work
from parking_lot.errors import InvalidArgument, SpaceNotFound
from parking_lot.models.parking_space import ParkingSpace
from parking_lot.services.lot_locks import LotLockRegistry
from parking_lot.services.lot_registry import find_lot, require_lot
from parking_lot.utils.logger import get_logger

logger = get_logger(__name__)


def set_maintenance(
    db: Session,
    locks: LotLockRegistry,
    lot_id: int,
    space_number: int,
    in_maintenance: bool,
) -> ParkingSpace:
    if space_number <= 0:
        raise InvalidArgument(f"space_number must be positive, got {space_number}")

    require_lot(db, lot_id)
    with locks.hold(lot_id), unit_of_work(db):
        find_lot(db, lot_id, for_update=True)
        space = (
            db.query(ParkingSpace)
            .filter(ParkingSpace.lot_id == lot_id, ParkingSpace.number == space_number)
            .populate_existing()
            .first()
        )
        if space is None:
            raise SpaceNotFound(lot_id, space_number)
        space.in_maintenance = bool(in_maintenance)

    if space.in_maintenance and space.occupied:
        logger.warning(f"[MAINT] Lot {lot_id}: space {space_number} is in maintenance but still occupied")
    logger.info(f"[MAINT] Lot {lot_id}: space {space_number} maintenance={space.in_maintenance}")
    return space
