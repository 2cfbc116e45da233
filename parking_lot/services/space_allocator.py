# parking_lot/services/space_allocator.py
"""
Space allocation (park).
Claims the lowest-numbered space that is neither occupied nor under
maintenance and opens the occupancy record in the same transaction.

Concurrency:
  - the per-lot lock serializes allocations within this process
  - the lot row is locked FOR UPDATE so other processes serialize too (PostgreSQL)
  - the claim itself is a conditional UPDATE on occupied=false AND in_maintenance=false;
    if it matches no row the next candidate is selected, at most total_spaces times
"""

from typing import Callable
from datetime import datetime
from sqlalchemy import update
from sqlalchemy.orm import Session
from parking_lot.database import unit_of_work
from parking_lot.errors import NoAvailableSpace, VehicleAlreadyParked
from parking_lot.models.parked_vehicle import ParkedVehicle
from parking_lot.models.parking_space import ParkingSpace
from parking_lot.services.lot_locks import LotLockRegistry
from parking_lot.services.lot_registry import find_lot, require_lot
from parking_lot.services.occupancy_ledger import find_active_occupancy, normalize_plate, open_occupancy
from parking_lot.utils.clock import utc_now
from parking_lot.utils.logger import get_logger

logger = get_logger(__name__)


def allocate_space(
    db: Session,
    locks: LotLockRegistry,
    lot_id: int,
    license_plate: str,
    clock: Callable[[], datetime] = utc_now,
) -> ParkedVehicle:
    plate = normalize_plate(license_plate)

    require_lot(db, lot_id)
    with locks.hold(lot_id), unit_of_work(db):
        lot = find_lot(db, lot_id, for_update=True)

        active = find_active_occupancy(db, lot_id, plate)
        if active:
            record, _ = active
            logger.warning(f"[PARK] Lot {lot_id}: {plate} already parked in space {record.space_number}")
            raise VehicleAlreadyParked(lot_id, plate, record.space_number)

        record = _claim_lowest_free_space(db, lot_id, lot.total_spaces, plate, clock)
        if record is None:
            logger.warning(f"[PARK] Lot {lot_id}: no free space for {plate}")
            raise NoAvailableSpace(lot_id)

    logger.info(f"[PARK] Lot {lot_id}: {plate} → space {record.space_number}")
    return record


def _claim_lowest_free_space(db: Session, lot_id: int, attempts: int, plate: str, clock):
    for _ in range(attempts):
        candidate = (
            db.query(ParkingSpace.id, ParkingSpace.number)
            .filter(
                ParkingSpace.lot_id == lot_id,
                ParkingSpace.occupied.is_(False),
                ParkingSpace.in_maintenance.is_(False),
            )
            .order_by(ParkingSpace.number)
            .first()
        )
        if candidate is None:
            return None

        entry_time = clock()
        claimed = db.execute(
            update(ParkingSpace)
            .where(
                ParkingSpace.id == candidate.id,
                ParkingSpace.occupied.is_(False),
                ParkingSpace.in_maintenance.is_(False),
            )
            .values(occupied=True, entry_time=entry_time)
            # bypasses the identity map; queries that load spaces use populate_existing()
            .execution_options(synchronize_session=False)
        ).rowcount
        if claimed == 1:
            return open_occupancy(db, lot_id, candidate.number, plate, entry_time)
    return None
