# parking_lot/services/lot_registry.py
"""
Lot provisioning and lookup.
A lot and all of its spaces are written in a single transaction, so no
reader ever sees a lot with fewer spaces than it declares.
"""

from typing import Optional
from sqlalchemy.orm import Session, selectinload
from parking_lot.config import settings
from parking_lot.database import unit_of_work
from parking_lot.errors import InvalidArgument, LotNotFound
from parking_lot.models.parking_lot import ParkingLot
from parking_lot.models.parking_space import ParkingSpace
from parking_lot.utils.clock import utc_now
from parking_lot.utils.logger import get_logger

logger = get_logger(__name__)


def create_lot(db: Session, total_spaces: int, max_spaces: Optional[int] = None) -> ParkingLot:
    if max_spaces is None:
        max_spaces = settings.MAX_LOT_SPACES
    if isinstance(total_spaces, bool) or not isinstance(total_spaces, int) or total_spaces <= 0:
        raise InvalidArgument(f"total_spaces must be a positive integer, got {total_spaces!r}")
    if total_spaces > max_spaces:
        raise InvalidArgument(f"total_spaces must not exceed {max_spaces}, got {total_spaces}")

    with unit_of_work(db):
        lot = ParkingLot(total_spaces=total_spaces, created_at=utc_now())
        db.add(lot)
        db.flush()  # assigns lot.id
        db.add_all([
            ParkingSpace(lot_id=lot.id, number=n, occupied=False, in_maintenance=False)
            for n in range(1, total_spaces + 1)
        ])
        db.flush()
        lot = find_lot(db, lot.id, with_spaces=True)

    logger.info(f"[LOT] Created lot {lot.id} with {total_spaces} spaces")
    return lot


def find_lot(db: Session, lot_id: int, for_update: bool = False, with_spaces: bool = False) -> ParkingLot:
    """
    Fetch a lot or raise LotNotFound.
    `for_update` row-locks the lot (PostgreSQL) so other processes serialize on it.
    `with_spaces` eagerly loads the ordered space list.
    """
    q = db.query(ParkingLot).filter(ParkingLot.id == lot_id)
    if with_spaces:
        q = q.options(selectinload(ParkingLot.spaces)).populate_existing()
    if for_update:
        q = q.with_for_update()
    lot = q.first()
    if lot is None:
        raise LotNotFound(lot_id)
    return lot


def get_lot(db: Session, lot_id: int) -> ParkingLot:
    """Read-only lookup of a lot together with all of its spaces."""
    with unit_of_work(db):
        return find_lot(db, lot_id, with_spaces=True)


def require_lot(db: Session, lot_id: int) -> None:
    """
    Raise LotNotFound before any per-lot lock is taken.
    Lots are never deleted, so a lot seen here still exists once the lock is held.
    """
    with unit_of_work(db):
        if db.query(ParkingLot.id).filter(ParkingLot.id == lot_id).first() is None:
            raise LotNotFound(lot_id)
