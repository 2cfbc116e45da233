# parking_lot/services/occupancy_ledger.py
"""
Occupancy ledger — sole writer of active occupancy records.

open_occupancy   called by the allocator inside its transaction
close_occupancy  unpark: frees the space, bills the stay, writes the transaction
lot_status       occupied spaces with plate and entry time, plus lot counters

Billing: every started hour is charged, with a minimum of one hour.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional
from sqlalchemy import and_
from sqlalchemy.orm import Session
from parking_lot.config import settings
from parking_lot.database import unit_of_work
from parking_lot.errors import InvalidArgument, OccupantNotFound
from parking_lot.models.parked_vehicle import ParkedVehicle
from parking_lot.models.parking_space import ParkingSpace
from parking_lot.models.parking_transaction import ParkingTransaction
from parking_lot.services.lot_locks import LotLockRegistry
from parking_lot.services.lot_registry import find_lot, require_lot
from parking_lot.utils.clock import utc_now
from parking_lot.utils.logger import get_logger

logger = get_logger(__name__)

BILLING_UNIT = timedelta(hours=1)
MAX_PLATE_LENGTH = 20


@dataclass
class OccupiedSpace:
    space_number: int
    license_plate: str
    entry_time: datetime


@dataclass
class LotStatus:
    lot_id: int
    total_spaces: int
    occupied_count: int
    maintenance_count: int
    available_count: int
    vehicles: list[OccupiedSpace] = field(default_factory=list)


def normalize_plate(license_plate: str) -> str:
    plate = (license_plate or "").strip().upper()
    if not plate:
        raise InvalidArgument("license_plate must not be empty")
    if len(plate) > MAX_PLATE_LENGTH:
        raise InvalidArgument(f"license_plate must be at most {MAX_PLATE_LENGTH} characters")
    return plate


def compute_fee(entry_time: datetime, exit_time: datetime, hourly_rate: int) -> int:
    """ceil(elapsed hours) * rate, never less than one hour."""
    hours, remainder = divmod(exit_time - entry_time, BILLING_UNIT)
    if remainder:
        hours += 1
    return max(1, hours) * hourly_rate


def open_occupancy(db: Session, lot_id: int, space_number: int, plate: str, entry_time: datetime) -> ParkedVehicle:
    record = ParkedVehicle(
        lot_id=lot_id,
        space_number=space_number,
        license_plate=plate,
        entry_time=entry_time,
    )
    db.add(record)
    db.flush()
    return record


def find_active_occupancy(db: Session, lot_id: int, plate: str):
    """(ParkedVehicle, ParkingSpace) for the plate's occupied space in the lot, or None."""
    return (
        db.query(ParkedVehicle, ParkingSpace)
        .join(
            ParkingSpace,
            and_(
                ParkingSpace.lot_id == ParkedVehicle.lot_id,
                ParkingSpace.number == ParkedVehicle.space_number,
            ),
        )
        .filter(
            ParkedVehicle.lot_id == lot_id,
            ParkedVehicle.license_plate == plate,
            ParkingSpace.occupied.is_(True),
        )
        .populate_existing()
        .first()
    )


def close_occupancy(
    db: Session,
    locks: LotLockRegistry,
    lot_id: int,
    license_plate: str,
    hourly_rate: Optional[int] = None,
    clock: Callable[[], datetime] = utc_now,
) -> ParkingTransaction:
    plate = normalize_plate(license_plate)
    rate = settings.HOURLY_RATE if hourly_rate is None else hourly_rate

    require_lot(db, lot_id)
    with locks.hold(lot_id), unit_of_work(db):
        find_lot(db, lot_id, for_update=True)

        active = find_active_occupancy(db, lot_id, plate)
        if active is None:
            logger.warning(f"[UNPARK] Lot {lot_id}: no parked vehicle {plate}")
            raise OccupantNotFound(lot_id, plate)
        record, space = active

        exit_time = clock()
        fee = compute_fee(record.entry_time, exit_time, rate)

        space.occupied = False
        space.entry_time = None
        db.delete(record)

        txn = ParkingTransaction(
            lot_id=lot_id,
            license_plate=plate,
            entry_time=record.entry_time,
            exit_time=exit_time,
            fee=fee,
        )
        db.add(txn)

    logger.info(f"[UNPARK] Lot {lot_id}: {plate} left space {space.number} "
                f"after {txn.parking_hours:.2f}h — fee {fee}")
    return txn


def lot_status(db: Session, lot_id: int) -> LotStatus:
    """
    Current occupancy of a lot, read in a single statement so the counters
    and the vehicle list come from the same snapshot.
    """
    with unit_of_work(db):
        lot = find_lot(db, lot_id)
        rows = (
            db.query(ParkingSpace, ParkedVehicle)
            .outerjoin(
                ParkedVehicle,
                and_(
                    ParkedVehicle.lot_id == ParkingSpace.lot_id,
                    ParkedVehicle.space_number == ParkingSpace.number,
                ),
            )
            .filter(ParkingSpace.lot_id == lot_id)
            .order_by(ParkingSpace.number)
            .populate_existing()
            .all()
        )

    status = LotStatus(lot_id=lot.id, total_spaces=lot.total_spaces,
                       occupied_count=0, maintenance_count=0, available_count=0)
    for space, record in rows:
        if space.in_maintenance:
            status.maintenance_count += 1
        if space.occupied:
            status.occupied_count += 1
            if record is not None:
                status.vehicles.append(OccupiedSpace(space.number, record.license_plate, record.entry_time))
        elif not space.in_maintenance:
            status.available_count += 1
    return status
