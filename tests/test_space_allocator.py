# tests/test_space_allocator.py
"""Tests for space allocation (park), including concurrent callers."""

import pytest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from parking_lot.errors import (
    InvalidArgument, LotNotFound, NoAvailableSpace, OccupantNotFound, PersistenceFailure, VehicleAlreadyParked,
)
from parking_lot.models.parked_vehicle import ParkedVehicle
from parking_lot.models.parking_space import ParkingSpace
from parking_lot.models.parking_transaction import ParkingTransaction
from parking_lot.services.lot_registry import create_lot
from parking_lot.services.maintenance_service import set_maintenance
from parking_lot.services.occupancy_ledger import close_occupancy
from parking_lot.services.space_allocator import allocate_space


class TestAllocateSpace:
    def test_returns_lowest_free_space(self, db, locks, clock):
        lot_id = create_lot(db, 3).id

        numbers = [allocate_space(db, locks, lot_id, plate, clock=clock).space_number
                   for plate in ("AAA-1", "BBB-2", "CCC-3")]

        assert numbers == [1, 2, 3]

    def test_claim_records_entry_time_and_occupant(self, db, locks, clock, space_states):
        lot_id = create_lot(db, 2).id

        record = allocate_space(db, locks, lot_id, "ABC-1234", clock=clock)

        assert record.lot_id == lot_id
        assert record.license_plate == "ABC-1234"
        assert record.entry_time == clock.now
        assert space_states(lot_id)[0] == (1, True, False, clock.now)

    def test_exactly_n_allocations_then_full(self, db, locks):
        lot_id = create_lot(db, 4).id
        for i in range(4):
            allocate_space(db, locks, lot_id, f"CAR-{i}")

        with pytest.raises(NoAvailableSpace):
            allocate_space(db, locks, lot_id, "CAR-4")

    def test_skips_space_in_maintenance(self, db, locks):
        lot_id = create_lot(db, 3).id
        set_maintenance(db, locks, lot_id, 1, True)

        assert allocate_space(db, locks, lot_id, "AAA-1").space_number == 2

    def test_only_maintenance_spaces_left_is_full(self, db, locks):
        lot_id = create_lot(db, 2).id
        allocate_space(db, locks, lot_id, "AAA-1")
        set_maintenance(db, locks, lot_id, 2, True)

        with pytest.raises(NoAvailableSpace):
            allocate_space(db, locks, lot_id, "BBB-2")

    def test_freed_space_is_reused(self, db, locks, clock):
        lot_id = create_lot(db, 3).id
        for plate in ("AAA-1", "BBB-2", "CCC-3"):
            allocate_space(db, locks, lot_id, plate, clock=clock)

        close_occupancy(db, locks, lot_id, "BBB-2", clock=clock)

        assert allocate_space(db, locks, lot_id, "DDD-4", clock=clock).space_number == 2

    def test_missing_lot(self, db, locks):
        with pytest.raises(LotNotFound):
            allocate_space(db, locks, 404, "AAA-1")

    def test_same_plate_cannot_park_twice_in_lot(self, db, locks):
        lot_id = create_lot(db, 3).id
        allocate_space(db, locks, lot_id, "AAA-1")

        with pytest.raises(VehicleAlreadyParked) as exc_info:
            allocate_space(db, locks, lot_id, " aaa-1 ")
        assert exc_info.value.space_number == 1

    def test_same_plate_may_park_in_another_lot(self, db, locks):
        first = create_lot(db, 1).id
        second = create_lot(db, 1).id
        allocate_space(db, locks, first, "AAA-1")

        assert allocate_space(db, locks, second, "AAA-1").space_number == 1

    @pytest.mark.parametrize("plate", ["", "   ", None, "X" * 21])
    def test_rejects_bad_plate(self, db, locks, plate):
        lot_id = create_lot(db, 1).id
        with pytest.raises(InvalidArgument):
            allocate_space(db, locks, lot_id, plate)

    def test_failure_opening_occupancy_leaves_space_free(self, db, locks, session_factory, space_states):
        lot_id = create_lot(db, 2).id
        error = OperationalError("INSERT INTO parked_vehicles", {}, Exception("connection lost"))

        with patch("parking_lot.services.space_allocator.open_occupancy", side_effect=error):
            with pytest.raises(PersistenceFailure):
                allocate_space(db, locks, lot_id, "AAA-1")

        assert [s[1] for s in space_states(lot_id)] == [False, False]
        fresh = session_factory()
        try:
            assert fresh.query(ParkedVehicle).count() == 0
        finally:
            fresh.close()
        assert allocate_space(db, locks, lot_id, "AAA-1").space_number == 1


class TestConcurrentAllocation:
    @staticmethod
    def _park(session_factory, locks, lot_id, plate):
        session = session_factory()
        try:
            return allocate_space(session, locks, lot_id, plate).space_number
        except NoAvailableSpace:
            return None
        finally:
            session.close()

    def test_no_double_allocation_under_contention(self, db, locks, session_factory):
        lot_id = create_lot(db, 10).id
        plates = [f"CAR-{i:03d}" for i in range(30)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda p: self._park(session_factory, locks, lot_id, p), plates))

        claimed = [n for n in results if n is not None]
        assert sorted(claimed) == list(range(1, 11))
        assert results.count(None) == 20

    def test_single_free_space_goes_to_exactly_one_caller(self, db, locks, session_factory):
        lot_id = create_lot(db, 1).id

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(lambda p: self._park(session_factory, locks, lot_id, p), ["AAA-1", "BBB-2"]))

        assert sorted(results, key=lambda n: n is None) == [1, None]


class TestMixedOperations:
    @staticmethod
    def _run(session_factory, locks, lot_id, op, arg):
        session = session_factory()
        try:
            if op == "park":
                return op, arg, allocate_space(session, locks, lot_id, arg).space_number
            if op == "unpark":
                return op, arg, close_occupancy(session, locks, lot_id, arg).fee
            space_number, flag = arg
            set_maintenance(session, locks, lot_id, space_number, flag)
            return op, arg, True
        except (NoAvailableSpace, OccupantNotFound, VehicleAlreadyParked):
            return op, arg, None
        finally:
            session.close()

    def test_park_unpark_and_maintenance_stay_consistent(self, db, locks, session_factory):
        lot_id = create_lot(db, 6).id
        set_maintenance(db, locks, lot_id, 5, True)
        set_maintenance(db, locks, lot_id, 6, True)

        plates = [f"MIX-{i:02d}" for i in range(10)]
        ops = []
        for i in range(60):
            plate = plates[i % len(plates)]
            ops.append(("park", plate))
            ops.append(("unpark", plates[(i * 3) % len(plates)]))
            ops.append(("maintenance", (5 + i % 2, True)))
            ops.append(("maintenance", (3, i % 2 == 0)))

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda o: self._run(session_factory, locks, lot_id, *o), ops))

        parked = [r for op, _, r in results if op == "park" and r is not None]
        unparked = [r for op, _, r in results if op == "unpark" and r is not None]
        assert parked
        assert not {5, 6} & set(parked)

        fresh = session_factory()
        try:
            spaces = {s.number: s for s in fresh.query(ParkingSpace).filter(ParkingSpace.lot_id == lot_id)}
            records = fresh.query(ParkedVehicle).filter(ParkedVehicle.lot_id == lot_id).all()
            occupied = sorted(n for n, s in spaces.items() if s.occupied)

            assert sorted(r.space_number for r in records) == occupied
            assert len({r.license_plate for r in records}) == len(records)
            assert all(spaces[r.space_number].entry_time == r.entry_time for r in records)
            assert not spaces[5].occupied and not spaces[6].occupied
            assert spaces[5].in_maintenance and spaces[6].in_maintenance
            assert fresh.query(ParkingTransaction).count() == len(unparked)
            assert len(parked) - len(unparked) == len(records)
        finally:
            fresh.close()
