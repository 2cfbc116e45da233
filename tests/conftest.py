# tests/conftest.py
"""Shared fixtures: a throwaway SQLite database per test and a controllable clock."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from parking_lot.database import build_engine, build_session_factory, create_tables
from parking_lot.models.parking_space import ParkingSpace
from parking_lot.services.lot_locks import LotLockRegistry


class FakeClock:
    def __init__(self, start=datetime(2024, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'parking.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def locks():
    return LotLockRegistry()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def space_states(session_factory):
    """Reads every space of a lot from a fresh session: (number, occupied, in_maintenance, entry_time)."""
    def read(lot_id):
        session = session_factory()
        try:
            spaces = (session.query(ParkingSpace)
                      .filter(ParkingSpace.lot_id == lot_id)
                      .order_by(ParkingSpace.number).all())
            return [(s.number, s.occupied, s.in_maintenance, s.entry_time) for s in spaces]
        finally:
            session.close()
    return read
