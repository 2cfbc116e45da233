# parking_lot/database.py
"""
Database engine, session management, transaction scope and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite for tests). The engine and session
factory are built once at startup and handed around explicitly.
"""

from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from parking_lot.errors import PersistenceFailure
from parking_lot.utils.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def build_engine(url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False):
    if url.startswith("sqlite"):
        # Route handlers run in a thread pool; SQLite must allow cross-thread use
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=echo,
        )
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,
    )


def build_session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db(request: Request):
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session):
    """
    Commit everything done inside the block as one transaction.
    Any failure rolls the whole block back; store errors surface as PersistenceFailure.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[DB] Transaction rolled back: {exc}", exc_info=True)
        raise PersistenceFailure(exc) from exc
    except Exception:
        db.rollback()
        raise


def create_tables(engine):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from parking_lot.models.parking_lot import ParkingLot                   # noqa
    from parking_lot.models.parking_space import ParkingSpace               # noqa
    from parking_lot.models.parked_vehicle import ParkedVehicle             # noqa
    from parking_lot.models.parking_transaction import ParkingTransaction   # noqa

    Base.metadata.create_all(bind=engine)
