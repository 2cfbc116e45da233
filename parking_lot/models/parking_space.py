# parking_lot/models/parking_space.py
"""
Parking spaces table.
One row per numbered space (1..N) in a lot. `occupied` and `in_maintenance`
are independent flags; entry_time is set only while occupied.
"""

from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from parking_lot.database import Base


class ParkingSpace(Base):
    __tablename__ = "parking_spaces"
    __table_args__ = (
        UniqueConstraint("lot_id", "number", name="uq_parking_spaces_lot_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    occupied = Column(Boolean, default=False, nullable=False)
    in_maintenance = Column(Boolean, default=False, nullable=False)
    entry_time = Column(DateTime)

    lot = relationship("ParkingLot", back_populates="spaces")

    def __repr__(self):
        return (f"<ParkingSpace lot={self.lot_id} #{self.number} "
                f"occupied={self.occupied} maintenance={self.in_maintenance}>")
