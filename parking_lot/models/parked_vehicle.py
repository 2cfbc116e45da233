# parking_lot/models/parked_vehicle.py
"""
Active occupancy records — who currently holds which space, and since when.
Written only by the occupancy ledger; deleted when the vehicle leaves and
its parking transaction is written.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from parking_lot.database import Base


class ParkedVehicle(Base):
    __tablename__ = "parked_vehicles"
    __table_args__ = (
        UniqueConstraint("lot_id", "space_number", name="uq_parked_vehicles_lot_space"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False, index=True)
    space_number = Column(Integer, nullable=False)
    license_plate = Column(String(20), nullable=False, index=True)
    entry_time = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ParkedVehicle {self.license_plate} lot={self.lot_id} space={self.space_number}>"
