# parking_lot/models/parking_lot.py
"""
Parking lots table.
A lot is created once with a fixed number of spaces; the count never changes.
"""

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import relationship
from parking_lot.database import Base


class ParkingLot(Base):
    __tablename__ = "parking_lots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    total_spaces = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False)

    spaces = relationship(
        "ParkingSpace",
        order_by="ParkingSpace.number",
        back_populates="lot",
    )

    def __repr__(self):
        return f"<ParkingLot {self.id} spaces={self.total_spaces}>"
