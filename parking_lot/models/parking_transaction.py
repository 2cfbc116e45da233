# parking_lot/models/parking_transaction.py
"""
Completed park/unpark cycles. Append-only; rows are never updated.
Feeds the daily report.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from parking_lot.database import Base


class ParkingTransaction(Base):
    __tablename__ = "parking_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False, index=True)
    license_plate = Column(String(20), nullable=False)
    entry_time = Column(DateTime, nullable=False)
    exit_time = Column(DateTime, nullable=False, index=True)
    fee = Column(Integer, nullable=False)

    @property
    def parking_hours(self) -> float:
        return (self.exit_time - self.entry_time).total_seconds() / 3600

    def __repr__(self):
        return f"<ParkingTransaction {self.id} plate={self.license_plate} fee={self.fee}>"
