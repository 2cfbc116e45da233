# Parking lot core — Database Models
# Import all models here for SQLAlchemy discovery

from parking_lot.models.parking_lot import ParkingLot                   # noqa
from parking_lot.models.parking_space import ParkingSpace               # noqa
from parking_lot.models.parked_vehicle import ParkedVehicle             # noqa
from parking_lot.models.parking_transaction import ParkingTransaction   # noqa
