# parking_lot/errors.py
"""
Error kinds raised by the parking core.
Each carries a stable `code` and the HTTP status the API layer maps it to.
"""


class ParkingError(Exception):
    code = "parking_error"
    status_code = 400


class InvalidArgument(ParkingError):
    code = "invalid_argument"
    status_code = 400


class LotNotFound(ParkingError):
    code = "lot_not_found"
    status_code = 404

    def __init__(self, lot_id: int):
        super().__init__(f"Parking lot {lot_id} not found")
        self.lot_id = lot_id


class SpaceNotFound(ParkingError):
    code = "space_not_found"
    status_code = 404

    def __init__(self, lot_id: int, space_number: int):
        super().__init__(f"Space {space_number} does not exist in lot {lot_id}")
        self.lot_id = lot_id
        self.space_number = space_number


class NoAvailableSpace(ParkingError):
    code = "no_available_space"
    status_code = 409

    def __init__(self, lot_id: int):
        super().__init__(f"No free space available in lot {lot_id}")
        self.lot_id = lot_id


class VehicleAlreadyParked(ParkingError):
    code = "vehicle_already_parked"
    status_code = 409

    def __init__(self, lot_id: int, license_plate: str, space_number: int):
        super().__init__(f"Vehicle {license_plate} is already parked in lot {lot_id} (space {space_number})")
        self.lot_id = lot_id
        self.license_plate = license_plate
        self.space_number = space_number


class OccupantNotFound(ParkingError):
    code = "occupant_not_found"
    status_code = 404

    def __init__(self, lot_id: int, license_plate: str):
        super().__init__(f"No parked vehicle {license_plate} in lot {lot_id}")
        self.lot_id = lot_id
        self.license_plate = license_plate


class PersistenceFailure(ParkingError):
    """Underlying store error. The original exception is kept, not interpreted."""
    code = "persistence_failure"
    status_code = 503

    def __init__(self, original: Exception):
        super().__init__(f"Database error: {original.__class__.__name__}")
        self.original = original
