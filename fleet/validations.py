"""Business rules for license plates, status transitions and the maintenance quota."""

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from .status import VehicleStatus
from .vehicle import Vehicle

MAINTENANCE_LIMIT_PERCENTAGE = 0.05

LICENSE_PLATE_PATTERN = re.compile(r"[A-Z]{3}-[0-9]{3}")

# Rule codes reported alongside the human-readable message
EMPTY = "EMPTY"
FORMAT = "FORMAT"
DUPLICATE = "DUPLICATE"
QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"
PROTECTED_STATE = "PROTECTED_STATE"
UNKNOWN_STATUS = "UNKNOWN_STATUS"

LICENSE_PLATE_FIELD = "licensePlate"
STATUS_FIELD = "status"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single rule check."""

    valid: bool
    error: Optional[str] = None
    code: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(valid=True)


@dataclass(frozen=True)
class FieldError:
    """First failing rule of a composite validation, tagged with its field."""

    field: str
    message: str
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


def max_maintenance(total_vehicles: int) -> int:
    """Number of quota slots for a fleet of the given size."""
    return math.floor(total_vehicles * MAINTENANCE_LIMIT_PERCENTAGE)


def quota_message(maintenance_count: int, total_vehicles: int, max_allowed: int) -> str:
    return (
        f"Cannot exceed 5% maintenance limit ({maintenance_count} of {total_vehicles} "
        f"vehicles already in maintenance, max allowed: {max_allowed})"
    )


def validate_license_plate_format(license_plate: Optional[str]) -> ValidationResult:
    """Check that a plate is present and shaped like AAA-999."""
    if not license_plate or not license_plate.strip():
        return ValidationResult(False, "License plate is required", EMPTY)
    if not LICENSE_PLATE_PATTERN.fullmatch(license_plate):
        return ValidationResult(
            False,
            "License plate must be in format XXX-NNN (3 capital letters, dash, 3 numbers)",
            FORMAT,
        )
    return VALID


def is_plate_unique(
    license_plate: str,
    vehicles: List[Vehicle],
    exclude_id: Optional[str] = None,
) -> ValidationResult:
    """Case-insensitive uniqueness check, ignoring the vehicle being updated."""
    wanted = license_plate.lower()
    for vehicle in vehicles:
        if vehicle.id == exclude_id:
            continue
        if vehicle.license_plate.lower() == wanted:
            return ValidationResult(False, "License plate already exists", DUPLICATE)
    return VALID


def can_set_maintenance(
    vehicles: List[Vehicle], exclude_id: Optional[str] = None
) -> ValidationResult:
    """
    Check whether one more vehicle may enter Maintenance.

    The quota is floor(len(vehicles) * 5%). The vehicle named by exclude_id
    does not count toward the vehicles already in maintenance.
    """
    total = len(vehicles)
    maintenance_count = sum(
        1
        for v in vehicles
        if v.status == VehicleStatus.MAINTENANCE and v.id != exclude_id
    )
    max_allowed = max_maintenance(total)
    if maintenance_count >= max_allowed:
        return ValidationResult(
            False, quota_message(maintenance_count, total, max_allowed), QUOTA_EXCEEDED
        )
    return VALID


def can_transition(
    current_status: VehicleStatus, new_status: VehicleStatus
) -> ValidationResult:
    """A vehicle in Maintenance may only return to Available."""
    if current_status == new_status:
        return VALID
    if (
        current_status == VehicleStatus.MAINTENANCE
        and new_status != VehicleStatus.AVAILABLE
    ):
        return ValidationResult(
            False,
            "A vehicle in Maintenance can only be set to Available",
            ILLEGAL_TRANSITION,
        )
    return VALID


def can_delete(status: VehicleStatus) -> ValidationResult:
    """Vehicles that are InUse or in Maintenance cannot be deleted."""
    if status.is_protected:
        return ValidationResult(
            False, f"Cannot delete a vehicle that is {status.value}", PROTECTED_STATE
        )
    return VALID


def _field_error(field: str, result: ValidationResult) -> FieldError:
    return FieldError(field=field, message=result.error, code=result.code)


def validate_create(
    license_plate: str,
    status: VehicleStatus,
    existing_vehicles: List[Vehicle],
) -> Optional[FieldError]:
    """
    Validate a single new vehicle against the current fleet.

    Checks run in order: format, uniqueness, then the maintenance quota
    when the vehicle starts in Maintenance. The quota is computed over the
    existing fleet only.
    """
    result = validate_license_plate_format(license_plate)
    if not result:
        return _field_error(LICENSE_PLATE_FIELD, result)

    result = is_plate_unique(license_plate, existing_vehicles)
    if not result:
        return _field_error(LICENSE_PLATE_FIELD, result)

    if status == VehicleStatus.MAINTENANCE:
        result = can_set_maintenance(existing_vehicles)
        if not result:
            return _field_error(STATUS_FIELD, result)

    return None


def validate_update(
    vehicle_id: str,
    current_vehicle: Vehicle,
    license_plate: Optional[str],
    status: Optional[VehicleStatus],
    all_vehicles: List[Vehicle],
) -> Optional[FieldError]:
    """
    Validate a partial update. Fields left as None are not checked.

    The plate is checked before the status when both are present.
    """
    if license_plate is not None:
        result = validate_license_plate_format(license_plate)
        if not result:
            return _field_error(LICENSE_PLATE_FIELD, result)

        result = is_plate_unique(license_plate, all_vehicles, vehicle_id)
        if not result:
            return _field_error(LICENSE_PLATE_FIELD, result)

    if status is not None:
        result = can_transition(current_vehicle.status, status)
        if not result:
            return _field_error(STATUS_FIELD, result)

        if status == VehicleStatus.MAINTENANCE:
            result = can_set_maintenance(all_vehicles, vehicle_id)
            if not result:
                return _field_error(STATUS_FIELD, result)

    return None


def find_invariant_violations(vehicles: List[Vehicle]) -> List[str]:
    """Describe every fleet-wide invariant the given collection breaks."""
    problems = []
    seen: Dict[str, str] = {}
    for vehicle in vehicles:
        result = validate_license_plate_format(vehicle.license_plate)
        if not result:
            problems.append(f"Vehicle {vehicle.id}: {result.error}")
        key = vehicle.license_plate.lower()
        if key in seen:
            problems.append(
                f"Vehicle {vehicle.id}: license plate {vehicle.license_plate} "
                f"duplicates vehicle {seen[key]}"
            )
        else:
            seen[key] = vehicle.id

    total = len(vehicles)
    maintenance_count = sum(
        1 for v in vehicles if v.status == VehicleStatus.MAINTENANCE
    )
    max_allowed = max_maintenance(total)
    if maintenance_count > max_allowed:
        problems.append(
            f"{maintenance_count} of {total} vehicles in maintenance, "
            f"max allowed: {max_allowed}"
        )
    return problems
