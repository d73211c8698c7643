"""VehicleStatus enum for operational states."""

from enum import Enum

from .errors import ValidationError


class VehicleStatus(Enum):
    """Operational status of a fleet vehicle."""

    AVAILABLE = "Available"
    IN_USE = "InUse"
    MAINTENANCE = "Maintenance"

    @classmethod
    def parse(cls, value) -> "VehicleStatus":
        """Convert a wire value to a status, raising ValidationError if unknown."""
        if isinstance(value, cls):
            return value
        for status in cls:
            if status.value == value:
                return status
        allowed = ", ".join(s.value for s in cls)
        raise ValidationError(f"Status must be one of {allowed}", field="status")

    @property
    def is_protected(self) -> bool:
        """True for states that block deletion."""
        return self in (VehicleStatus.IN_USE, VehicleStatus.MAINTENANCE)
