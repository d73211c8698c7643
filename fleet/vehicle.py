"""Vehicle class - one fleet unit and its storage representation."""

from datetime import date, datetime, timezone
from typing import Any, Dict

from dateutil.parser import isoparse

from .status import VehicleStatus


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class Vehicle:
    """Identity and state of one fleet vehicle."""

    def __init__(
        self,
        id: str,
        license_plate: str,
        status: VehicleStatus,
        created_at: str,
    ):
        self.id = id
        self.license_plate = license_plate
        self.status = status
        self.created_at = created_at

    def __eq__(self, other):
        if not isinstance(other, Vehicle):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"Vehicle(id={self.id!r}, license_plate={self.license_plate!r}, "
            f"status={self.status.value!r}, created_at={self.created_at!r})"
        )

    @property
    def id_number(self) -> int:
        """Numeric value of the id; malformed ids count as 0."""
        try:
            return int(self.id, 10)
        except (TypeError, ValueError):
            return 0

    @property
    def created_at_instant(self) -> datetime:
        """Parsed creation timestamp, normalized to UTC."""
        instant = isoparse(self.created_at)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant

    def copy(self, **changes) -> "Vehicle":
        """Return a new Vehicle with the given attributes replaced."""
        fields = {
            "id": self.id,
            "license_plate": self.license_plate,
            "status": self.status,
            "created_at": self.created_at,
        }
        fields.update(changes)
        return Vehicle(**fields)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire/storage format (camelCase keys)."""
        return {
            "id": self.id,
            "licensePlate": self.license_plate,
            "status": self.status.value,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, dct: Dict[str, Any]) -> "Vehicle":
        """Build a Vehicle from its wire/storage format."""
        license_plate = dct["licensePlate"]
        if not isinstance(license_plate, str):
            raise ValueError(f"licensePlate must be a string, got {license_plate!r}")
        created_at = dct["createdAt"]
        # Unquoted YAML timestamps arrive as datetime objects
        if isinstance(created_at, date):
            created_at = created_at.isoformat()
        return cls(
            str(dct["id"]),
            license_plate,
            VehicleStatus.parse(dct["status"]),
            str(created_at),
        )
