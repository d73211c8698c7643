"""Request types for creating and updating vehicles.

Creation bodies come in two shapes: a single ``{licensePlate, status?}``
object, or ``{vehicles: [...]}`` for a batch. They are parsed into the
``SingleCreate`` / ``BatchCreate`` variants so callers branch on the type
instead of inspecting raw JSON.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from .errors import BatchInputError, ValidationError
from .status import VehicleStatus


@dataclass(frozen=True)
class CreateItem:
    """
    One vehicle to create.

    Batch items keep an unrecognized status as the raw wire value so the
    item can be rejected on its own without failing its siblings.
    """

    license_plate: str
    status: Union[VehicleStatus, str] = VehicleStatus.AVAILABLE


@dataclass(frozen=True)
class SingleCreate:
    item: CreateItem


@dataclass(frozen=True)
class BatchCreate:
    items: List[CreateItem] = field(default_factory=list)


CreateRequest = Union[SingleCreate, BatchCreate]


@dataclass(frozen=True)
class UpdateRequest:
    """Partial update; None means the field is left unchanged."""

    license_plate: Optional[str] = None
    status: Optional[VehicleStatus] = None

    @property
    def is_empty(self) -> bool:
        return self.license_plate is None and self.status is None


def _parse_status(value: Any) -> VehicleStatus:
    if value is None or value == "":
        return VehicleStatus.AVAILABLE
    return VehicleStatus.parse(value)


def _parse_plate(value: Any) -> str:
    # Missing or non-string plates fail the "required" rule downstream
    return value if isinstance(value, str) else ""


def parse_create_item(data: Any) -> CreateItem:
    """Parse one ``{licensePlate, status?}`` object."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return CreateItem(
        license_plate=_parse_plate(data.get("licensePlate")),
        status=_parse_status(data.get("status")),
    )


def parse_batch_item(data: Any) -> CreateItem:
    """
    Parse one batch entry without raising.

    A non-object entry becomes an item with an empty plate, and an unknown
    status is kept as given; both are rejected per item during validation.
    """
    if not isinstance(data, dict):
        return CreateItem(license_plate="")
    status = data.get("status")
    if status is None or status == "":
        status = VehicleStatus.AVAILABLE
    else:
        try:
            status = VehicleStatus.parse(status)
        except ValidationError:
            status = str(status)
    return CreateItem(license_plate=_parse_plate(data.get("licensePlate")), status=status)


def parse_create_body(body: Any) -> CreateRequest:
    """Select the single or batch variant from a creation body."""
    if isinstance(body, dict) and "vehicles" in body:
        raw_items = body["vehicles"]
        if not isinstance(raw_items, list) or not raw_items:
            raise BatchInputError("vehicles must be a non-empty array")
        return BatchCreate(items=[parse_batch_item(raw) for raw in raw_items])
    return SingleCreate(item=parse_create_item(body))


def parse_update_body(body: Any) -> UpdateRequest:
    """Parse a ``{licensePlate?, status?}`` update body."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    license_plate = body.get("licensePlate")
    if license_plate is not None and not isinstance(license_plate, str):
        license_plate = ""
    status = body.get("status")
    return UpdateRequest(
        license_plate=license_plate,
        status=VehicleStatus.parse(status) if status is not None else None,
    )
