"""Batch creation: per-item validation against shared, evolving fleet state."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .errors import BatchInputError, ValidationError
from .requests import CreateItem
from .status import VehicleStatus
from .validations import (
    DUPLICATE,
    LICENSE_PLATE_FIELD,
    QUOTA_EXCEEDED,
    STATUS_FIELD,
    UNKNOWN_STATUS,
    FieldError,
    max_maintenance,
    quota_message,
    validate_license_plate_format,
)
from .vehicle import Vehicle, utc_now_iso

if TYPE_CHECKING:
    from .store import RecordStore

_logger = logging.getLogger(__name__)


@dataclass
class BatchItemResult:
    """Outcome for one item of a batch, keyed by its input position."""

    index: int
    item: CreateItem
    error: Optional[FieldError] = None
    vehicle: Optional[Vehicle] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"index": self.index, "success": self.success}
        if self.success:
            result["vehicle"] = self.vehicle.to_dict() if self.vehicle else None
        else:
            result["error"] = self.error.to_dict()
        return result


@dataclass
class BatchOutcome:
    """Aggregate result of a batch creation."""

    results: List[BatchItemResult]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def success(self) -> bool:
        return self.success_count > 0

    @property
    def status_code(self) -> int:
        """201 when every item succeeded, 207 when mixed, 400 when none did."""
        if self.failure_count == 0 and self.results:
            return 201
        if self.success_count > 0:
            return 207
        return 400

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "successCount": self.success_count,
            "failureCount": self.failure_count,
        }


def validate_batch(
    items: List[CreateItem], existing_vehicles: List[Vehicle]
) -> List[BatchItemResult]:
    """
    Validate every item in input order without short-circuiting.

    Unlike single creation, the maintenance quota is sized for the fleet as
    it will be after the whole batch (existing + batch size), and slots are
    consumed first-come, first-served as Maintenance items are accepted.
    Plates are trimmed before validation. An unknown status is rejected for
    its item only, after the plate checks.
    """
    total_after_batch = len(existing_vehicles) + len(items)
    max_allowed = max_maintenance(total_after_batch)

    existing_plates = {v.license_plate.lower() for v in existing_vehicles}
    batch_plates = set()
    maintenance_count = sum(
        1 for v in existing_vehicles if v.status == VehicleStatus.MAINTENANCE
    )

    results = []
    for index, item in enumerate(items):
        plate = item.license_plate.strip()
        item = CreateItem(license_plate=plate, status=item.status)

        check = validate_license_plate_format(plate)
        if not check:
            error = FieldError(LICENSE_PLATE_FIELD, check.error, check.code)
            results.append(BatchItemResult(index, item, error=error))
            continue

        key = plate.lower()
        if key in existing_plates:
            error = FieldError(
                LICENSE_PLATE_FIELD, f"License plate {plate} already exists", DUPLICATE
            )
            results.append(BatchItemResult(index, item, error=error))
            continue
        if key in batch_plates:
            error = FieldError(
                LICENSE_PLATE_FIELD, f"Duplicate license plate {plate} in batch", DUPLICATE
            )
            results.append(BatchItemResult(index, item, error=error))
            continue

        try:
            status = VehicleStatus.parse(item.status)
        except ValidationError as e:
            error = FieldError(STATUS_FIELD, e.message, UNKNOWN_STATUS)
            results.append(BatchItemResult(index, item, error=error))
            continue
        item = CreateItem(license_plate=plate, status=status)

        if status == VehicleStatus.MAINTENANCE:
            if maintenance_count >= max_allowed:
                error = FieldError(
                    STATUS_FIELD,
                    quota_message(maintenance_count, total_after_batch, max_allowed),
                    QUOTA_EXCEEDED,
                )
                results.append(BatchItemResult(index, item, error=error))
                continue
            maintenance_count += 1

        batch_plates.add(key)
        results.append(BatchItemResult(index, item))

    return results


def create_batch(
    items: List[CreateItem],
    store: "RecordStore",
    created_at: Optional[str] = None,
) -> BatchOutcome:
    """
    Validate a batch, assign ids to the accepted items and persist them.

    The store is written once, and only when at least one item was accepted.
    """
    if not items:
        raise BatchInputError("vehicles must be a non-empty array")

    existing = store.load()
    results = validate_batch(items, existing)
    accepted = [r for r in results if r.success]

    if accepted:
        timestamp = created_at or utc_now_iso()
        ids = store.next_ids(existing, len(accepted))
        for result, vehicle_id in zip(accepted, ids):
            result.vehicle = Vehicle(
                vehicle_id, result.item.license_plate, result.item.status, timestamp
            )
        store.save(existing + [r.vehicle for r in accepted])

    outcome = BatchOutcome(results)
    _logger.info(
        "Batch create: %d accepted, %d rejected",
        outcome.success_count,
        outcome.failure_count,
    )
    return outcome
