"""FleetService - list, create, update and delete vehicles against a record store."""

import logging
from typing import Callable, List, Optional, Tuple, Union

from .batch import BatchOutcome, create_batch
from .errors import NotFoundError, ValidationError
from .query import VehicleQuery, query_vehicles
from .requests import BatchCreate, CreateItem, CreateRequest, SingleCreate, UpdateRequest
from .store import RecordStore
from .validations import can_delete, validate_create, validate_update
from .vehicle import Vehicle, utc_now_iso

_logger = logging.getLogger(__name__)


class FleetService:
    """
    Operations on the fleet.

    Each call loads the whole collection once and, when it mutates, saves
    it once. Validation failures raise ValidationError before anything is
    written; store failures propagate as PersistenceError.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], str] = utc_now_iso):
        self.store = store
        self.clock = clock

    def list_vehicles(self, query: Optional[VehicleQuery] = None) -> List[Vehicle]:
        """Return the filtered and sorted fleet."""
        return query_vehicles(self.store.load(), query or VehicleQuery())

    def create(self, request: CreateRequest) -> Union[Vehicle, BatchOutcome]:
        """Dispatch a parsed creation body to the single or batch path."""
        if isinstance(request, SingleCreate):
            return self.create_vehicle(request.item)
        if isinstance(request, BatchCreate):
            return self.create_vehicles(request.items)
        raise TypeError(f"Unsupported create request: {request!r}")

    def create_vehicle(self, item: CreateItem) -> Vehicle:
        """Validate and persist one new vehicle."""
        vehicles = self.store.load()
        error = validate_create(item.license_plate, item.status, vehicles)
        if error:
            _logger.info("Rejected vehicle %r: %s", item.license_plate, error.message)
            raise ValidationError(error.message, field=error.field)

        vehicle = Vehicle(
            id=self.store.next_ids(vehicles, 1)[0],
            license_plate=item.license_plate.strip(),
            status=item.status,
            created_at=self.clock(),
        )
        self.store.save(vehicles + [vehicle])
        _logger.info("Created vehicle %s (%s)", vehicle.id, vehicle.license_plate)
        return vehicle

    def create_vehicles(self, items: List[CreateItem]) -> BatchOutcome:
        """Create a batch with per-item results."""
        return create_batch(items, self.store, created_at=self.clock())

    def _find(self, vehicles: List[Vehicle], vehicle_id: str) -> Tuple[int, Vehicle]:
        for index, vehicle in enumerate(vehicles):
            if vehicle.id == vehicle_id:
                return index, vehicle
        raise NotFoundError(vehicle_id)

    def update_vehicle(self, vehicle_id: str, update: UpdateRequest) -> Vehicle:
        """Apply a partial update to the plate and/or status."""
        vehicles = self.store.load()
        index, current = self._find(vehicles, vehicle_id)

        error = validate_update(
            vehicle_id, current, update.license_plate, update.status, vehicles
        )
        if error:
            _logger.info("Rejected update of vehicle %s: %s", vehicle_id, error.message)
            raise ValidationError(error.message, field=error.field)

        changes = {}
        if update.license_plate is not None:
            changes["license_plate"] = update.license_plate.strip()
        if update.status is not None:
            changes["status"] = update.status
        updated = current.copy(**changes)

        vehicles[index] = updated
        self.store.save(vehicles)
        _logger.info("Updated vehicle %s", vehicle_id)
        return updated

    def delete_vehicle(self, vehicle_id: str) -> str:
        """Remove a vehicle unless it is InUse or in Maintenance."""
        vehicles = self.store.load()
        index, vehicle = self._find(vehicles, vehicle_id)

        result = can_delete(vehicle.status)
        if not result:
            raise ValidationError(result.error)

        del vehicles[index]
        self.store.save(vehicles)
        _logger.info("Deleted vehicle %s", vehicle_id)
        return vehicle_id
