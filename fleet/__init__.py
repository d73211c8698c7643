"""
Fleet vehicle management.

This package provides the core of the fleet manager:
- VehicleStatus: Operational states (Available, InUse, Maintenance)
- Vehicle: One fleet unit
- validations: License plate, transition and maintenance quota rules
- batch: Batch creation with shared quota and duplicate tracking
- query: Filtering and sorting for list views
- RecordStore: Whole-collection persistence (YAML file or in memory)
- FleetService: The create/list/update/delete operations
"""

from .errors import (
    FleetError,
    ValidationError,
    NotFoundError,
    PersistenceError,
    BatchInputError,
)
from .status import VehicleStatus
from .vehicle import Vehicle, utc_now_iso
from .validations import (
    MAINTENANCE_LIMIT_PERCENTAGE,
    ValidationResult,
    FieldError,
    max_maintenance,
    validate_license_plate_format,
    is_plate_unique,
    can_set_maintenance,
    can_transition,
    can_delete,
    validate_create,
    validate_update,
    find_invariant_violations,
)
from .requests import (
    CreateItem,
    SingleCreate,
    BatchCreate,
    UpdateRequest,
    parse_create_body,
    parse_update_body,
)
from .batch import BatchItemResult, BatchOutcome, validate_batch, create_batch
from .query import VehicleQuery, filter_vehicles, sort_vehicles, query_vehicles
from .store import RecordStore, InMemoryRecordStore, YamlRecordStore, default_data_file
from .service import FleetService
from .csv_export import to_csv, timestamped_filename

__all__ = [
    "FleetError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "BatchInputError",
    "VehicleStatus",
    "Vehicle",
    "utc_now_iso",
    "MAINTENANCE_LIMIT_PERCENTAGE",
    "ValidationResult",
    "FieldError",
    "max_maintenance",
    "validate_license_plate_format",
    "is_plate_unique",
    "can_set_maintenance",
    "can_transition",
    "can_delete",
    "validate_create",
    "validate_update",
    "find_invariant_violations",
    "CreateItem",
    "SingleCreate",
    "BatchCreate",
    "UpdateRequest",
    "parse_create_body",
    "parse_update_body",
    "BatchItemResult",
    "BatchOutcome",
    "validate_batch",
    "create_batch",
    "VehicleQuery",
    "filter_vehicles",
    "sort_vehicles",
    "query_vehicles",
    "RecordStore",
    "InMemoryRecordStore",
    "YamlRecordStore",
    "default_data_file",
    "FleetService",
    "to_csv",
    "timestamped_filename",
]
