"""Filtering and sorting of the fleet for list views."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .vehicle import Vehicle

ALL_STATUSES = "all"
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class VehicleQuery:
    """List parameters. Empty values mean "no filter"."""

    status: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER

    @classmethod
    def from_args(cls, args: Dict[str, Any]) -> "VehicleQuery":
        """Build a query from request/CLI arguments, applying defaults."""
        return cls(
            status=args.get("status") or None,
            search=args.get("search") or None,
            sort_by=args.get("sortBy") or DEFAULT_SORT_BY,
            sort_order=args.get("sortOrder") or DEFAULT_SORT_ORDER,
        )


def _created_at_key(vehicle: Vehicle) -> datetime:
    try:
        return vehicle.created_at_instant
    except (ValueError, OverflowError):
        return _EARLIEST


def sort_key(sort_by: str) -> Callable[[Vehicle], Any]:
    """
    Key function for a sort field.

    ids compare numerically, createdAt by parsed instant, and every other
    field as a plain string.
    """
    if sort_by == "id":
        return lambda v: v.id_number
    if sort_by == "createdAt":
        return _created_at_key
    return lambda v: str(v.to_dict().get(sort_by) or "")


def filter_vehicles(
    vehicles: List[Vehicle],
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Vehicle]:
    """Filter by exact status and case-insensitive plate substring."""
    result = list(vehicles)
    if status and status != ALL_STATUSES:
        result = [v for v in result if v.status.value == status]
    if search:
        needle = search.lower()
        result = [v for v in result if needle in v.license_plate.lower()]
    return result


def sort_vehicles(
    vehicles: List[Vehicle],
    sort_by: str = DEFAULT_SORT_BY,
    sort_order: str = DEFAULT_SORT_ORDER,
) -> List[Vehicle]:
    """Return a sorted copy; anything other than "asc" sorts descending."""
    return sorted(vehicles, key=sort_key(sort_by), reverse=sort_order != "asc")


def query_vehicles(vehicles: List[Vehicle], query: VehicleQuery) -> List[Vehicle]:
    """Filter, then sort. The input list is never modified."""
    filtered = filter_vehicles(vehicles, query.status, query.search)
    return sort_vehicles(filtered, query.sort_by, query.sort_order)
