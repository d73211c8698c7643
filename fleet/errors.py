"""Exception hierarchy for fleet operations.

Each error carries the HTTP-style status code the API responds with, so the
web layer and the CLI can report failures without knowing every subclass.
"""

from typing import Any, Dict, Optional


class FleetError(Exception):
    """Base exception for all fleet errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Error object for the response envelope."""
        return {"message": self.message}


class ValidationError(FleetError):
    """User-correctable input error, optionally tied to a field."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        if self.field is None:
            return {"message": self.message}
        return {"field": self.field, "message": self.message}


class NotFoundError(FleetError):
    """No vehicle with the requested id."""

    status_code = 404

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__("Vehicle not found")


class PersistenceError(FleetError):
    """The record store could not write the collection."""

    status_code = 500


class BatchInputError(FleetError):
    """Batch request without any items to process."""

    status_code = 400
