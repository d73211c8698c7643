"""Flask JSON API for fleet vehicle management."""

import logging
import os
from typing import Optional

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from fleet import (
    BatchOutcome,
    FleetError,
    FleetService,
    RecordStore,
    VehicleQuery,
    YamlRecordStore,
    default_data_file,
    parse_create_body,
    parse_update_body,
    timestamped_filename,
    to_csv,
)

_logger = logging.getLogger(__name__)

# Fallback messages for unexpected faults, keyed by endpoint name
GENERIC_ERRORS = {
    "list_vehicles": "Failed to fetch vehicles",
    "export_vehicles": "Failed to export vehicles",
    "create_vehicle": "Failed to create vehicle",
    "update_vehicle": "Failed to update vehicle",
    "delete_vehicle": "Failed to delete vehicle",
}


def error_response(error: dict, status_code: int):
    """Build the {success: false, error: {...}} envelope."""
    return jsonify({"success": False, "error": error}), status_code


def create_app(store: Optional[RecordStore] = None) -> Flask:
    """Create the app around a record store (YAML file from config by default)."""
    app = Flask(__name__)
    app.config["FLEET_DATA_FILE"] = str(default_data_file())
    if store is None:
        store = YamlRecordStore(app.config["FLEET_DATA_FILE"])
    service = FleetService(store)

    @app.errorhandler(FleetError)
    def handle_fleet_error(error: FleetError):
        return error_response(error.to_dict(), error.status_code)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        endpoint = request.endpoint or ""
        _logger.exception("Unhandled error in %s", endpoint)
        message = GENERIC_ERRORS.get(endpoint, "Internal server error")
        return error_response({"message": message}, 500)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/vehicles", methods=["GET"])
    def list_vehicles():
        """All vehicles, filtered by status/search and sorted."""
        query = VehicleQuery.from_args(request.args)
        vehicles = service.list_vehicles(query)
        return jsonify({"success": True, "data": [v.to_dict() for v in vehicles]})

    @app.route("/api/vehicles/export", methods=["GET"])
    def export_vehicles():
        """CSV download of the filtered list."""
        query = VehicleQuery.from_args(request.args)
        vehicles = service.list_vehicles(query)
        return Response(
            to_csv(vehicles),
            mimetype="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={timestamped_filename()}"
            },
        )

    @app.route("/api/vehicles", methods=["POST"])
    def create_vehicle():
        """Create one vehicle, or a batch when the body has a "vehicles" array."""
        body = request.get_json(silent=True)
        result = service.create(parse_create_body(body))

        if isinstance(result, BatchOutcome):
            return (
                jsonify({"success": result.success, "data": result.to_dict()}),
                result.status_code,
            )
        return jsonify({"success": True, "data": result.to_dict()}), 201

    @app.route("/api/vehicles/<vehicle_id>", methods=["PUT"])
    def update_vehicle(vehicle_id: str):
        """Partial update of license plate and/or status."""
        update = parse_update_body(request.get_json(silent=True))
        vehicle = service.update_vehicle(vehicle_id, update)
        return jsonify({"success": True, "data": vehicle.to_dict()})

    @app.route("/api/vehicles/<vehicle_id>", methods=["DELETE"])
    def delete_vehicle(vehicle_id: str):
        """Delete a vehicle that is not InUse or in Maintenance."""
        deleted_id = service.delete_vehicle(vehicle_id)
        return jsonify({"success": True, "data": {"id": deleted_id}})

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("FLEET_LOG_LEVEL", "INFO"))
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
