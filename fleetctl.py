#!/usr/bin/env python3
"""
Command line interface for fleet vehicle management.

Commands:
  list    - List vehicles with optional status/search filters and sorting
  add     - Add one vehicle, or several as a batch
  update  - Change a vehicle's license plate and/or status
  delete  - Remove a vehicle
  export  - Write the (filtered) fleet as CSV
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from fleet import (
    BatchItemResult,
    CreateItem,
    FleetError,
    FleetService,
    UpdateRequest,
    Vehicle,
    VehicleQuery,
    VehicleStatus,
    YamlRecordStore,
    default_data_file,
    to_csv,
)

STATUS_CHOICES = [s.value for s in VehicleStatus]
SORT_CHOICES = ["id", "licensePlate", "status", "createdAt"]

# =============================================================================
# Formatting helpers
# =============================================================================


def format_created(created_at: Optional[str]) -> str:
    """Trim an ISO timestamp to 'YYYY-MM-DD HH:MM' for display."""
    if not created_at:
        return "-"
    return created_at[:16].replace("T", " ")


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to table rows."""
    return [
        [v.id, v.license_plate, v.status.value, format_created(v.created_at)]
        for v in vehicles
    ]


def make_batch_table(results: List[BatchItemResult]) -> List[List[str]]:
    """Convert batch results to table rows."""
    rows = []
    for result in results:
        if result.success:
            outcome = f"created #{result.vehicle.id}" if result.vehicle else "created"
        else:
            outcome = result.error.message
        rows.append([str(result.index), result.item.license_plate, outcome])
    return rows


def build_query(args) -> VehicleQuery:
    """Query from list/export arguments."""
    return VehicleQuery(
        status=args.status,
        search=args.search,
        sort_by=args.sort_by,
        sort_order="asc" if args.asc else "desc",
    )


# =============================================================================
# Commands
# =============================================================================


def cmd_list(service: FleetService, args) -> int:
    """List vehicles."""
    vehicles = service.list_vehicles(build_query(args))
    if not vehicles:
        print("No vehicles found.")
        return 0

    headers = ["ID", "License Plate", "Status", "Created"]
    print(tabulate(make_vehicle_table(vehicles), headers=headers, tablefmt="simple"))
    print()
    print(f"Total: {len(vehicles)}")
    return 0


def cmd_add(service: FleetService, args) -> int:
    """Add one vehicle, or a batch when several plates are given."""
    status = VehicleStatus.parse(args.status)
    items = [CreateItem(license_plate=plate, status=status) for plate in args.plates]

    if len(items) == 1:
        vehicle = service.create_vehicle(items[0])
        print(f"Created vehicle #{vehicle.id}: {vehicle.license_plate} ({vehicle.status.value})")
        return 0

    outcome = service.create_vehicles(items)
    headers = ["#", "License Plate", "Result"]
    print(tabulate(make_batch_table(outcome.results), headers=headers, tablefmt="simple"))
    print()
    print(f"Created: {outcome.success_count}  Failed: {outcome.failure_count}")
    return 0 if outcome.success else 1


def cmd_update(service: FleetService, args) -> int:
    """Update a vehicle's plate and/or status."""
    update = UpdateRequest(
        license_plate=args.plate,
        status=VehicleStatus.parse(args.status) if args.status else None,
    )
    if update.is_empty:
        print("Error: nothing to update (use --plate and/or --status)")
        return 1

    vehicle = service.update_vehicle(args.vehicle_id, update)
    print(f"Updated vehicle #{vehicle.id}: {vehicle.license_plate} ({vehicle.status.value})")
    return 0


def cmd_delete(service: FleetService, args) -> int:
    """Delete a vehicle."""
    deleted_id = service.delete_vehicle(args.vehicle_id)
    print(f"Deleted vehicle #{deleted_id}")
    return 0


def cmd_export(service: FleetService, args) -> int:
    """Export vehicles as CSV."""
    content = to_csv(service.list_vehicles(build_query(args)))
    if args.output:
        args.output.write_text(content)
        print(f"Exported to {args.output}")
    else:
        print(content)
    return 0


# =============================================================================
# Main
# =============================================================================


def add_query_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--status",
        choices=STATUS_CHOICES + ["all"],
        help="Only show vehicles with this status",
    )
    parser.add_argument(
        "--search",
        type=str,
        help="Case-insensitive license plate substring",
    )
    parser.add_argument(
        "--sort-by",
        choices=SORT_CHOICES,
        default="createdAt",
        help="Sort field (default: createdAt)",
    )
    parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet vehicle manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list
  %(prog)s list --status Maintenance
  %(prog)s list --search abc --sort-by licensePlate --asc
  %(prog)s add ABC-123
  %(prog)s add ABC-123 DEF-456 GHI-789 --status Available
  %(prog)s update 3 --status Maintenance
  %(prog)s delete 3
  %(prog)s export --output vehicles.csv
""",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Path to fleet YAML file (default: $FLEET_DATA_FILE or data/vehicles.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List vehicles")
    add_query_arguments(list_parser)

    add_parser = subparsers.add_parser("add", help="Add one or more vehicles")
    add_parser.add_argument(
        "plates",
        nargs="+",
        help="License plate(s) in format XXX-NNN",
    )
    add_parser.add_argument(
        "--status",
        choices=STATUS_CHOICES,
        default=VehicleStatus.AVAILABLE.value,
        help="Initial status (default: Available)",
    )

    update_parser = subparsers.add_parser("update", help="Update a vehicle")
    update_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    update_parser.add_argument("--plate", type=str, help="New license plate")
    update_parser.add_argument("--status", choices=STATUS_CHOICES, help="New status")

    delete_parser = subparsers.add_parser("delete", help="Delete a vehicle")
    delete_parser.add_argument("vehicle_id", type=str, help="Vehicle id")

    export_parser = subparsers.add_parser("export", help="Export vehicles as CSV")
    add_query_arguments(export_parser)
    export_parser.add_argument(
        "--output",
        type=Path,
        help="Write CSV to this file instead of stdout",
    )

    return parser


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "export": cmd_export,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=os.environ.get("FLEET_LOG_LEVEL", "WARNING"))

    service = FleetService(YamlRecordStore(args.data_file or default_data_file()))
    try:
        return COMMANDS[args.command](service, args)
    except FleetError as e:
        print(f"Error: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
