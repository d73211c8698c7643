"""CSV rendering of vehicle lists."""

from datetime import datetime
from typing import List, Optional

from .vehicle import Vehicle

CSV_HEADERS = ["id", "licensePlate", "status", "createdAt"]


def to_csv(vehicles: List[Vehicle]) -> str:
    """
    Render vehicles as CSV text.

    licensePlate and createdAt are always quoted. An empty list produces
    just the header line.
    """
    header = ",".join(CSV_HEADERS)
    if not vehicles:
        return header + "\n"
    rows = [
        ",".join(
            [
                v.id,
                f'"{v.license_plate}"',
                v.status.value,
                f'"{v.created_at}"',
            ]
        )
        for v in vehicles
    ]
    return "\n".join([header] + rows)


def timestamped_filename(now: Optional[datetime] = None) -> str:
    """Export filename like vehicles-2025-01-15-093000.csv."""
    now = now or datetime.now()
    return now.strftime("vehicles-%Y-%m-%d-%H%M%S.csv")
