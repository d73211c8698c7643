"""Record stores holding the full vehicle collection."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import PersistenceError, ValidationError
from .vehicle import Vehicle

_logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent.parent / "data" / "vehicles.yaml"


def default_data_file() -> Path:
    """Data file path from FLEET_DATA_FILE, falling back to data/vehicles.yaml."""
    return Path(os.environ.get("FLEET_DATA_FILE", DEFAULT_DATA_FILE))


class RecordStore(ABC):
    """Loads and saves the whole fleet at once."""

    @abstractmethod
    def load(self) -> List[Vehicle]:
        """Return every vehicle; an unreadable store counts as an empty fleet."""

    @abstractmethod
    def save(self, vehicles: List[Vehicle]) -> None:
        """Replace the stored collection, raising PersistenceError on failure."""

    def next_ids(self, existing: List[Vehicle], count: int) -> List[str]:
        """
        Generate sequential ids above the highest numeric id in use.

        Non-numeric ids count as 0.
        """
        highest = max((v.id_number for v in existing), default=0)
        highest = max(highest, 0)
        return [str(highest + n) for n in range(1, count + 1)]


class InMemoryRecordStore(RecordStore):
    """Store kept in a list; used by tests and dry runs."""

    def __init__(self, vehicles: Optional[List[Vehicle]] = None, fail_on_save: bool = False):
        self._vehicles = [v.copy() for v in vehicles or []]
        self.fail_on_save = fail_on_save
        self.save_count = 0

    def load(self) -> List[Vehicle]:
        return [v.copy() for v in self._vehicles]

    def save(self, vehicles: List[Vehicle]) -> None:
        if self.fail_on_save:
            raise PersistenceError("Failed to save vehicles")
        self._vehicles = [v.copy() for v in vehicles]
        self.save_count += 1


def vehicles_to_data(vehicles: List[Vehicle]) -> Dict[str, Any]:
    """Serialize a collection to the YAML document layout."""
    return {"vehicles": [v.to_dict() for v in vehicles]}


def vehicles_from_data(data: Any) -> List[Vehicle]:
    """Parse the YAML document layout. An empty document is an empty fleet."""
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ValueError("Fleet file must contain a mapping")
    return [Vehicle.from_dict(item) for item in data.get("vehicles") or []]


class YamlRecordStore(RecordStore):
    """Fleet stored as a single YAML file, rewritten whole on every save."""

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)

    def load(self) -> List[Vehicle]:
        if not self.filename.exists():
            return []
        try:
            with open(self.filename, "r") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader)
            return vehicles_from_data(data)
        except (OSError, yaml.YAMLError, ValueError, KeyError, TypeError, ValidationError):
            _logger.error("Error reading vehicles from %s", self.filename, exc_info=True)
            return []

    def save(self, vehicles: List[Vehicle]) -> None:
        """
        Write the collection atomically.

        The YAML is written to a temp file in the same directory and then
        moved over the data file, so readers never see a partial write.
        """
        data = vehicles_to_data(vehicles)
        tmp_name = None
        try:
            self.filename.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.filename.parent, prefix=f".{self.filename.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w") as fp:
                yaml.dump(
                    data,
                    fp,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    width=120,
                )
            os.replace(tmp_name, self.filename)
        except (OSError, yaml.YAMLError) as e:
            _logger.error("Error writing vehicles to %s", self.filename, exc_info=True)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError("Failed to save vehicles") from e
