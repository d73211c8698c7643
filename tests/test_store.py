#!/usr/bin/env python3
"""Tests for record stores."""

import pytest
import yaml

from fleet import (
    InMemoryRecordStore,
    PersistenceError,
    Vehicle,
    VehicleStatus,
    YamlRecordStore,
    default_data_file,
)


def vehicle(vehicle_id, plate="ABC-123", status=VehicleStatus.AVAILABLE):
    return Vehicle(vehicle_id, plate, status, "2025-01-15T10:00:00.000Z")


# =============================================================================
# next_ids tests
# =============================================================================


class TestNextIds:
    """Tests for sequential id generation."""

    def test_empty_fleet_starts_at_one(self):
        assert InMemoryRecordStore().next_ids([], 3) == ["1", "2", "3"]

    def test_above_highest_id(self):
        existing = [vehicle("4"), vehicle("12"), vehicle("7")]
        assert InMemoryRecordStore().next_ids(existing, 2) == ["13", "14"]

    def test_malformed_ids_ignored(self):
        existing = [vehicle("abc"), vehicle("2")]
        assert InMemoryRecordStore().next_ids(existing, 1) == ["3"]

    def test_zero_count(self):
        assert InMemoryRecordStore().next_ids([vehicle("1")], 0) == []


# =============================================================================
# YamlRecordStore tests
# =============================================================================


class TestYamlRecordStoreLoad:
    """Tests for YamlRecordStore.load."""

    def test_missing_file_is_empty_fleet(self, tmp_path):
        assert YamlRecordStore(tmp_path / "missing.yaml").load() == []

    def test_loads_vehicles(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        yaml_file.write_text("""
vehicles:
  - id: '1'
    licensePlate: ABC-123
    status: Available
    createdAt: '2025-01-15T10:00:00.000Z'
  - id: '2'
    licensePlate: XYZ-789
    status: Maintenance
    createdAt: '2025-01-16T10:00:00.000Z'
""")
        vehicles = YamlRecordStore(yaml_file).load()

        assert len(vehicles) == 2
        assert vehicles[0].license_plate == "ABC-123"
        assert vehicles[1].status == VehicleStatus.MAINTENANCE

    def test_empty_file_is_empty_fleet(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        yaml_file.write_text("")
        assert YamlRecordStore(yaml_file).load() == []

    def test_invalid_yaml_is_empty_fleet(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        yaml_file.write_text("vehicles: [unclosed\n")
        assert YamlRecordStore(yaml_file).load() == []

    def test_malformed_entry_is_empty_fleet(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        yaml_file.write_text("vehicles:\n  - id: '1'\n")
        assert YamlRecordStore(yaml_file).load() == []

    def test_unknown_status_is_empty_fleet(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        yaml_file.write_text("""
vehicles:
  - id: '1'
    licensePlate: ABC-123
    status: Broken
    createdAt: '2025-01-15T10:00:00.000Z'
""")
        assert YamlRecordStore(yaml_file).load() == []

    def test_null_plate_is_empty_fleet(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        yaml_file.write_text("""
vehicles:
  - id: '1'
    licensePlate: null
    status: Available
    createdAt: '2025-01-15T10:00:00.000Z'
""")
        assert YamlRecordStore(yaml_file).load() == []


class TestYamlRecordStoreSave:
    """Tests for YamlRecordStore.save."""

    def test_round_trip(self, tmp_path):
        store = YamlRecordStore(tmp_path / "vehicles.yaml")
        vehicles = [vehicle("1"), vehicle("2", "XYZ-789", VehicleStatus.IN_USE)]

        store.save(vehicles)

        assert store.load() == vehicles

    def test_writes_camel_case_mapping(self, tmp_path):
        yaml_file = tmp_path / "vehicles.yaml"
        YamlRecordStore(yaml_file).save([vehicle("1")])

        data = yaml.safe_load(yaml_file.read_text())
        assert data == {
            "vehicles": [
                {
                    "id": "1",
                    "licensePlate": "ABC-123",
                    "status": "Available",
                    "createdAt": "2025-01-15T10:00:00.000Z",
                }
            ]
        }

    def test_creates_parent_directory(self, tmp_path):
        yaml_file = tmp_path / "nested" / "dir" / "vehicles.yaml"
        YamlRecordStore(yaml_file).save([vehicle("1")])
        assert yaml_file.exists()

    def test_replaces_whole_collection(self, tmp_path):
        store = YamlRecordStore(tmp_path / "vehicles.yaml")
        store.save([vehicle("1"), vehicle("2", "XYZ-789")])
        store.save([vehicle("2", "XYZ-789")])
        assert [v.id for v in store.load()] == ["2"]

    def test_no_temp_files_left(self, tmp_path):
        YamlRecordStore(tmp_path / "vehicles.yaml").save([vehicle("1")])
        assert [p.name for p in tmp_path.iterdir()] == ["vehicles.yaml"]

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = YamlRecordStore(blocker / "vehicles.yaml")
        with pytest.raises(PersistenceError) as exc:
            store.save([vehicle("1")])
        assert exc.value.message == "Failed to save vehicles"


class TestInMemoryRecordStore:
    """Tests for the in-memory store."""

    def test_load_returns_copies(self):
        store = InMemoryRecordStore([vehicle("1")])
        loaded = store.load()
        loaded[0].status = VehicleStatus.IN_USE
        assert store.load()[0].status == VehicleStatus.AVAILABLE

    def test_fail_on_save(self):
        store = InMemoryRecordStore(fail_on_save=True)
        with pytest.raises(PersistenceError):
            store.save([])


class TestDefaultDataFile:
    """Tests for data file configuration."""

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FLEET_DATA_FILE", str(tmp_path / "fleet.yaml"))
        assert default_data_file() == tmp_path / "fleet.yaml"

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("FLEET_DATA_FILE", raising=False)
        assert default_data_file().name == "vehicles.yaml"
        assert default_data_file().parent.name == "data"
