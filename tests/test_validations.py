#!/usr/bin/env python3
"""
Tests for fleet business rules.

Covers the individual rule checks and the create/update composites:
1. License plate format (AAA-999) and presence
2. Case-insensitive plate uniqueness, excluding the vehicle being updated
3. Maintenance quota of floor(fleet size * 5%)
4. Maintenance -> Available is the only way out of Maintenance
5. InUse and Maintenance vehicles cannot be deleted
"""

import pytest

from fleet import (
    Vehicle,
    VehicleStatus,
    can_delete,
    can_set_maintenance,
    can_transition,
    find_invariant_violations,
    is_plate_unique,
    max_maintenance,
    validate_create,
    validate_license_plate_format,
    validate_update,
)
from fleet.validations import (
    DUPLICATE,
    EMPTY,
    FORMAT,
    ILLEGAL_TRANSITION,
    PROTECTED_STATE,
    QUOTA_EXCEEDED,
)

AVAILABLE = VehicleStatus.AVAILABLE
IN_USE = VehicleStatus.IN_USE
MAINTENANCE = VehicleStatus.MAINTENANCE


def make_fleet(available=0, in_use=0, maintenance=0):
    """Fleet with sequential ids and unique plates."""
    statuses = [AVAILABLE] * available + [IN_USE] * in_use + [MAINTENANCE] * maintenance
    return [
        Vehicle(str(n), f"FLT-{n:03d}", status, "2025-01-01T00:00:00.000Z")
        for n, status in enumerate(statuses, start=1)
    ]


# =============================================================================
# Rule checks
# =============================================================================


class TestValidateLicensePlateFormat:
    """Tests for validate_license_plate_format."""

    @pytest.mark.parametrize("plate", ["ABC-123", "XYZ-000", "AAA-999"])
    def test_valid_plates(self, plate):
        assert validate_license_plate_format(plate).valid

    @pytest.mark.parametrize(
        "plate",
        ["AB-123", "abc-123", "ABC-12", "ABC123", "ABCD-123", "ABC-1234", " ABC-123", "ABC-123\n"],
    )
    def test_invalid_format(self, plate):
        result = validate_license_plate_format(plate)
        assert not result.valid
        assert result.code == FORMAT
        assert "XXX-NNN" in result.error

    @pytest.mark.parametrize("plate", ["", "   ", None])
    def test_blank_is_required_error(self, plate):
        result = validate_license_plate_format(plate)
        assert not result.valid
        assert result.code == EMPTY
        assert result.error == "License plate is required"


class TestIsPlateUnique:
    """Tests for is_plate_unique."""

    def test_unique_plate(self):
        assert is_plate_unique("NEW-001", make_fleet(available=3)).valid

    def test_duplicate_any_case(self):
        fleet = make_fleet(available=3)
        result = is_plate_unique("flt-002", fleet)
        assert not result.valid
        assert result.code == DUPLICATE
        assert result.error == "License plate already exists"

    def test_excluding_owner_is_valid(self):
        fleet = make_fleet(available=3)
        assert is_plate_unique("FLT-002", fleet, exclude_id="2").valid

    def test_excluding_other_vehicle_still_duplicate(self):
        fleet = make_fleet(available=3)
        assert not is_plate_unique("FLT-002", fleet, exclude_id="1").valid


class TestCanSetMaintenance:
    """Tests for the 5% maintenance quota."""

    def test_max_maintenance_floors(self):
        assert max_maintenance(0) == 0
        assert max_maintenance(19) == 0
        assert max_maintenance(20) == 1
        assert max_maintenance(99) == 4
        assert max_maintenance(100) == 5

    def test_quota_full(self):
        """19 Available + 1 Maintenance: max is 1, one already used."""
        result = can_set_maintenance(make_fleet(available=19, maintenance=1))
        assert not result.valid
        assert result.code == QUOTA_EXCEEDED
        assert "1 of 20 vehicles already in maintenance, max allowed: 1" in result.error

    def test_quota_available(self):
        """99 Available: max is 4, none used."""
        assert can_set_maintenance(make_fleet(available=99)).valid

    def test_small_fleet_has_no_slots(self):
        assert not can_set_maintenance(make_fleet(available=10)).valid

    def test_excluded_vehicle_not_counted(self):
        fleet = make_fleet(available=19, maintenance=1)
        assert can_set_maintenance(fleet, exclude_id="20").valid


class TestCanTransition:
    """Tests for status transitions."""

    def test_maintenance_to_in_use_is_illegal(self):
        result = can_transition(MAINTENANCE, IN_USE)
        assert not result.valid
        assert result.code == ILLEGAL_TRANSITION
        assert result.error == "A vehicle in Maintenance can only be set to Available"

    @pytest.mark.parametrize("target", [AVAILABLE, MAINTENANCE])
    def test_maintenance_exits(self, target):
        assert can_transition(MAINTENANCE, target).valid

    @pytest.mark.parametrize("current", [AVAILABLE, IN_USE])
    @pytest.mark.parametrize("target", [AVAILABLE, IN_USE, MAINTENANCE])
    def test_other_transitions_legal(self, current, target):
        assert can_transition(current, target).valid


class TestCanDelete:
    """Tests for delete protection."""

    def test_available_can_be_deleted(self):
        assert can_delete(AVAILABLE).valid

    @pytest.mark.parametrize("status", [IN_USE, MAINTENANCE])
    def test_protected_states(self, status):
        result = can_delete(status)
        assert not result.valid
        assert result.code == PROTECTED_STATE
        assert result.error == f"Cannot delete a vehicle that is {status.value}"


# =============================================================================
# Composites
# =============================================================================


class TestValidateCreate:
    """Tests for validate_create."""

    def test_valid_vehicle(self):
        assert validate_create("NEW-456", AVAILABLE, make_fleet(available=2)) is None

    def test_format_checked_first(self):
        error = validate_create("bad", MAINTENANCE, make_fleet(available=2))
        assert error.field == "licensePlate"
        assert error.code == FORMAT

    def test_duplicate_plate(self):
        error = validate_create("FLT-001", AVAILABLE, make_fleet(available=2))
        assert error.field == "licensePlate"
        assert error.message == "License plate already exists"

    def test_duplicate_checked_before_quota(self):
        error = validate_create("FLT-001", MAINTENANCE, make_fleet(available=2))
        assert error.code == DUPLICATE

    def test_quota_only_for_maintenance(self):
        fleet = make_fleet(available=19, maintenance=1)
        assert validate_create("NEW-001", IN_USE, fleet) is None
        error = validate_create("NEW-001", MAINTENANCE, fleet)
        assert error.field == "status"
        assert error.code == QUOTA_EXCEEDED

    def test_quota_counts_existing_fleet_only(self):
        """With 19 existing vehicles the new one is not counted: max is 0."""
        error = validate_create("NEW-001", MAINTENANCE, make_fleet(available=19))
        assert error is not None
        assert error.code == QUOTA_EXCEEDED

    def test_to_dict(self):
        error = validate_create("", AVAILABLE, [])
        assert error.to_dict() == {
            "field": "licensePlate",
            "message": "License plate is required",
        }


class TestValidateUpdate:
    """Tests for validate_update."""

    def test_no_changes_is_valid(self):
        fleet = make_fleet(available=2)
        assert validate_update("1", fleet[0], None, None, fleet) is None

    def test_keeping_own_plate_is_valid(self):
        fleet = make_fleet(available=2)
        assert validate_update("1", fleet[0], "FLT-001", None, fleet) is None

    def test_plate_taken_by_other(self):
        fleet = make_fleet(available=2)
        error = validate_update("1", fleet[0], "flt-002", None, fleet)
        assert error.field == "licensePlate"
        assert error.code == DUPLICATE

    def test_plate_checked_before_status(self):
        fleet = make_fleet(available=1, maintenance=1)
        error = validate_update("2", fleet[1], "nope", IN_USE, fleet)
        assert error.field == "licensePlate"

    def test_illegal_transition(self):
        fleet = make_fleet(available=1, maintenance=1)
        error = validate_update("2", fleet[1], None, IN_USE, fleet)
        assert error.field == "status"
        assert error.code == ILLEGAL_TRANSITION

    def test_maintenance_quota_excludes_self(self):
        """Vehicle already in Maintenance can stay there even when quota is full."""
        fleet = make_fleet(available=19, maintenance=1)
        assert validate_update("20", fleet[19], None, MAINTENANCE, fleet) is None

    def test_maintenance_quota_full_for_other_vehicle(self):
        fleet = make_fleet(available=19, maintenance=1)
        error = validate_update("1", fleet[0], None, MAINTENANCE, fleet)
        assert error.field == "status"
        assert error.code == QUOTA_EXCEEDED

    def test_in_use_to_maintenance_with_free_slot(self):
        fleet = make_fleet(available=19, in_use=1)
        assert validate_update("20", fleet[19], None, MAINTENANCE, fleet) is None


class TestFindInvariantViolations:
    """Tests for whole-fleet invariant checks."""

    def test_clean_fleet(self):
        assert find_invariant_violations(make_fleet(available=19, maintenance=1)) == []

    def test_duplicate_plates_reported(self):
        fleet = make_fleet(available=2)
        fleet[1].license_plate = "flt-001"
        problems = find_invariant_violations(fleet)
        assert any("duplicates vehicle 1" in p for p in problems)

    def test_quota_breach_reported(self):
        problems = find_invariant_violations(make_fleet(available=18, maintenance=2))
        assert problems == ["2 of 20 vehicles in maintenance, max allowed: 1"]

    def test_bad_format_reported(self):
        fleet = make_fleet(available=1)
        fleet[0].license_plate = "bad"
        problems = find_invariant_violations(fleet)
        assert problems[0].startswith("Vehicle 1:")
