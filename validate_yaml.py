#!/usr/bin/env python3
"""Check a fleet data file: schema shape first, then the fleet-wide rules."""
import argparse
import sys
from pathlib import Path

import yaml
from jsonschema import Draft7Validator

from fleet import default_data_file, find_invariant_violations
from fleet.store import vehicles_from_data

SCHEMA_FILE = Path(__file__).parent / "schema.yaml"


def load_schema() -> dict:
    with open(SCHEMA_FILE) as f:
        return yaml.safe_load(f)


def schema_errors(data, schema: dict) -> list[str]:
    """Every schema violation in the document, in path order."""
    problems = []
    validator = Draft7Validator(schema)
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
        problems.append(f"Schema validation error: {error.message}")
        if error.path:
            problems.append(f"  at path: {'.'.join(str(p) for p in error.path)}")
    return problems


def validate_fleet_file(filepath: Path, schema: dict) -> list[str]:
    """
    Validate a fleet data file and return the problems found.

    The fleet rules (plate format, unique plates, maintenance quota) are only
    checked once the document matches the schema, since they need every
    record to be well formed.
    """
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    problems = schema_errors(data, schema)
    if problems:
        return problems
    return find_invariant_violations(vehicles_from_data(data))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate a fleet data file")
    parser.add_argument(
        "data_file",
        nargs="?",
        type=Path,
        help="fleet YAML file (default: FLEET_DATA_FILE or data/vehicles.yaml)",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    filepath = args.data_file or default_data_file()

    if not filepath.exists():
        print(f"Error: fleet file not found: {filepath}")
        return 1

    problems = validate_fleet_file(filepath, load_schema())
    if problems:
        print(f"FAIL: {filepath.name}")
        for problem in problems:
            print(f"  {problem}")
        return 1

    print(f"OK: {filepath.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
