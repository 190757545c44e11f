"""Fixture-based discovery document validation tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import pytest
import yaml
from pydantic import ValidationError

from discovery_client_generator.discovery import RestDescription
from discovery_client_generator.naming import api_name_to_package_name
from .fixture_helpers import fixture_dir, parametrize_fixtures


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        pytest.fail(f"Failed to parse {path}: {exc}")
    except OSError as exc:
        pytest.fail(f"Failed to read fixture {path}: {exc}")

    if not isinstance(data, dict):
        pytest.fail(f"Fixture {path} must parse to a mapping, got {type(data)!r}")

    return cast(dict[str, Any], data)


def test_fixture_directory_exists() -> None:
    """Ensure the fixtures directory is present."""
    assert fixture_dir().is_dir(), f"Fixture directory not found: {fixture_dir()}"


@parametrize_fixtures()
def test_fixture_is_valid_discovery_document(fixture_path: Path) -> None:
    """Validate each fixture against the discovery document model."""
    data = _load_yaml(fixture_path)
    try:
        description = RestDescription.model_validate(data)
    except ValidationError as exc:
        pytest.fail(f"Discovery validation failed for {fixture_path}:\n{exc}")
    package = api_name_to_package_name(description.name)
    assert fixture_path.name == f"{package}.{description.version}.json"


@parametrize_fixtures()
def test_fixture_schema_ids_match_their_keys(fixture_path: Path) -> None:
    """Every named schema carries its own key as ``id``."""
    description = RestDescription.model_validate(_load_yaml(fixture_path))
    for key, schema in description.schemas.items():
        assert schema.id == key, f"{fixture_path.name}: schema {key} has id {schema.id}"
