"""Shared helpers for fixture-driven tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import ParamSpec, TypeVar

import pytest

from discovery_client_generator.discovery import RestDescription
from discovery_client_generator.loader import load_discovery_document

_FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "discovery"
_P = ParamSpec("_P")
_R = TypeVar("_R")


def fixture_dir() -> Path:
    """Return the discovery document fixtures directory."""
    return _FIXTURE_DIR


def fixture_path(name: str) -> Path:
    """Return the path of one fixture, e.g. ``tasks.v1.json``."""
    return _FIXTURE_DIR / name


def load_fixture(name: str) -> RestDescription:
    """Load and validate one fixture document."""
    return load_discovery_document(fixture_path(name))


def iter_fixture_paths() -> list[Path]:
    """Return all discovery fixture paths sorted by name."""
    paths = sorted(_FIXTURE_DIR.glob("*.json")) + sorted(_FIXTURE_DIR.glob("*.yaml"))
    return [path for path in paths if path.is_file()]


def parametrize_fixtures() -> Callable[[Callable[_P, _R]], Callable[_P, _R]]:
    """Parametrize a test over all fixture paths."""

    def _decorator(func: Callable[_P, _R]) -> Callable[_P, _R]:
        decorator: Callable[[Callable[_P, _R]], Callable[_P, _R]]
        decorator = pytest.mark.parametrize(
            "fixture_path",
            iter_fixture_paths(),
            ids=lambda path: path.name,
        )
        return decorator(func)

    return _decorator
