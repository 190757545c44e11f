"""Discovery document loading and structural validation."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .discovery import RestDescription, parse_description
from .json_types import JSONValue

_DOCUMENT_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")


class DiscoveryLoadError(RuntimeError):
    """Raised when a source discovery document cannot be loaded."""


def load_discovery_document(path: Path) -> RestDescription:
    """Load and validate a discovery document.

    JSON documents are read through the YAML loader, which accepts them as-is.

    Args:
        path (Path): Path to a ``.json`` or ``.yaml`` discovery document.

    Returns:
        RestDescription: Validated API description.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise DiscoveryLoadError(f"Failed to read discovery document {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise DiscoveryLoadError(f"Failed to parse discovery document {path}: {exc}") from exc

    payload_value: JSONValue = payload
    if not isinstance(payload_value, dict):
        raise DiscoveryLoadError(
            f"Discovery document must deserialize to a mapping, got {type(payload_value)!r}"
        )

    try:
        return parse_description(payload_value)
    except ValidationError as exc:
        raise DiscoveryLoadError(f"Discovery document validation failed for {path}: {exc}") from exc


def find_discovery_document(input_dir: Path, name: str, version: str) -> Path:
    """Locate ``<name>.<version>`` with a supported suffix inside ``input_dir``."""
    for suffix in _DOCUMENT_SUFFIXES:
        candidate = input_dir / f"{name}.{version}{suffix}"
        if candidate.is_file():
            return candidate
    raise DiscoveryLoadError(
        f"No discovery document for {name}:{version} in {input_dir} "
        f"(tried {', '.join(_DOCUMENT_SUFFIXES)})"
    )


def parse_api_selector(selector: str) -> tuple[str, str]:
    """Split an ``apiName:apiVersion`` selector."""
    name, separator, version = selector.partition(":")
    if not separator or not name.strip() or not version.strip():
        raise DiscoveryLoadError(f"API selector must look like name:version, got {selector!r}")
    return name.strip(), version.strip()
