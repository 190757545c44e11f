"""Generator configuration loaded from YAML files and merged with CLI flags."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .loader import DiscoveryLoadError, parse_api_selector


class ConfigError(RuntimeError):
    """Raised when a configuration file is unreadable or invalid."""


class GeneratorConfig(BaseModel):
    """Effective generator settings.

    ``apis`` selects documents as ``name:version`` pairs inside ``input_dir``;
    ``input`` names a single document instead.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_package: str = ""
    output_dir: Optional[Path] = None
    input: Optional[Path] = None
    input_dir: Optional[Path] = None
    apis: tuple[str, ...] = Field(default_factory=tuple)
    verify: bool = False

    @field_validator("apis")
    @classmethod
    def _check_selectors(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for selector in value:
            try:
                parse_api_selector(selector)
            except DiscoveryLoadError as exc:
                raise ValueError(str(exc)) from exc
        return value

    @field_validator("base_package")
    @classmethod
    def _check_base_package(cls, value: str) -> str:
        if value and not all(part.isidentifier() for part in value.split(".")):
            raise ValueError(f"base_package must be a dotted Python package name, got {value!r}")
        return value

    def merged(self, **overrides: Any) -> GeneratorConfig:
        """Return a copy with every override that is not ``None`` applied.

        Args:
            **overrides (Any): Field values taken from CLI flags.

        Returns:
            GeneratorConfig: Validated merged configuration.
        """
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return GeneratorConfig.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid generator settings: {exc}") from exc


def load_config(path: Path) -> GeneratorConfig:
    """Load generator settings from a YAML file.

    Relative paths in the file are resolved against the file's directory.

    Args:
        path (Path): Path to a YAML configuration file.

    Returns:
        GeneratorConfig: Validated configuration.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(payload)!r}")

    for key in ("output_dir", "input", "input_dir"):
        value = payload.get(key)
        if isinstance(value, str):
            payload[key] = path.parent / value

    try:
        return GeneratorConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Config file validation failed for {path}: {exc}") from exc
