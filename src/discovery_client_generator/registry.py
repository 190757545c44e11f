"""Per-run registry of top-level generated types."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional

from .errors import DuplicateModelError
from .model_types import TypeDef

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Top-level model descriptors of one API, in registration order.

    Each name is emitted exactly once; registering a name twice is an error
    rather than an overwrite.
    """

    def __init__(self) -> None:
        self._models: dict[str, TypeDef] = {}

    def register(self, descriptor: TypeDef) -> None:
        name = descriptor.name.simple_name
        if name in self._models:
            raise DuplicateModelError(name)
        logger.debug("Registered model %s", descriptor.name.qualified_name)
        self._models[name] = descriptor

    def register_all(self, descriptors: Iterable[TypeDef]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def get(self, name: str) -> Optional[TypeDef]:
        return self._models.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[TypeDef]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)

    @property
    def models(self) -> tuple[TypeDef, ...]:
        return tuple(self._models.values())


@dataclass
class GenerationContext:
    """State owned by the single pass generating one API."""

    api_selector: str
    registry: ModelRegistry = field(default_factory=ModelRegistry)
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.debug("%s: %s", self.api_selector, message)
        self.warnings.append(message)

    def warn_all(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.warn(message)
