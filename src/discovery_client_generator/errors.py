"""Error types raised while turning a discovery document into descriptors."""

from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for failures that abort generation of one API."""


class MalformedDescriptionError(GenerationError):
    """Raised when a schema or method cannot be mapped to a type."""


class MissingContextError(MalformedDescriptionError):
    """Raised when a nested type is requested without an enclosing class."""

    def __init__(self, field_name: str, kind: str = "class") -> None:
        super().__init__(f"Parent context for nested {kind} {field_name} missing")
        self.field_name = field_name


class DuplicateModelError(MalformedDescriptionError):
    """Raised when a model name is registered twice within one run."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Model {name} was already generated in this run")
        self.name = name


class ComponentScopeError(GenerationError):
    """Raised when component handles are finalized out of order."""


class ApiGenerationError(GenerationError):
    """Raised once per API when any structural error aborts its generation."""

    def __init__(self, api: str, cause: GenerationError) -> None:
        super().__init__(f"Generation of API {api} failed: {cause}")
        self.api = api
        self.cause = cause
