"""Base types extended by generated clients, and their constructor contract.

Generated request and client classes subclass the types below. The generator
does not introspect them; it relies on ``BASE_REQUEST`` and ``BASE_CLIENT``,
which list the constructor parameters generated code forwards. Any change to
a constructor here must bump ``RUNTIME_CONTRACT_VERSION`` and update the
matching contract entry.

Sending requests is left to subclasses of ``AbstractJsonClient``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Optional, TypeVar

from .model_types import NamedType, PrimitiveKind, PrimitiveType, TypeDescriptor

RUNTIME_CONTRACT_VERSION = 1

T = TypeVar("T")


@dataclass(frozen=True)
class ContractParam:
    name: str
    type: TypeDescriptor


@dataclass(frozen=True)
class RuntimeType:
    """A runtime base type as seen by the generator."""

    module: str
    name: str
    type_params: tuple[str, ...]
    constructor: tuple[ContractParam, ...]

    @property
    def named_type(self) -> NamedType:
        return NamedType(module=self.module, path=(self.name,))


class AbstractJsonClient:
    """Base of generated API clients."""

    DEFAULT_BASE_URL: ClassVar[str] = ""

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url = base_url if base_url is not None else self.DEFAULT_BASE_URL


class AbstractClientRequest(Generic[T]):
    """Base of generated request classes.

    ``PARAMETER_KEYS`` maps attribute names to the wire names of the request
    parameters a subclass declares.
    """

    PARAMETER_KEYS: ClassVar[dict[str, str]] = {}

    def __init__(
        self,
        client: AbstractJsonClient,
        response_type: Optional[type[T]],
        http_method: str,
        uri_template: str,
        content: Any,
    ) -> None:
        self.client = client
        self.response_type = response_type
        self.http_method = http_method
        self.uri_template = uri_template
        self.content = content

    def parameters(self) -> dict[str, Any]:
        """Return the set request parameters keyed by wire name."""
        values: dict[str, Any] = {}
        for cls in reversed(type(self).__mro__):
            for attribute, wire_name in vars(cls).get("PARAMETER_KEYS", {}).items():
                value = getattr(self, attribute, None)
                if value is not None:
                    values[wire_name] = value
        return values


_STRING = PrimitiveType(PrimitiveKind.STRING)
_ANY = PrimitiveType(PrimitiveKind.ANY)

BASE_CLIENT = RuntimeType(
    module=__name__,
    name=AbstractJsonClient.__name__,
    type_params=(),
    constructor=(ContractParam("base_url", _STRING),),
)

BASE_REQUEST = RuntimeType(
    module=__name__,
    name=AbstractClientRequest.__name__,
    type_params=("T",),
    constructor=(
        ContractParam("client", NamedType(module=__name__, path=("AbstractJsonClient",))),
        ContractParam("response_type", _ANY),
        ContractParam("http_method", _STRING),
        ContractParam("uri_template", _STRING),
        ContractParam("content", _ANY),
    ),
)
