"""Language-neutral descriptors produced by generation and consumed by rendering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .json_types import JSONObject


@dataclass(frozen=True)
class Identifier:
    """A keyword-safe in-code name paired with its original wire name."""

    name: str
    wire_name: str

    @property
    def renamed(self) -> bool:
        """Whether the in-code name diverges from the wire name."""
        return self.name != self.wire_name


class PrimitiveKind(str, Enum):
    """Primitive value kinds a schema node can resolve to."""

    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME_OFFSET = "datetime_offset"
    TIMEZONE = "timezone"
    ANY = "any"


@dataclass(frozen=True)
class NamedType:
    """A generated class or enum addressed by module and nesting path."""

    module: str
    path: tuple[str, ...]

    @property
    def simple_name(self) -> str:
        return self.path[-1]

    @property
    def top_level(self) -> NamedType:
        return NamedType(module=self.module, path=self.path[:1])

    @property
    def qualified_name(self) -> str:
        return ".".join((self.module, *self.path))

    def nested(self, name: str) -> NamedType:
        """Return the type of a class nested directly inside this one."""
        return NamedType(module=self.module, path=(*self.path, name))


@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind


@dataclass(frozen=True)
class ListType:
    item: TypeDescriptor


@dataclass(frozen=True)
class MapType:
    """A string-keyed map; keys are always strings in discovery documents."""

    value: TypeDescriptor


@dataclass(frozen=True)
class VoidType:
    pass


@dataclass(frozen=True)
class TypeVariable:
    name: str


@dataclass(frozen=True)
class GenericType:
    """A named generic type instantiated with type arguments."""

    base: NamedType
    arguments: tuple[TypeDescriptor, ...]


type TypeDescriptor = Union[
    NamedType, PrimitiveType, ListType, MapType, VoidType, TypeVariable, GenericType
]


@dataclass(frozen=True)
class FieldDef:
    """A field of a generated class."""

    identifier: Identifier
    type: TypeDescriptor
    is_key: bool = False
    required: bool = False
    documentation: Optional[str] = None
    serialization_override: Optional[str] = None


@dataclass(frozen=True)
class ParamDef:
    """A constructor or factory method parameter."""

    identifier: Identifier
    type: TypeDescriptor


@dataclass(frozen=True)
class ClientRef:
    """The client instance a component was created from."""


@dataclass(frozen=True)
class TypeRef:
    type: TypeDescriptor


@dataclass(frozen=True)
class HttpVerb:
    verb: str


@dataclass(frozen=True)
class ConstantRef:
    name: str


@dataclass(frozen=True)
class FieldRef:
    name: str


@dataclass(frozen=True)
class ParamRef:
    name: str


@dataclass(frozen=True)
class Absent:
    """An explicit "no value" argument."""


type CallArgument = Union[ClientRef, TypeRef, HttpVerb, ConstantRef, FieldRef, ParamRef, Absent]


@dataclass(frozen=True)
class SuperCall:
    """Arguments forwarded to the super type's constructor, in order."""

    arguments: tuple[CallArgument, ...]


@dataclass(frozen=True)
class RequiredCheck:
    """A fail-fast check that a required parameter was supplied."""

    param: str
    message: str


@dataclass(frozen=True)
class ConstructorDef:
    """Constructor of a generated class.

    ``takes_client`` marks components created from a client; the client is
    passed ahead of ``params`` and is not part of the declared parameter list.
    """

    params: tuple[ParamDef, ...]
    required_checks: tuple[RequiredCheck, ...] = ()
    assigned_fields: tuple[str, ...] = ()
    super_call: Optional[SuperCall] = None
    takes_client: bool = False


@dataclass(frozen=True)
class FactoryMethod:
    """A method on an outer class constructing and returning a nested component."""

    identifier: Identifier
    params: tuple[ParamDef, ...]
    returns: NamedType
    documentation: Optional[str] = None


@dataclass(frozen=True)
class ConstantDef:
    """A class-level string constant.

    ``value`` holds a literal; ``concat`` joins other constants of the class.
    """

    name: str
    value: Optional[str] = None
    concat: tuple[str, ...] = ()


class ClassKind(str, Enum):
    MODEL = "model"
    COMPONENT = "component"
    REQUEST_BASE = "request_base"
    CLIENT = "client"


@dataclass(frozen=True)
class EnumConstant:
    identifier: Identifier
    documentation: Optional[str] = None


@dataclass(frozen=True)
class EnumDef:
    """A generated enum; constant order matches discovery order."""

    name: NamedType
    constants: tuple[EnumConstant, ...]
    documentation: Optional[str] = None


@dataclass(frozen=True)
class ClassDef:
    """A generated class with its fields, nested types, and members."""

    name: NamedType
    kind: ClassKind
    fields: tuple[FieldDef, ...] = ()
    nested: tuple[TypeDef, ...] = ()
    constants: tuple[ConstantDef, ...] = ()
    constructor: Optional[ConstructorDef] = None
    factory_methods: tuple[FactoryMethod, ...] = ()
    super_type: Optional[TypeDescriptor] = None
    type_params: tuple[TypeVariable, ...] = ()
    documentation: Optional[str] = None


type TypeDef = Union[ClassDef, EnumDef]


@dataclass(frozen=True)
class GeneratedApi:
    """All top-level descriptors generated for one API."""

    api_name: str
    api_version: str
    package: str
    model_package: str
    models: tuple[TypeDef, ...]
    request_class: ClassDef
    client_class: ClassDef
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ModelCheckItem:
    """A generated model paired with the discovery schema it came from."""

    api_name: str
    class_name: str
    model_package: str
    source_schema: JSONObject


@dataclass(frozen=True)
class GenerationResult:
    """Generation output metadata."""

    output_dir: str
    apis: tuple[GeneratedApi, ...]
    check_items: tuple[ModelCheckItem, ...]
    warnings: tuple[str, ...]
