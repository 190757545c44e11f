"""Resolve discovery schema nodes into type descriptors.

Resolution is pure: every call returns the resolved type together with the
descriptors it created. Callers merge ``top_level`` descriptors into the
model registry and ``nested`` descriptors into the class being built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .discovery import JsonSchema
from .enum_values import has_enum_marker, mine_enum_values
from .errors import MalformedDescriptionError, MissingContextError
from .model_types import (
    ClassDef,
    ClassKind,
    EnumConstant,
    EnumDef,
    FieldDef,
    Identifier,
    ListType,
    MapType,
    NamedType,
    PrimitiveKind,
    PrimitiveType,
    TypeDef,
    TypeDescriptor,
    VoidType,
)
from .naming import (
    clean_documentation,
    enum_constant_identifier,
    resolve_identifier,
    to_type_name,
)

RFC3339_MARKER = "formatted according to RFC3339"
RFC3339_OVERRIDE = "rfc3339"

_STRING_FORMATS: dict[str, PrimitiveKind] = {
    "date": PrimitiveKind.DATE,
    "date-time": PrimitiveKind.DATETIME_OFFSET,
    "int64": PrimitiveKind.INT64,
    "uint64": PrimitiveKind.INT64,
}
_NUMBER_FORMATS: dict[str, PrimitiveKind] = {
    "float": PrimitiveKind.FLOAT32,
    "double": PrimitiveKind.FLOAT64,
}
_SIMPLE_TYPES: dict[str, TypeDescriptor] = {
    "integer": PrimitiveType(PrimitiveKind.INT32),
    "boolean": PrimitiveType(PrimitiveKind.BOOLEAN),
    "null": VoidType(),
    "any": PrimitiveType(PrimitiveKind.ANY),
}
_TIME_ZONE_WIRE_NAME = "timeZone"


@dataclass(frozen=True)
class Resolution:
    """A resolved type plus the descriptors created while resolving it."""

    type: TypeDescriptor
    top_level: tuple[TypeDef, ...] = ()
    nested: tuple[TypeDef, ...] = ()
    warnings: tuple[str, ...] = ()

    def with_type(self, type_: TypeDescriptor) -> Resolution:
        return Resolution(
            type=type_,
            top_level=self.top_level,
            nested=self.nested,
            warnings=self.warnings,
        )


class TypeResolver:
    """Map schema nodes to type descriptors for one API's model module."""

    def __init__(self, model_module: str) -> None:
        self._model_module = model_module

    @property
    def model_module(self) -> str:
        return self._model_module

    def resolve_ref(self, ref: str) -> NamedType:
        """Return the model type a ``$ref`` points to."""
        return NamedType(module=self._model_module, path=(ref,))

    def resolve(
        self,
        schema: JsonSchema,
        hint: Optional[Identifier] = None,
        enclosing: Optional[NamedType] = None,
    ) -> Resolution:
        """Resolve one schema node.

        Args:
            schema (JsonSchema): Schema node to resolve.
            hint (Optional[Identifier]): Name of the field or parameter using
                the schema; names nested classes and enums.
            enclosing (Optional[NamedType]): Class that receives nested types.

        Returns:
            Resolution: Resolved type and newly created descriptors.
        """
        if schema.ref is not None:
            return Resolution(type=self.resolve_ref(schema.ref))

        schema_type = schema.type
        if schema_type == "object":
            return self._resolve_object(schema, hint, enclosing)
        if schema_type == "string":
            return self._resolve_string(schema, hint, enclosing)
        if schema_type == "number":
            return self._resolve_number(schema, hint)
        if schema_type == "array":
            if schema.items is None:
                raise MalformedDescriptionError(
                    f"Array schema {_schema_label(schema, hint)} has no items"
                )
            item = self.resolve(schema.items, hint, enclosing)
            return item.with_type(ListType(item.type))
        if schema_type in _SIMPLE_TYPES:
            return Resolution(type=_SIMPLE_TYPES[schema_type])

        return Resolution(
            type=VoidType(),
            warnings=(
                f"Don't know how to handle schema type {schema_type} "
                f"for schema {_schema_label(schema, hint)}",
            ),
        )

    def build_model(
        self,
        schema: JsonSchema,
        name: NamedType,
        documentation: Optional[str] = None,
    ) -> Resolution:
        """Build a model class from an object schema's properties.

        Property types are resolved with this class as enclosing context; the
        class itself is returned in ``nested`` and is left for the caller to
        place, after every descriptor its fields created.
        """
        fields: list[FieldDef] = []
        nested: list[TypeDef] = []
        top_level: list[TypeDef] = []
        warnings: list[str] = []
        for property_name, property_schema in (schema.properties or {}).items():
            identifier = resolve_identifier(property_name)
            resolution = self.resolve(property_schema, identifier, name)
            nested.extend(resolution.nested)
            top_level.extend(resolution.top_level)
            warnings.extend(resolution.warnings)
            fields.append(
                FieldDef(
                    identifier=identifier,
                    type=resolution.type,
                    documentation=clean_documentation(property_schema.description),
                    serialization_override=_serialization_override(
                        property_schema, resolution.type
                    ),
                )
            )

        model = ClassDef(
            name=name,
            kind=ClassKind.MODEL,
            fields=tuple(fields),
            nested=tuple(nested),
            documentation=documentation,
        )
        return Resolution(
            type=name,
            top_level=tuple(top_level),
            nested=(model,),
            warnings=tuple(warnings),
        )

    def _resolve_object(
        self,
        schema: JsonSchema,
        hint: Optional[Identifier],
        enclosing: Optional[NamedType],
    ) -> Resolution:
        if schema.id is not None:
            name = NamedType(module=self._model_module, path=(schema.id,))
            documentation = (
                clean_documentation(schema.description) if enclosing is None else None
            )
            built = self.build_model(schema, name, documentation)
            return Resolution(
                type=name,
                top_level=(*built.top_level, *built.nested),
                warnings=built.warnings,
            )

        if hint is not None and schema.properties is not None:
            if enclosing is None:
                raise MissingContextError(hint.name)
            built = self.build_model(schema, enclosing.nested(to_type_name(hint)))
            return built

        if schema.additional_properties is not None:
            value = self.resolve(schema.additional_properties, hint, enclosing)
            return value.with_type(MapType(value.type))

        raise MalformedDescriptionError(
            f"No name derivable for object schema {_schema_label(schema, hint)}"
        )

    def _resolve_string(
        self,
        schema: JsonSchema,
        hint: Optional[Identifier],
        enclosing: Optional[NamedType],
    ) -> Resolution:
        if schema.format is not None and schema.format in _STRING_FORMATS:
            return Resolution(type=PrimitiveType(_STRING_FORMATS[schema.format]))

        # Enum lists only name a nested enum where a field and its class are known.
        if schema.enum and hint is not None and enclosing is not None:
            descriptions = schema.enum_descriptions or []
            constants = tuple(
                EnumConstant(
                    identifier=enum_constant_identifier(value),
                    documentation=clean_documentation(
                        descriptions[index] if index < len(descriptions) else None
                    ),
                )
                for index, value in enumerate(schema.enum)
            )
            return self._nested_enum(constants, schema, hint, enclosing)

        if has_enum_marker(schema.description):
            constants = tuple(
                EnumConstant(
                    identifier=enum_constant_identifier(token),
                    documentation=clean_documentation(documentation),
                )
                for token, documentation in mine_enum_values(schema.description or "")
            )
            return self._nested_enum(constants, schema, hint, enclosing)

        if hint is not None and hint.wire_name == _TIME_ZONE_WIRE_NAME:
            return Resolution(type=PrimitiveType(PrimitiveKind.TIMEZONE))
        return Resolution(type=PrimitiveType(PrimitiveKind.STRING))

    def _nested_enum(
        self,
        constants: tuple[EnumConstant, ...],
        schema: JsonSchema,
        hint: Optional[Identifier],
        enclosing: Optional[NamedType],
    ) -> Resolution:
        if hint is None:
            raise MalformedDescriptionError(
                f"Enum-valued string schema {_schema_label(schema, hint)} has no field name"
            )
        if enclosing is None:
            raise MissingContextError(hint.name, kind="enum")
        name = enclosing.nested(to_type_name(hint))
        return Resolution(
            type=name,
            nested=(EnumDef(name=name, constants=_unique_constants(constants)),),
        )

    def _resolve_number(self, schema: JsonSchema, hint: Optional[Identifier]) -> Resolution:
        number_format = schema.format
        if number_format is None:
            return Resolution(type=PrimitiveType(PrimitiveKind.INT64))
        if number_format in _NUMBER_FORMATS:
            return Resolution(type=PrimitiveType(_NUMBER_FORMATS[number_format]))
        return Resolution(
            type=PrimitiveType(PrimitiveKind.INT64),
            warnings=(
                f"Don't know how to handle number format {number_format} "
                f"for schema {_schema_label(schema, hint)}",
            ),
        )


def _serialization_override(schema: JsonSchema, resolved: TypeDescriptor) -> Optional[str]:
    if resolved != PrimitiveType(PrimitiveKind.DATETIME_OFFSET):
        return None
    if schema.description is not None and RFC3339_MARKER in schema.description:
        return RFC3339_OVERRIDE
    return None


def _unique_constants(constants: tuple[EnumConstant, ...]) -> tuple[EnumConstant, ...]:
    used: set[str] = set()
    unique: list[EnumConstant] = []
    for constant in constants:
        name = constant.identifier.name
        if name in used:
            suffix = 2
            while f"{name}_{suffix}" in used:
                suffix += 1
            name = f"{name}_{suffix}"
            constant = EnumConstant(
                identifier=Identifier(name=name, wire_name=constant.identifier.wire_name),
                documentation=constant.documentation,
            )
        used.add(name)
        unique.append(constant)
    return tuple(unique)


def _schema_label(schema: JsonSchema, hint: Optional[Identifier]) -> str:
    if schema.id is not None:
        return schema.id
    if hint is not None:
        return hint.wire_name
    return "<anonymous>"
