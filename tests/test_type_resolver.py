"""Unit tests for schema to type descriptor resolution."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from discovery_client_generator.discovery import JsonSchema
from discovery_client_generator.errors import MalformedDescriptionError, MissingContextError
from discovery_client_generator.model_types import (
    ClassDef,
    EnumDef,
    ListType,
    MapType,
    NamedType,
    PrimitiveKind,
    PrimitiveType,
    VoidType,
)
from discovery_client_generator.naming import resolve_identifier
from discovery_client_generator.type_resolver import RFC3339_OVERRIDE, Resolution, TypeResolver

_MODEL_MODULE = "generated.demo.model"
_ENCLOSING = NamedType(module=_MODEL_MODULE, path=("Event",))


def _schema(payload: dict[str, Any]) -> JsonSchema:
    return JsonSchema.model_validate(payload)


def _resolve(
    payload: dict[str, Any],
    hint: str = "value",
    enclosing: NamedType = _ENCLOSING,
) -> Resolution:
    resolver = TypeResolver(_MODEL_MODULE)
    return resolver.resolve(_schema(payload), resolve_identifier(hint), enclosing)


def test_reference_resolves_to_model_type() -> None:
    """A ``$ref`` names a top-level model and emits nothing."""
    resolution = _resolve({"$ref": "EventDateTime"})
    assert resolution.type == NamedType(module=_MODEL_MODULE, path=("EventDateTime",))
    assert resolution.top_level == ()
    assert resolution.nested == ()


@pytest.mark.parametrize(
    ("payload", "kind"),
    [
        ({"type": "string"}, PrimitiveKind.STRING),
        ({"type": "string", "format": "date"}, PrimitiveKind.DATE),
        ({"type": "string", "format": "date-time"}, PrimitiveKind.DATETIME_OFFSET),
        ({"type": "string", "format": "int64"}, PrimitiveKind.INT64),
        ({"type": "string", "format": "uint64"}, PrimitiveKind.INT64),
        ({"type": "integer"}, PrimitiveKind.INT32),
        ({"type": "integer", "format": "uint32"}, PrimitiveKind.INT32),
        ({"type": "number"}, PrimitiveKind.INT64),
        ({"type": "number", "format": "float"}, PrimitiveKind.FLOAT32),
        ({"type": "number", "format": "double"}, PrimitiveKind.FLOAT64),
        ({"type": "boolean"}, PrimitiveKind.BOOLEAN),
        ({"type": "any"}, PrimitiveKind.ANY),
    ],
)
def test_primitive_mapping(payload: dict[str, Any], kind: PrimitiveKind) -> None:
    """Scalar schemas map to their primitive kind without warnings."""
    resolution = _resolve(payload)
    assert resolution.type == PrimitiveType(kind)
    assert resolution.warnings == ()


def test_null_resolves_to_void() -> None:
    """``null`` schemas resolve to void."""
    assert _resolve({"type": "null"}).type == VoidType()


def test_time_zone_field_resolves_to_timezone() -> None:
    """A plain string field named ``timeZone`` becomes a time zone."""
    resolution = _resolve({"type": "string"}, hint="timeZone")
    assert resolution.type == PrimitiveType(PrimitiveKind.TIMEZONE)


def test_nested_arrays_resolve_recursively() -> None:
    """Arrays of arrays of integers become lists of lists of int32."""
    resolution = _resolve(
        {"type": "array", "items": {"type": "array", "items": {"type": "integer"}}}
    )
    assert resolution.type == ListType(ListType(PrimitiveType(PrimitiveKind.INT32)))


def test_array_without_items_is_malformed() -> None:
    """An array must declare its item schema."""
    with pytest.raises(MalformedDescriptionError):
        _resolve({"type": "array"})


def test_additional_properties_resolve_to_map() -> None:
    """Objects with only ``additionalProperties`` become string-keyed maps."""
    resolution = _resolve({"type": "object", "additionalProperties": {"type": "boolean"}})
    assert resolution.type == MapType(PrimitiveType(PrimitiveKind.BOOLEAN))


def test_unknown_number_format_warns() -> None:
    """Unrecognized number formats fall back to int64 with a warning."""
    resolution = _resolve({"type": "number", "format": "decimal"})
    assert resolution.type == PrimitiveType(PrimitiveKind.INT64)
    assert len(resolution.warnings) == 1
    assert "decimal" in resolution.warnings[0]


def test_unknown_type_warns_and_resolves_to_void() -> None:
    """Unrecognized schema types resolve to void with a warning."""
    resolution = _resolve({"type": "mystery"})
    assert resolution.type == VoidType()
    assert "mystery" in resolution.warnings[0]


def test_mined_enum_is_nested_in_enclosing_class() -> None:
    """Descriptions with the marker produce a nested enum named after the field."""
    resolution = _resolve(
        {
            "type": "string",
            "description": 'Possible values are: "A" - First. "B" - Second.',
        },
        hint="status",
    )
    assert resolution.type == _ENCLOSING.nested("Status")
    (enum,) = resolution.nested
    assert isinstance(enum, EnumDef)
    assert [constant.identifier.name for constant in enum.constants] == ["A", "B"]
    assert [constant.documentation for constant in enum.constants] == ["First.", "Second."]


def test_enum_list_with_descriptions_becomes_enum() -> None:
    """``enum`` lists produce constants documented by ``enumDescriptions``."""
    resolution = _resolve(
        {
            "type": "string",
            "enum": ["low", "high", "high-ish"],
            "enumDescriptions": ["Can wait.", "Do it now."],
        },
        hint="priority",
    )
    (enum,) = resolution.nested
    assert isinstance(enum, EnumDef)
    assert [constant.identifier.wire_name for constant in enum.constants] == [
        "low",
        "high",
        "high-ish",
    ]
    assert [constant.documentation for constant in enum.constants] == [
        "Can wait.",
        "Do it now.",
        None,
    ]


def test_duplicate_enum_constant_names_are_suffixed() -> None:
    """Values that sanitize to the same name stay distinct."""
    resolution = _resolve(
        {"type": "string", "enum": ["in-progress", "in progress"]}, hint="state"
    )
    (enum,) = resolution.nested
    assert isinstance(enum, EnumDef)
    assert [constant.identifier.name for constant in enum.constants] == [
        "in_progress",
        "in_progress_2",
    ]


_MINED_STATUS = {
    "type": "string",
    "description": 'Possible values are: "A" - First. "B" - Second.',
}


def test_mined_enum_without_enclosing_context_names_the_field() -> None:
    """A mined enum needs an enclosing class; the error names the field."""
    resolver = TypeResolver(_MODEL_MODULE)
    with pytest.raises(MissingContextError, match="status"):
        resolver.resolve(_schema(_MINED_STATUS), resolve_identifier("status"), None)


def test_mined_enum_without_hint_is_malformed() -> None:
    """A mined enum needs a field name."""
    resolver = TypeResolver(_MODEL_MODULE)
    with pytest.raises(MalformedDescriptionError, match="no field name"):
        resolver.resolve(_schema(_MINED_STATUS), None, _ENCLOSING)


@pytest.mark.parametrize(
    ("hint", "enclosing"),
    [
        (None, _ENCLOSING),
        ("status", None),
        (None, None),
    ],
)
def test_enum_list_without_naming_context_stays_a_string(
    hint: Optional[str], enclosing: Optional[NamedType]
) -> None:
    """Enum lists outside a named field resolve to plain strings."""
    resolver = TypeResolver(_MODEL_MODULE)
    resolution = resolver.resolve(
        _schema({"type": "string", "enum": ["RED", "GREEN"]}),
        resolve_identifier(hint) if hint is not None else None,
        enclosing,
    )
    assert resolution == Resolution(type=PrimitiveType(PrimitiveKind.STRING))


def test_enum_list_array_items_without_context_stay_strings() -> None:
    """Items of a top-level array schema carry no field name."""
    resolver = TypeResolver(_MODEL_MODULE)
    resolution = resolver.resolve(
        _schema({"id": "Colors", "type": "array", "items": {"type": "string", "enum": ["RED"]}})
    )
    assert resolution.type == ListType(PrimitiveType(PrimitiveKind.STRING))
    assert resolution.nested == ()


def test_anonymous_object_becomes_nested_model() -> None:
    """Objects without an id are nested inside the enclosing class."""
    resolution = _resolve(
        {
            "type": "object",
            "properties": {
                "email": {"type": "string"},
                "responseStatus": {"type": "string", "enum": ["accepted", "declined"]},
            },
        },
        hint="attendees",
    )
    assert resolution.type == _ENCLOSING.nested("Attendees")
    (model,) = resolution.nested
    assert isinstance(model, ClassDef)
    assert [field.identifier.name for field in model.fields] == ["email", "responseStatus"]
    (status,) = model.nested
    assert status.name == _ENCLOSING.nested("Attendees").nested("ResponseStatus")


def test_anonymous_object_without_context_names_the_field() -> None:
    """Nested objects without an enclosing class raise a missing context error."""
    resolver = TypeResolver(_MODEL_MODULE)
    with pytest.raises(MissingContextError, match="attendees"):
        resolver.resolve(
            _schema({"type": "object", "properties": {"email": {"type": "string"}}}),
            resolve_identifier("attendees"),
            None,
        )


def test_object_without_name_is_malformed() -> None:
    """Objects with neither id, field name, nor additional properties fail."""
    resolver = TypeResolver(_MODEL_MODULE)
    with pytest.raises(MalformedDescriptionError, match="No name derivable"):
        resolver.resolve(_schema({"type": "object"}), None, None)


def test_identified_object_is_emitted_top_level_after_its_dependencies() -> None:
    """Objects with an id are top-level; nested ids they contain come first."""
    resolver = TypeResolver(_MODEL_MODULE)
    resolution = resolver.resolve(
        _schema(
            {
                "id": "Outer",
                "type": "object",
                "description": "Outer model.",
                "properties": {
                    "inner": {
                        "id": "Inner",
                        "type": "object",
                        "description": "Inner model.",
                        "properties": {"value": {"type": "string"}},
                    }
                },
            }
        )
    )
    assert resolution.type == NamedType(module=_MODEL_MODULE, path=("Outer",))
    assert [model.name.simple_name for model in resolution.top_level] == ["Inner", "Outer"]
    inner, outer = resolution.top_level
    assert inner.documentation is None
    assert outer.documentation == "Outer model."
    assert resolution.nested == ()


def test_rfc3339_description_sets_serialization_override() -> None:
    """Date-time fields documented as RFC3339 carry a serialization override."""
    resolver = TypeResolver(_MODEL_MODULE)
    resolution = resolver.resolve(
        _schema(
            {
                "id": "Stamp",
                "type": "object",
                "properties": {
                    "at": {
                        "type": "string",
                        "format": "date-time",
                        "description": "Timestamp formatted according to RFC3339.",
                    },
                    "plain": {"type": "string", "format": "date-time"},
                },
            }
        )
    )
    (model,) = resolution.top_level
    assert isinstance(model, ClassDef)
    overrides = {field.identifier.name: field.serialization_override for field in model.fields}
    assert overrides == {"at": RFC3339_OVERRIDE, "plain": None}


def test_resolution_is_deterministic() -> None:
    """Resolving the same schema twice yields equal results."""
    payload = {
        "id": "Event",
        "type": "object",
        "properties": {
            "status": {"type": "string", "enum": ["a", "b"]},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    }
    first = TypeResolver(_MODEL_MODULE).resolve(_schema(payload))
    second = TypeResolver(_MODEL_MODULE).resolve(_schema(payload))
    assert first == second
