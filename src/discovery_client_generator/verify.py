"""Verification of generated pydantic models against their discovery schemas."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Optional

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from pydantic import BaseModel

from .json_types import JSONObject
from .model_types import ModelCheckItem
from .module_loading import import_generated_module
from .naming import python_type_name

logger = logging.getLogger(__name__)

_STRING_INTEGER_FORMATS = {"int64", "uint64"}
_NUMBER_FORMATS = {"float", "double"}
_PLAIN_TYPES = {"integer": "integer", "boolean": "boolean"}


@dataclass(frozen=True)
class Mismatch:
    """Subset mismatch information."""

    path: str
    expected: Any
    actual: Any


@dataclass(frozen=True)
class VerificationMismatch:
    """One verification mismatch."""

    api_name: str
    class_name: str
    path: str
    expected: Any
    actual: Any


@dataclass(frozen=True)
class VerificationReport:
    """Result of the verification phase."""

    verified_count: int
    mismatch_count: int
    mismatches: tuple[VerificationMismatch, ...]


def verify_models(
    *,
    items: list[ModelCheckItem],
    output_dir: Path,
) -> VerificationReport:
    """Check generated model JSON schemas against the source discovery schemas.

    Every generated schema must be a valid JSON schema, and must declare each
    source property under its wire name with a compatible JSON type.

    Args:
        items (list[ModelCheckItem]): Models to check.
        output_dir (Path): Root directory of the generated tree.

    Returns:
        VerificationReport: Counts and mismatch details.
    """
    mismatches: list[VerificationMismatch] = []
    packages: dict[str, Any] = {}

    for item in items:
        if item.model_package not in packages:
            packages[item.model_package] = import_generated_module(
                output_dir=output_dir,
                module_name=item.model_package,
            )
        generated_class = _model_class(packages[item.model_package], item)
        generated_schema = generated_class.model_json_schema(by_alias=True)

        mismatch = _meta_schema_mismatch(generated_schema)
        if mismatch is None:
            mismatch = subset_mismatch(
                expected_shape(item.source_schema),
                generated_shape(generated_schema, defs=generated_schema.get("$defs", {})),
            )
        if mismatch is not None:
            logger.debug("Model %s differs at %s", item.class_name, mismatch.path)
            mismatches.append(
                VerificationMismatch(
                    api_name=item.api_name,
                    class_name=item.class_name,
                    path=mismatch.path,
                    expected=mismatch.expected,
                    actual=mismatch.actual,
                )
            )

    return VerificationReport(
        verified_count=len(items),
        mismatch_count=len(mismatches),
        mismatches=tuple(mismatches),
    )


def format_report(report: VerificationReport) -> str:
    """Render report as CLI output text."""
    lines = [
        f"Verified models: {report.verified_count}",
        f"Mismatches: {report.mismatch_count}",
    ]
    for mismatch in report.mismatches:
        lines.extend(
            [
                f"- {mismatch.api_name}.{mismatch.class_name}",
                f"  path: {mismatch.path}",
                f"  expected: {short_repr(mismatch.expected)}",
                f"  actual: {short_repr(mismatch.actual)}",
            ]
        )
    return "\n".join(lines)


def short_repr(value: Any, *, limit: int = 160) -> str:
    """A short representation for mismatch diagnostics."""
    text = repr(value)
    return text if len(text) <= limit else f"{text[: limit - 3]}..."


def expected_shape(schema: JSONObject) -> dict[str, Any]:
    """Reduce a discovery schema to the JSON types its generated model must declare."""
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return {"type": "object"}
    return {
        "type": "object",
        "properties": {
            str(name): _expected_property(value)
            for name, value in properties.items()
            if isinstance(value, dict)
        },
    }


def generated_shape(schema: dict[str, Any], *, defs: dict[str, Any]) -> dict[str, Any]:
    """Reduce a pydantic JSON schema to the same shape as ``expected_shape``."""
    node = _resolve(schema, defs=defs)
    properties = node.get("properties")
    shape: dict[str, Any] = {"type": node.get("type", "object")}
    if isinstance(properties, dict):
        shape["properties"] = {
            str(name): _generated_property(value, defs=defs)
            for name, value in properties.items()
            if isinstance(value, dict)
        }
    return shape


def subset_mismatch(expected: Any, actual: Any, *, path: str = "$") -> Optional[Mismatch]:
    """Return first mismatch where expected is not a subset of actual."""
    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            return Mismatch(path=path, expected=expected, actual=actual)
        for key, expected_value in expected.items():
            if key not in actual:
                return Mismatch(path=f"{path}.{key}", expected=expected_value, actual=None)
            mismatch = subset_mismatch(expected_value, actual[key], path=f"{path}.{key}")
            if mismatch is not None:
                return mismatch
        return None

    if expected == actual:
        return None
    return Mismatch(path=path, expected=expected, actual=actual)


def _expected_property(schema: JSONObject) -> dict[str, Any]:
    if "$ref" in schema:
        return {"type": "object"}
    schema_type = schema.get("type")
    schema_format = schema.get("format")
    if schema_type == "string":
        if schema_format in _STRING_INTEGER_FORMATS:
            return {"type": "integer"}
        return {"type": "string"}
    if schema_type == "number":
        return {"type": "number" if schema_format in _NUMBER_FORMATS else "integer"}
    if schema_type in _PLAIN_TYPES:
        return {"type": _PLAIN_TYPES[schema_type]}
    if schema_type == "array":
        items = schema.get("items")
        if isinstance(items, dict):
            return {"type": "array", "items": _expected_property(items)}
        return {"type": "array"}
    if schema_type == "object":
        return {"type": "object"}
    return {}


def _generated_property(schema: dict[str, Any], *, defs: dict[str, Any]) -> dict[str, Any]:
    node = _resolve(_strip_null(schema), defs=defs)
    if "enum" in node and "type" not in node:
        return {"type": "string"}
    shape: dict[str, Any] = {}
    if "type" in node:
        shape["type"] = node["type"]
    items = node.get("items")
    if isinstance(items, dict):
        shape["items"] = _generated_property(items, defs=defs)
    return shape


def _strip_null(schema: dict[str, Any]) -> dict[str, Any]:
    any_of = schema.get("anyOf")
    if not isinstance(any_of, list):
        return schema
    options = [
        option
        for option in any_of
        if isinstance(option, dict) and option.get("type") != "null"
    ]
    if len(options) == 1:
        return options[0]
    return schema


def _resolve(schema: dict[str, Any], *, defs: dict[str, Any]) -> dict[str, Any]:
    ref = schema.get("$ref")
    if not isinstance(ref, str):
        return schema
    target = defs.get(ref.rsplit("/", maxsplit=1)[-1])
    if not isinstance(target, dict):
        return schema
    return target


def _meta_schema_mismatch(schema: dict[str, Any]) -> Optional[Mismatch]:
    try:
        validator_for(schema).check_schema(schema)
    except SchemaError as exc:
        return Mismatch(path="$", expected="valid JSON schema", actual=exc.message)
    return None


def _model_class(package: Any, item: ModelCheckItem) -> type[BaseModel]:
    value = getattr(package, python_type_name(item.class_name), None)
    if not isinstance(value, type) or not issubclass(value, BaseModel):
        raise RuntimeError(
            f"Generated class {item.class_name} is missing or invalid in {item.model_package}"
        )
    return value
