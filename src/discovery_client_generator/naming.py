"""Naming helpers for identifiers, type names, and generated module names."""

from __future__ import annotations

import keyword
import re
from typing import Optional

from .model_types import Identifier

_KEYWORD_SUFFIX = "__"
_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")
_IDENTIFIER_SANITIZE_RE = re.compile(r"[^0-9a-zA-Z_]+")
_MULTIPLE_UNDERSCORES_RE = re.compile(r"_+")


def resolve_identifier(raw_name: str) -> Identifier:
    """Map an API field or parameter name to a keyword-safe Python identifier.

    Args:
        raw_name (str): Name as it appears in the discovery document.

    Returns:
        Identifier: Pair of in-code name and original wire name.
    """
    name = f"{raw_name}{_KEYWORD_SUFFIX}" if keyword.iskeyword(raw_name) else raw_name
    return Identifier(name=name, wire_name=raw_name)


def to_type_name(identifier: Identifier) -> str:
    """Derive an upper-camel type name from a lower-camel field identifier."""
    return upper_camel(identifier.name)


def upper_camel(name: str) -> str:
    """Convert lower-camel text to upper-camel."""
    return name[:1].upper() + name[1:]


def lower_underscore(name: str) -> str:
    """Convert lower- or upper-camel text to lower_underscore."""
    return _CAMEL_BOUNDARY_RE.sub("_", name).lower()


def api_name_to_package_name(api_name: str) -> str:
    """Return the Python package name used for one generated API."""
    return module_name(lower_underscore(api_name))


def api_class_name(api_name: str) -> str:
    """Return the client class name for an API name such as ``youtubeAnalytics``."""
    clean = _IDENTIFIER_SANITIZE_RE.sub("_", api_name)
    return "".join(upper_camel(part) for part in clean.split("_") if part) or "Api"


def schema_module_name(schema_name: str) -> str:
    """Return the module name holding one top-level model class."""
    return module_name(lower_underscore(schema_name))


def module_name(raw: str) -> str:
    """Convert arbitrary text into an importable module name."""
    text = _IDENTIFIER_SANITIZE_RE.sub("_", raw)
    text = _MULTIPLE_UNDERSCORES_RE.sub("_", text).strip("_")
    if not text:
        text = "module"
    if text[0].isdigit():
        text = f"x_{text}"
    if keyword.iskeyword(text):
        text = f"{text}_"
    return text


def python_name(name: str) -> str:
    """Return ``name`` when it is a usable Python identifier, else a sanitized form.

    Wire names such as ``$.xgafv`` or ``@type`` become ``xgafv`` and ``type``.
    """
    if name.isidentifier() and not keyword.iskeyword(name):
        return name
    text = _MULTIPLE_UNDERSCORES_RE.sub("_", _IDENTIFIER_SANITIZE_RE.sub("_", name)).strip("_")
    if not text:
        text = "value"
    if text[0].isdigit():
        text = f"x_{text}"
    if keyword.iskeyword(text):
        text = f"{text}{_KEYWORD_SUFFIX}"
    return text


def python_type_name(name: str) -> str:
    """Return a class name for ``name``; non-identifiers become upper-camel words."""
    if name.isidentifier() and not keyword.iskeyword(name):
        return name
    clean = _IDENTIFIER_SANITIZE_RE.sub("_", name)
    text = "".join(upper_camel(part) for part in clean.split("_") if part) or "Type"
    if text[0].isdigit():
        text = f"X{text}"
    if keyword.iskeyword(text):
        text = f"{text}_"
    return text


def unique_name(name: str, used: set[str]) -> str:
    """Return ``name``, or ``name`` with trailing underscores, not yet in ``used``."""
    while name in used:
        name = f"{name}_"
    used.add(name)
    return name


def enum_constant_identifier(value: str) -> Identifier:
    """Map an enum value to a constant identifier, keeping the value as wire name.

    Values that are already identifiers go through ``resolve_identifier``
    unchanged; others are sanitized first.
    """
    if value.isidentifier():
        return resolve_identifier(value)
    text = _IDENTIFIER_SANITIZE_RE.sub("_", value).strip("_") or "EMPTY"
    if text[0].isdigit():
        text = f"x_{text}"
    if keyword.iskeyword(text):
        text = f"{text}{_KEYWORD_SUFFIX}"
    return Identifier(name=text, wire_name=value)


def clean_documentation(text: Optional[str]) -> Optional[str]:
    """Normalize description text for use as generated documentation."""
    if text is None:
        return None
    lines = [line.rstrip() for line in text.replace("\r\n", "\n").strip().split("\n")]
    cleaned = "\n".join(lines)
    return cleaned or None
