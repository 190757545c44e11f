"""Pydantic models for the parts of a discovery document the generator reads."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .json_types import JSONObject


class DiscoveryModel(BaseModel):
    """Base for discovery models: camelCase on the wire, unknown keys kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


class JsonSchema(DiscoveryModel):
    """One schema node: a named schema, a property, or a method parameter."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    id: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[dict[str, JsonSchema]] = None
    additional_properties: Optional[JsonSchema] = None
    items: Optional[JsonSchema] = None
    enum: Optional[list[str]] = None
    enum_descriptions: Optional[list[str]] = None
    required: Optional[bool] = None
    location: Optional[str] = None
    repeated: Optional[bool] = None
    pattern: Optional[str] = None
    default: Any = None

    def to_source(self) -> JSONObject:
        """Return the schema as it appeared in the document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SchemaRef(DiscoveryModel):
    """Request or response body reference of a method."""

    ref: str = Field(alias="$ref")
    parameter_name: Optional[str] = None


class RestMethod(DiscoveryModel):
    id: Optional[str] = None
    path: str
    http_method: str
    description: Optional[str] = None
    parameter_order: list[str] = Field(default_factory=list)
    parameters: dict[str, JsonSchema] = Field(default_factory=dict)
    request: Optional[SchemaRef] = None
    response: Optional[SchemaRef] = None


class RestResource(DiscoveryModel):
    methods: dict[str, RestMethod] = Field(default_factory=dict)
    resources: dict[str, RestResource] = Field(default_factory=dict)


class RestDescription(DiscoveryModel):
    """Top-level ``discovery#restDescription`` document."""

    kind: Optional[str] = None
    name: str
    version: str
    title: Optional[str] = None
    description: Optional[str] = None
    root_url: str = ""
    service_path: str = ""
    batch_path: Optional[str] = None
    parameters: dict[str, JsonSchema] = Field(default_factory=dict)
    schemas: dict[str, JsonSchema] = Field(default_factory=dict)
    resources: dict[str, RestResource] = Field(default_factory=dict)
    methods: dict[str, RestMethod] = Field(default_factory=dict)

    @property
    def selector(self) -> str:
        """Return the ``name:version`` pair identifying this API."""
        return f"{self.name}:{self.version}"


def parse_description(payload: dict[str, Any]) -> RestDescription:
    """Validate a raw document mapping into a ``RestDescription``."""
    return RestDescription.model_validate(payload)
