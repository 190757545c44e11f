"""Assemble all descriptors of one API: models, request base, and client."""

from __future__ import annotations

import logging
from typing import Optional

from .components import ClassBuilder, ComponentStack, component_type
from .discovery import JsonSchema, RestDescription, RestMethod, RestResource
from .errors import MalformedDescriptionError
from .model_types import (
    Absent,
    ClassDef,
    ClassKind,
    ClientRef,
    ConstantDef,
    ConstantRef,
    ConstructorDef,
    FieldDef,
    FieldRef,
    GeneratedApi,
    GenericType,
    HttpVerb,
    Identifier,
    NamedType,
    ParamDef,
    ParamRef,
    SuperCall,
    TypeDef,
    TypeDescriptor,
    TypeRef,
    TypeVariable,
    VoidType,
)
from .naming import (
    api_class_name,
    api_name_to_package_name,
    clean_documentation,
    resolve_identifier,
)
from .registry import GenerationContext
from .runtime import BASE_CLIENT, BASE_REQUEST
from .type_resolver import Resolution, TypeResolver

logger = logging.getLogger(__name__)

BODY_PARAM_NAME = "content"
REST_PATH_CONSTANT = "REST_PATH"


def api_package(base_package: str, api_name: str) -> str:
    """Return the dotted package generated code for ``api_name`` lives in."""
    package = api_name_to_package_name(api_name)
    return f"{base_package}.{package}" if base_package else package


class ClientAssembler:
    """Build every descriptor generated for one discovery document.

    An assembler owns its model registry and component stack; it is used for
    a single ``build`` call and then discarded.
    """

    def __init__(self, description: RestDescription, base_package: str) -> None:
        self._description = description
        self._context = GenerationContext(api_selector=description.selector)
        self._package = api_package(base_package, description.name)
        self._model_package = f"{self._package}.model"
        self._resolver = TypeResolver(self._model_package)
        self._components = ComponentStack()
        class_name = api_class_name(description.name)
        self._client_type = NamedType(module=self._package, path=(class_name,))
        self._request_type = NamedType(module=self._package, path=(f"{class_name}Request",))

    @property
    def context(self) -> GenerationContext:
        return self._context

    def build(self) -> GeneratedApi:
        """Generate models, the request base class, and the client class."""
        logger.info("Generating %s into %s", self._description.selector, self._package)
        self._create_model_classes()
        request_class = self._create_request_class()
        client_builder = self._create_client_class()
        return GeneratedApi(
            api_name=self._description.name,
            api_version=self._description.version,
            package=self._package,
            model_package=self._model_package,
            models=self._context.registry.models,
            request_class=request_class,
            client_class=client_builder.build(),
            warnings=tuple(self._context.warnings),
        )

    def _create_model_classes(self) -> None:
        for schema_name, schema in self._description.schemas.items():
            resolution = self._merge(self._resolver.resolve(schema))
            if schema.id is None or schema.id not in self._context.registry:
                self._context.warn(
                    f"Schema {schema_name} does not define an object model "
                    f"(resolved to {type(resolution.type).__name__})"
                )

    def _create_request_class(self) -> ClassDef:
        builder = ClassBuilder(
            name=self._request_type,
            kind=ClassKind.REQUEST_BASE,
            type_params=[TypeVariable(name) for name in BASE_REQUEST.type_params],
            super_type=GenericType(
                base=BASE_REQUEST.named_type,
                arguments=tuple(TypeVariable(name) for name in BASE_REQUEST.type_params),
            ),
        )
        for name, schema in self._description.parameters.items():
            builder.fields.append(self._optional_field(builder, name, schema))

        params = tuple(
            ParamDef(identifier=Identifier(name=param.name, wire_name=param.name), type=param.type)
            for param in BASE_REQUEST.constructor
        )
        constructor = ConstructorDef(
            params=params,
            super_call=SuperCall(
                arguments=tuple(ParamRef(param.name) for param in BASE_REQUEST.constructor)
            ),
        )
        return builder.build(constructor)

    def _create_client_class(self) -> ClassBuilder:
        description = self._description
        builder = ClassBuilder(
            name=self._client_type,
            kind=ClassKind.CLIENT,
            super_type=BASE_CLIENT.named_type,
            documentation=clean_documentation(description.description),
        )
        builder.add_constant("API_TITLE", description.title)
        builder.add_constant("API_VERSION", description.version)
        builder.add_constant("DEFAULT_ROOT_URL", description.root_url)
        builder.add_constant("DEFAULT_SERVICE_PATH", description.service_path)
        builder.add_constant("DEFAULT_BATCH_PATH", description.batch_path)
        builder.constants.append(
            ConstantDef(
                name="DEFAULT_BASE_URL",
                concat=("DEFAULT_ROOT_URL", "DEFAULT_SERVICE_PATH"),
            )
        )

        self._add_methods(builder, description.methods)
        self._add_resources(builder, description.resources)
        return builder

    def _add_resources(self, outer: ClassBuilder, resources: dict[str, RestResource]) -> None:
        for name, resource in resources.items():
            with self._components.open(outer, name) as handle:
                self._add_methods(handle.class_builder, resource.methods)
                self._add_resources(handle.class_builder, resource.resources)

    def _add_methods(self, outer: ClassBuilder, methods: dict[str, RestMethod]) -> None:
        for name, method in methods.items():
            method_type = component_type(outer.name, name)
            required_names = _required_parameter_names(method)

            nested: list[TypeDef] = []
            required: list[ParamDef] = []
            for param_name in required_names:
                identifier = resolve_identifier(param_name)
                resolution = self._merge(
                    self._resolver.resolve(method.parameters[param_name], identifier, method_type)
                )
                nested.extend(resolution.nested)
                required.append(ParamDef(identifier=identifier, type=resolution.type))

            body_param: Optional[ParamDef] = None
            if method.request is not None:
                body_param = ParamDef(
                    identifier=_body_identifier(method),
                    type=self._resolver.resolve_ref(method.request.ref),
                )
            response_type: TypeDescriptor = (
                self._resolver.resolve_ref(method.response.ref)
                if method.response is not None
                else VoidType()
            )

            with self._components.open(
                outer, name, method.description, body_param, *required
            ) as handle:
                builder = handle.class_builder
                builder.add_nested(tuple(nested))
                builder.super_type = GenericType(base=self._request_type, arguments=(response_type,))
                builder.add_constant(REST_PATH_CONSTANT, method.path)
                for param_name, schema in method.parameters.items():
                    if param_name in required_names:
                        continue
                    builder.fields.append(self._optional_field(builder, param_name, schema))
                handle.constructor_builder.super_call = SuperCall(
                    arguments=(
                        ClientRef(),
                        TypeRef(response_type),
                        HttpVerb(method.http_method),
                        ConstantRef(REST_PATH_CONSTANT),
                        (
                            FieldRef(body_param.identifier.name)
                            if body_param is not None
                            else Absent()
                        ),
                    )
                )

    def _optional_field(self, builder: ClassBuilder, name: str, schema: JsonSchema) -> FieldDef:
        identifier = resolve_identifier(name)
        resolution = self._merge(self._resolver.resolve(schema, identifier, builder.name))
        builder.add_nested(resolution.nested)
        return FieldDef(
            identifier=identifier,
            type=resolution.type,
            is_key=True,
            documentation=clean_documentation(schema.description),
        )

    def _merge(self, resolution: Resolution) -> Resolution:
        self._context.registry.register_all(resolution.top_level)
        self._context.warn_all(resolution.warnings)
        return resolution


def _body_identifier(method: RestMethod) -> Identifier:
    name = BODY_PARAM_NAME
    while name in method.parameters:
        name = f"{name}_"
    return Identifier(name=name, wire_name=name)


def _required_parameter_names(method: RestMethod) -> list[str]:
    names: list[str] = []
    for name in method.parameter_order:
        if name not in method.parameters:
            raise MalformedDescriptionError(
                f"Method {method.id or method.path} orders unknown parameter {name}"
            )
        names.append(name)
    for name, schema in method.parameters.items():
        if schema.required and name not in names:
            names.append(name)
    return names


def assemble(description: RestDescription, base_package: str) -> GeneratedApi:
    """Build the descriptors of one API with a fresh registry."""
    return ClientAssembler(description, base_package).build()
