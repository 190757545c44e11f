"""AST-based Python code generation for generated API packages."""

from __future__ import annotations

import ast
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from .model_types import (
    Absent,
    CallArgument,
    ClassDef,
    ClassKind,
    ClientRef,
    ConstantRef,
    ConstructorDef,
    EnumDef,
    FactoryMethod,
    FieldDef,
    FieldRef,
    GeneratedApi,
    GenericType,
    HttpVerb,
    ListType,
    MapType,
    NamedType,
    ParamRef,
    PrimitiveKind,
    PrimitiveType,
    TypeDef,
    TypeDescriptor,
    TypeRef,
    TypeVariable,
    VoidType,
)
from .naming import python_name, python_type_name, schema_module_name, unique_name
from .runtime import BASE_REQUEST, AbstractClientRequest, AbstractJsonClient
from .type_resolver import RFC3339_OVERRIDE

CLIENT_MODULE = "client"
REQUEST_MODULE = "request"
MODEL_PACKAGE = "model"

_STDLIB_FROM_ORDER: tuple[str, ...] = ("enum", "typing", "zoneinfo")
_TYPING_IMPORT_ORDER: tuple[str, ...] = (
    "TYPE_CHECKING",
    "Annotated",
    "Any",
    "ClassVar",
    "Optional",
    "TypeVar",
)
_PYDANTIC_IMPORT_ORDER: tuple[str, ...] = (
    "AwareDatetime",
    "BaseModel",
    "ConfigDict",
    "Field",
    "PlainSerializer",
)
_PRIMITIVE_ANNOTATIONS: dict[PrimitiveKind, str] = {
    PrimitiveKind.STRING: "str",
    PrimitiveKind.INT32: "int",
    PrimitiveKind.INT64: "int",
    PrimitiveKind.FLOAT32: "float",
    PrimitiveKind.FLOAT64: "float",
    PrimitiveKind.BOOLEAN: "bool",
    PrimitiveKind.DATE: "datetime.date",
    PrimitiveKind.ANY: "Any",
}
_RFC3339_SERIALIZER = (
    "PlainSerializer(lambda value: value.isoformat(timespec='seconds'), "
    "return_type=str, when_used='json')"
)
_CLIENT_ATTRIBUTE = "_client"
_MODEL_RESERVED_NAMES = frozenset(dir(BaseModel)) | {
    "Annotated",
    "Any",
    "AwareDatetime",
    "Field",
    "Optional",
    "PlainSerializer",
    "ZoneInfo",
    "bool",
    "datetime",
    "dict",
    "float",
    "int",
    "list",
    "str",
}
_REQUEST_RESERVED_NAMES = (
    frozenset(dir(AbstractClientRequest))
    | {param.name for param in BASE_REQUEST.constructor}
    | {"self", _CLIENT_ATTRIBUTE}
)
_FACTORY_RESERVED_NAMES = frozenset(dir(AbstractJsonClient)) | {"base_url", _CLIENT_ATTRIBUTE}


@dataclass(frozen=True)
class ModuleLayout:
    """Python module of every top-level type generated for one API."""

    package: str
    model_package: str
    client_module: str
    request_module: str
    client_name: str
    request_name: str
    model_modules: dict[str, str]

    @classmethod
    def for_api(cls, api: GeneratedApi) -> ModuleLayout:
        model_modules = {
            model.name.simple_name: f"{api.model_package}.{schema_module_name(model.name.simple_name)}"
            for model in api.models
        }
        return cls(
            package=api.package,
            model_package=api.model_package,
            client_module=f"{api.package}.{CLIENT_MODULE}",
            request_module=f"{api.package}.{REQUEST_MODULE}",
            client_name=api.client_class.name.simple_name,
            request_name=api.request_class.name.simple_name,
            model_modules=model_modules,
        )

    def module_of(self, name: NamedType) -> str:
        """Return the dotted module defining the top-level class of ``name``."""
        if name.module == self.model_package:
            return self.model_modules.get(
                name.path[0], f"{self.model_package}.{schema_module_name(name.path[0])}"
            )
        if name.module == self.package:
            if name.path[0] == self.request_name:
                return self.request_module
            if name.path[0] == self.client_name:
                return self.client_module
        return name.module

    def is_model_module(self, module: str) -> bool:
        return module.startswith(f"{self.model_package}.")


@dataclass
class _ModuleScope:
    """Imports collected while rendering one module."""

    module: str
    layout: ModuleLayout
    stdlib_imports: set[str] = field(default_factory=set)
    from_imports: dict[str, set[str]] = field(default_factory=dict)
    type_checking_imports: dict[str, set[str]] = field(default_factory=dict)

    @property
    def pydantic_style(self) -> bool:
        return self.layout.is_model_module(self.module)

    def use(self, module: str, name: str) -> None:
        self.from_imports.setdefault(module, set()).add(name)

    def annotation(self, type_: TypeDescriptor) -> str:
        """Return annotation source for ``type_`` and record the imports it needs."""
        if isinstance(type_, NamedType):
            return self.reference(type_)
        if isinstance(type_, PrimitiveType):
            return self._primitive(type_.kind)
        if isinstance(type_, ListType):
            return f"list[{self.annotation(type_.item)}]"
        if isinstance(type_, MapType):
            return f"dict[str, {self.annotation(type_.value)}]"
        if isinstance(type_, VoidType):
            return "None"
        if isinstance(type_, TypeVariable):
            return type_.name
        if isinstance(type_, GenericType):
            arguments = ", ".join(self.annotation(argument) for argument in type_.arguments)
            return f"{self.reference(type_.base)}[{arguments}]"
        raise TypeError(f"Unsupported type descriptor: {type_!r}")

    def reference(self, name: NamedType) -> str:
        """Return an expression referring to ``name`` from this module."""
        path = class_path(name)
        dotted = ".".join(path)
        target = self.layout.module_of(name)
        if target == self.module:
            return dotted
        if name.module == self.layout.model_package:
            if self.pydantic_style:
                self.type_checking_imports.setdefault(
                    self.import_source(target), set()
                ).add(path[0])
                return dotted
            self.use(self.import_source(self.layout.package), MODEL_PACKAGE)
            return f"{MODEL_PACKAGE}.{dotted}"
        self.use(self.import_source(target), path[0])
        return dotted

    def _primitive(self, kind: PrimitiveKind) -> str:
        if kind == PrimitiveKind.DATETIME_OFFSET:
            if self.pydantic_style:
                self.use("pydantic", "AwareDatetime")
                return "AwareDatetime"
            self.stdlib_imports.add("datetime")
            return "datetime.datetime"
        if kind == PrimitiveKind.TIMEZONE:
            self.use("zoneinfo", "ZoneInfo")
            return "ZoneInfo"
        annotation = _PRIMITIVE_ANNOTATIONS[kind]
        if annotation == "Any":
            self.use("typing", "Any")
        elif annotation.startswith("datetime."):
            self.stdlib_imports.add("datetime")
        return annotation

    def import_source(self, target: str) -> str:
        """Return the import source of ``target``, relative when it is a sibling."""
        package = self.module.rsplit(".", maxsplit=1)[0]
        if target == package:
            return "."
        if target.startswith(f"{package}."):
            return "." + target[len(package) + 1 :]
        return target

    def import_statements(self) -> list[ast.stmt]:
        imports: list[ast.stmt] = [
            ast.ImportFrom(module="__future__", names=[ast.alias(name="annotations")], level=0),
        ]
        for module in sorted(self.stdlib_imports):
            imports.append(ast.Import(names=[ast.alias(name=module)]))
        for module in _STDLIB_FROM_ORDER:
            if module in self.from_imports:
                order = _TYPING_IMPORT_ORDER if module == "typing" else ()
                imports.append(_import_from(module, self.from_imports[module], order))
        if "pydantic" in self.from_imports:
            imports.append(
                _import_from("pydantic", self.from_imports["pydantic"], _PYDANTIC_IMPORT_ORDER)
            )
        local_modules = [
            module
            for module in self.from_imports
            if module not in _STDLIB_FROM_ORDER and module != "pydantic"
        ]
        for module in sorted(local_modules, key=lambda item: (item.startswith("."), item)):
            imports.append(_import_from(module, self.from_imports[module], ()))
        if self.type_checking_imports:
            imports.append(
                ast.If(
                    test=_name("TYPE_CHECKING"),
                    body=[
                        _import_from(module, names, ())
                        for module, names in sorted(self.type_checking_imports.items())
                    ],
                    orelse=[],
                )
            )
        return imports


def render_model_module(model: TypeDef, layout: ModuleLayout, selector: str) -> str:
    """Render the module holding one top-level model or enum.

    Args:
        model (TypeDef): Top-level model descriptor.
        layout (ModuleLayout): Module layout of the API.
        selector (str): ``name:version`` of the API, for the module docstring.

    Returns:
        str: Generated Python source code.
    """
    scope = _ModuleScope(module=layout.module_of(model.name), layout=layout)
    body = [_type_def_to_ast(model, scope)]
    if scope.type_checking_imports:
        scope.use("typing", "TYPE_CHECKING")
    return _module_source(_module_docstring(selector), scope, body)


def render_model_package_init(api: GeneratedApi, layout: ModuleLayout) -> str:
    """Render ``model/__init__.py``: import every model, then resolve references.

    Models refer to each other through deferred annotations, so every model
    class, nested classes first, is rebuilt once all modules are imported.
    """
    scope = _ModuleScope(module=f"{layout.model_package}.__init__", layout=layout)
    body: list[ast.stmt] = []
    names: list[str] = []
    for model in api.models:
        name = python_type_name(model.name.simple_name)
        names.append(name)
        scope.use(scope.import_source(layout.module_of(model.name)), name)
    body.append(
        ast.Assign(
            targets=[_store("__all__")],
            value=ast.List(elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()),
        )
    )
    for model in api.models:
        for rebuild_name in _model_rebuild_order(model):
            dotted = ".".join(class_path(rebuild_name))
            body.append(
                ast.Expr(value=_expr(f"{dotted}.model_rebuild(_types_namespace=globals())"))
            )
    return _module_source(
        f"Models of the {api.api_name}:{api.api_version} API.", scope, body
    )


def render_request_module(api: GeneratedApi, layout: ModuleLayout) -> str:
    """Render the request base class shared by all method classes of an API."""
    scope = _ModuleScope(module=layout.request_module, layout=layout)
    request = api.request_class
    body: list[ast.stmt] = []
    if request.type_params:
        scope.use("typing", "TypeVar")
        for type_param in request.type_params:
            body.append(
                ast.Assign(
                    targets=[_store(type_param.name)],
                    value=_expr(f"TypeVar({type_param.name!r})"),
                )
            )
    body.append(_class_to_ast(request, scope))
    return _module_source(_module_docstring(f"{api.api_name}:{api.api_version}"), scope, body)


def render_client_module(api: GeneratedApi, layout: ModuleLayout) -> str:
    """Render the client class with its nested resource and method classes."""
    scope = _ModuleScope(module=layout.client_module, layout=layout)
    body = [_class_to_ast(api.client_class, scope)]
    return _module_source(_module_docstring(f"{api.api_name}:{api.api_version}"), scope, body)


def render_api_package_init(api: GeneratedApi, layout: ModuleLayout) -> str:
    """Render the API package ``__init__.py`` exporting the client and request types."""
    scope = _ModuleScope(module=f"{layout.package}.__init__", layout=layout)
    exported = [api.client_class.name, api.request_class.name]
    for name in exported:
        scope.use(scope.import_source(layout.module_of(name)), class_path(name)[0])
    body: list[ast.stmt] = [
        ast.Assign(
            targets=[_store("__all__")],
            value=ast.List(
                elts=[ast.Constant(value=class_path(name)[0]) for name in exported],
                ctx=ast.Load(),
            ),
        )
    ]
    title = _constant_value(api.client_class, "API_TITLE") or api.api_name
    return _module_source(f"{title} ({api.api_name}:{api.api_version}).", scope, body)


def _module_source(docstring: str, scope: _ModuleScope, body: list[ast.stmt]) -> str:
    module = ast.Module(
        body=[ast.Expr(value=ast.Constant(value=docstring)), *scope.import_statements(), *body],
        type_ignores=[],
    )
    ast.fix_missing_locations(module)
    return ast.unparse(module) + "\n"


def _module_docstring(selector: str) -> str:
    return f"Generated from the {selector} discovery document."


def _type_def_to_ast(descriptor: TypeDef, scope: _ModuleScope) -> ast.ClassDef:
    if isinstance(descriptor, EnumDef):
        return _enum_to_ast(descriptor, scope)
    return _class_to_ast(descriptor, scope)


def _enum_to_ast(enum: EnumDef, scope: _ModuleScope) -> ast.ClassDef:
    scope.use("enum", "Enum")
    body: list[ast.stmt] = []
    docstring = _enum_docstring(enum)
    if docstring:
        body.append(ast.Expr(value=ast.Constant(value=docstring)))
    for constant in enum.constants:
        body.append(
            ast.Assign(
                targets=[_store(constant.identifier.name)],
                value=ast.Constant(value=constant.identifier.wire_name),
            )
        )
    if not body:
        body.append(ast.Pass())
    return _class_def(class_path(enum.name)[-1], [_name("str"), _name("Enum")], body)


def _enum_docstring(enum: EnumDef) -> Optional[str]:
    lines: list[str] = []
    if enum.documentation:
        lines.extend([enum.documentation, ""])
    documented = [constant for constant in enum.constants if constant.documentation]
    if documented:
        lines.append("Values:")
        for constant in documented:
            lines.append(f"- {constant.identifier.name}: {constant.documentation}")
    return "\n".join(lines).strip() or None


def _class_to_ast(
    descriptor: ClassDef,
    scope: _ModuleScope,
) -> ast.ClassDef:
    bases: list[ast.expr] = []
    if descriptor.kind == ClassKind.MODEL:
        scope.use("pydantic", "BaseModel")
        bases.append(_name("BaseModel"))
    elif descriptor.super_type is not None:
        bases.append(_expr(scope.annotation(descriptor.super_type)))

    body: list[ast.stmt] = []
    if descriptor.documentation:
        body.append(ast.Expr(value=ast.Constant(value=descriptor.documentation)))
    for constant in descriptor.constants:
        value: ast.expr
        if constant.concat:
            value = _expr(" + ".join(constant.concat))
        else:
            value = ast.Constant(value=constant.value)
        body.append(ast.Assign(targets=[_store(constant.name)], value=value))

    if descriptor.kind == ClassKind.MODEL:
        scope.use("pydantic", "ConfigDict")
        body.append(
            ast.Assign(
                targets=[_store("model_config")],
                value=_expr("ConfigDict(populate_by_name=True)"),
            )
        )
    else:
        names = member_names(descriptor)
        key_fields = [item for item in descriptor.fields if item.is_key]
        if key_fields:
            scope.use("typing", "ClassVar")
            body.append(
                ast.AnnAssign(
                    target=_store("PARAMETER_KEYS"),
                    annotation=_expr("ClassVar[dict[str, str]]"),
                    value=ast.Dict(
                        keys=[
                            ast.Constant(value=names[item.identifier.name])
                            for item in key_fields
                        ],
                        values=[
                            ast.Constant(value=item.identifier.wire_name) for item in key_fields
                        ],
                    ),
                    simple=1,
                )
            )

    for nested in descriptor.nested:
        if isinstance(nested, EnumDef):
            body.append(_enum_to_ast(nested, scope))
        else:
            body.append(_class_to_ast(nested, scope))

    if descriptor.kind == ClassKind.MODEL:
        used: set[str] = set()
        for model_field in descriptor.fields:
            body.append(_model_field_to_ast(model_field, scope, used))
    elif descriptor.constructor is not None:
        body.append(_constructor_to_ast(descriptor, descriptor.constructor, scope))

    for factory, factory_name in zip(descriptor.factory_methods, factory_names(descriptor)):
        body.append(_factory_to_ast(descriptor, factory, factory_name, scope))

    if not body:
        body.append(ast.Pass())
    return _class_def(class_path(descriptor.name)[-1], bases, body)


def _model_field_to_ast(
    model_field: FieldDef, scope: _ModuleScope, used: set[str]
) -> ast.AnnAssign:
    annotation = scope.annotation(model_field.type)
    if model_field.serialization_override == RFC3339_OVERRIDE:
        scope.use("typing", "Annotated")
        scope.use("pydantic", "PlainSerializer")
        annotation = f"Annotated[{annotation}, {_RFC3339_SERIALIZER}]"

    name = model_field_name(model_field.identifier.name, used)
    keywords: list[ast.keyword] = []
    if name != model_field.identifier.wire_name:
        keywords.append(
            ast.keyword(arg="alias", value=ast.Constant(value=model_field.identifier.wire_name))
        )
    if model_field.documentation:
        keywords.append(
            ast.keyword(arg="description", value=ast.Constant(value=model_field.documentation))
        )
    scope.use("pydantic", "Field")
    return ast.AnnAssign(
        target=_store(name),
        annotation=_expr(_optional(annotation, scope)),
        value=ast.Call(func=_name("Field"), args=[ast.Constant(value=None)], keywords=keywords),
        simple=1,
    )


def _constructor_to_ast(
    descriptor: ClassDef,
    constructor: ConstructorDef,
    scope: _ModuleScope,
) -> ast.FunctionDef:
    names = member_names(descriptor)

    def rendered(name: str) -> str:
        return names.get(name, python_name(name))

    params: list[tuple[str, Optional[str]]] = []
    if constructor.takes_client:
        params.append(("client", scope.reference(descriptor.name.top_level)))
    for param in constructor.params:
        params.append((rendered(param.identifier.name), scope.annotation(param.type)))

    body: list[ast.stmt] = []
    if constructor.super_call is not None:
        body.append(
            ast.Expr(
                value=ast.Call(
                    func=ast.Attribute(
                        value=ast.Call(func=_name("super"), args=[], keywords=[]),
                        attr="__init__",
                        ctx=ast.Load(),
                    ),
                    args=[
                        _call_argument(argument, scope, rendered)
                        for argument in constructor.super_call.arguments
                    ],
                    keywords=[],
                )
            )
        )
    elif constructor.takes_client:
        body.append(ast.Assign(targets=[_self_attr(_CLIENT_ATTRIBUTE)], value=_name("client")))

    for check in constructor.required_checks:
        body.append(_required_check(rendered(check.param), check.message))
    for name in constructor.assigned_fields:
        body.append(ast.Assign(targets=[_self_attr(rendered(name))], value=_name(rendered(name))))

    assigned = set(constructor.assigned_fields)
    for optional_field in descriptor.fields:
        if optional_field.identifier.name in assigned:
            continue
        body.append(
            ast.AnnAssign(
                target=_self_attr(rendered(optional_field.identifier.name)),
                annotation=_expr(_optional(scope.annotation(optional_field.type), scope)),
                value=ast.Constant(value=None),
                simple=0,
            )
        )
    if not body:
        body.append(ast.Pass())
    return _function_def("__init__", params, body, returns="None")


def _factory_to_ast(
    outer: ClassDef,
    factory: FactoryMethod,
    name: str,
    scope: _ModuleScope,
) -> ast.FunctionDef:
    component = next(
        (nested for nested in outer.nested if nested.name == factory.returns), None
    )
    names = member_names(component) if isinstance(component, ClassDef) else {}
    param_names = [
        names.get(param.identifier.name, python_name(param.identifier.name))
        for param in factory.params
    ]
    params = [
        (param_name, scope.annotation(param.type))
        for param_name, param in zip(param_names, factory.params)
    ]
    client = _name("self") if outer.kind == ClassKind.CLIENT else _self_load(_CLIENT_ATTRIBUTE)
    call = ast.Call(
        func=_expr(scope.reference(factory.returns)),
        args=[client, *(_name(param_name) for param_name in param_names)],
        keywords=[],
    )
    body: list[ast.stmt] = []
    if factory.documentation:
        body.append(ast.Expr(value=ast.Constant(value=factory.documentation)))
    body.append(ast.Return(value=call))
    return _function_def(name, params, body, returns=scope.reference(factory.returns))


def _call_argument(
    argument: CallArgument,
    scope: _ModuleScope,
    rendered: Callable[[str], str],
) -> ast.expr:
    if isinstance(argument, ClientRef):
        return _name("client")
    if isinstance(argument, TypeRef):
        if isinstance(argument.type, VoidType):
            return ast.Constant(value=None)
        return _expr(scope.annotation(argument.type))
    if isinstance(argument, HttpVerb):
        return ast.Constant(value=argument.verb)
    if isinstance(argument, ConstantRef):
        return _self_load(argument.name)
    if isinstance(argument, (FieldRef, ParamRef)):
        return _name(rendered(argument.name))
    if isinstance(argument, Absent):
        return ast.Constant(value=None)
    raise TypeError(f"Unsupported call argument: {argument!r}")


def class_path(name: NamedType) -> list[str]:
    """Return the class names of ``name``'s nesting path as they appear in code."""
    return [python_type_name(segment) for segment in name.path]


def model_field_name(name: str, used: set[str]) -> str:
    """Return the attribute name of a model field, unique among ``used``.

    Leading underscores are dropped, since pydantic treats such attributes
    as private; names clashing with model members get a ``_field`` suffix.
    """
    text = python_name(name.lstrip("_") or name)
    if text in _MODEL_RESERVED_NAMES:
        text = f"{text}_field"
    return unique_name(text, used)


def member_names(descriptor: ClassDef) -> dict[str, str]:
    """Map the in-code field names of a request or component class to attribute names.

    Parameter fields avoid the members and constructor arguments of the
    request base class and the constants of ``descriptor``.
    """
    reserved = _REQUEST_RESERVED_NAMES | {constant.name for constant in descriptor.constants}
    used: set[str] = set()
    names: dict[str, str] = {}
    for item in descriptor.fields:
        text = python_name(item.identifier.name.lstrip("_") or item.identifier.name)
        if item.is_key:
            while text in reserved:
                text = f"{text}_"
        names[item.identifier.name] = unique_name(text, used)
    return names


def factory_names(descriptor: ClassDef) -> list[str]:
    """Return the method names of ``descriptor``'s factories, in order."""
    used = set(_FACTORY_RESERVED_NAMES) | {constant.name for constant in descriptor.constants}
    return [
        unique_name(python_name(factory.identifier.name), used)
        for factory in descriptor.factory_methods
    ]


def _required_check(param: str, message: str) -> ast.If:
    missing = ast.BoolOp(
        op=ast.Or(),
        values=[
            ast.Compare(left=_name(param), ops=[ast.Is()], comparators=[ast.Constant(value=None)]),
            ast.Compare(left=_name(param), ops=[ast.Eq()], comparators=[ast.Constant(value="")]),
        ],
    )
    return ast.If(
        test=missing,
        body=[
            ast.Raise(
                exc=ast.Call(
                    func=_name("ValueError"), args=[ast.Constant(value=message)], keywords=[]
                ),
                cause=None,
            )
        ],
        orelse=[],
    )


def _model_rebuild_order(model: TypeDef) -> Iterable[NamedType]:
    if isinstance(model, EnumDef):
        return
    for nested in model.nested:
        yield from _model_rebuild_order(nested)
    yield model.name


def _constant_value(descriptor: ClassDef, name: str) -> Optional[str]:
    for constant in descriptor.constants:
        if constant.name == name:
            return constant.value or None
    return None


def _optional(annotation: str, scope: _ModuleScope) -> str:
    if annotation in {"None", "Any"}:
        if annotation == "Any":
            scope.use("typing", "Any")
        return annotation
    scope.use("typing", "Optional")
    return f"Optional[{annotation}]"


def _import_from(module: str, names: set[str], order: tuple[str, ...]) -> ast.ImportFrom:
    ordered = [name for name in order if name in names]
    ordered.extend(sorted(name for name in names if name not in order))
    level = len(module) - len(module.lstrip("."))
    return ast.ImportFrom(
        module=module.lstrip(".") or None,
        names=[ast.alias(name=name) for name in ordered],
        level=level,
    )


def _class_def(name: str, bases: list[ast.expr], body: list[ast.stmt]) -> ast.ClassDef:
    return ast.ClassDef(
        name=name,
        bases=bases,
        keywords=[],
        body=body,
        decorator_list=[],
        type_params=[],
    )


def _function_def(
    name: str,
    params: list[tuple[str, Optional[str]]],
    body: list[ast.stmt],
    *,
    returns: Optional[str],
) -> ast.FunctionDef:
    arguments = [ast.arg(arg="self")]
    for param_name, annotation in params:
        arguments.append(
            ast.arg(arg=param_name, annotation=_expr(annotation) if annotation else None)
        )
    return ast.FunctionDef(
        name=name,
        args=ast.arguments(
            posonlyargs=[],
            args=arguments,
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=body,
        decorator_list=[],
        returns=_expr(returns) if returns else None,
        type_params=[],
    )


def _name(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Load())


def _store(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Store())


def _self_attr(attribute: str) -> ast.Attribute:
    return ast.Attribute(value=_name("self"), attr=attribute, ctx=ast.Store())


def _self_load(attribute: str) -> ast.Attribute:
    return ast.Attribute(value=_name("self"), attr=attribute, ctx=ast.Load())


def _expr(code: str) -> ast.expr:
    parsed = ast.parse(code, mode="eval")
    return parsed.body
