"""Builders for the nested resource and method classes of a generated client."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import TracebackType
from typing import Optional

from .errors import ComponentScopeError
from .model_types import (
    ClassDef,
    ClassKind,
    ConstantDef,
    ConstructorDef,
    FactoryMethod,
    FieldDef,
    Identifier,
    NamedType,
    ParamDef,
    RequiredCheck,
    SuperCall,
    TypeDef,
    TypeDescriptor,
    TypeVariable,
)
from .naming import clean_documentation, resolve_identifier, to_type_name

REQUIRED_MESSAGE = "Required parameter {name} must be specified."


@dataclass
class ConstructorBuilder:
    """Mutable constructor state of a class under construction."""

    params: list[ParamDef] = field(default_factory=list)
    required_checks: list[RequiredCheck] = field(default_factory=list)
    assigned_fields: list[str] = field(default_factory=list)
    super_call: Optional[SuperCall] = None
    takes_client: bool = False

    def require(self, param: ParamDef) -> None:
        """Add a fail-fast check and field assignment for ``param``."""
        name = param.identifier.name
        self.required_checks.append(
            RequiredCheck(param=name, message=REQUIRED_MESSAGE.format(name=name))
        )
        self.assigned_fields.append(name)

    def build(self) -> ConstructorDef:
        return ConstructorDef(
            params=tuple(self.params),
            required_checks=tuple(self.required_checks),
            assigned_fields=tuple(self.assigned_fields),
            super_call=self.super_call,
            takes_client=self.takes_client,
        )


@dataclass
class ClassBuilder:
    """Mutable state of a class descriptor until it is built."""

    name: NamedType
    kind: ClassKind
    fields: list[FieldDef] = field(default_factory=list)
    nested: list[TypeDef] = field(default_factory=list)
    constants: list[ConstantDef] = field(default_factory=list)
    factory_methods: list[FactoryMethod] = field(default_factory=list)
    super_type: Optional[TypeDescriptor] = None
    type_params: list[TypeVariable] = field(default_factory=list)
    documentation: Optional[str] = None

    def add_nested(self, descriptors: tuple[TypeDef, ...]) -> None:
        self.nested.extend(descriptors)

    def add_constant(self, name: str, value: Optional[str]) -> None:
        self.constants.append(ConstantDef(name=name, value=value or ""))

    def build(self, constructor: Optional[ConstructorDef] = None) -> ClassDef:
        return ClassDef(
            name=self.name,
            kind=self.kind,
            fields=tuple(self.fields),
            nested=tuple(self.nested),
            constants=tuple(self.constants),
            constructor=constructor,
            factory_methods=tuple(self.factory_methods),
            super_type=self.super_type,
            type_params=tuple(self.type_params),
            documentation=self.documentation,
        )


def component_type(outer: NamedType, name: str) -> NamedType:
    """Return the nested class type a component called ``name`` gets inside ``outer``."""
    return outer.nested(to_type_name(resolve_identifier(name)))


class ComponentHandle:
    """One resource or method class under construction.

    Use as a context manager: ``finalize`` runs on every exit path, after
    which the class and its factory method are attached to the outer builder.
    """

    def __init__(
        self,
        *,
        stack: ComponentStack,
        outer: ClassBuilder,
        identifier: Identifier,
        description: Optional[str],
        body_param: Optional[ParamDef],
        required_params: tuple[ParamDef, ...],
    ) -> None:
        self._stack = stack
        self._outer = outer
        self._description = description
        self._body_param = body_param
        self._required_params = required_params
        self._finalized = False
        self.identifier = identifier
        self.class_builder = ClassBuilder(
            name=outer.name.nested(to_type_name(identifier)),
            kind=ClassKind.COMPONENT,
        )
        self.constructor_builder = ConstructorBuilder(
            params=list(self.all_params),
            takes_client=True,
        )

    @property
    def name(self) -> NamedType:
        return self.class_builder.name

    @property
    def all_params(self) -> tuple[ParamDef, ...]:
        if self._body_param is None:
            return self._required_params
        return (*self._required_params, self._body_param)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __enter__(self) -> ComponentHandle:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.finalize()

    def finalize(self) -> None:
        """Add parameter fields, then attach the class and its factory to the outer class."""
        if self._finalized:
            raise ComponentScopeError(f"Component {self.name.qualified_name} finalized twice")
        self._stack.pop(self)
        self._finalized = True

        for param in self._required_params:
            self._add_field(param, is_key=True)
        if self._body_param is not None:
            self._add_field(self._body_param, is_key=False)

        self._outer.nested.append(self.class_builder.build(self.constructor_builder.build()))
        self._outer.factory_methods.append(
            FactoryMethod(
                identifier=self.identifier,
                params=self.all_params,
                returns=self.name,
                documentation=clean_documentation(self._description),
            )
        )

    def _add_field(self, param: ParamDef, *, is_key: bool) -> None:
        self.class_builder.fields.append(
            FieldDef(
                identifier=param.identifier,
                type=param.type,
                is_key=is_key,
                required=True,
            )
        )
        self.constructor_builder.require(param)


class ComponentStack:
    """Stack of open component handles; handles close innermost first."""

    def __init__(self) -> None:
        self._open: list[ComponentHandle] = []

    @property
    def depth(self) -> int:
        return len(self._open)

    def open(
        self,
        outer: ClassBuilder,
        name: str,
        description: Optional[str] = None,
        body_param: Optional[ParamDef] = None,
        *required_params: ParamDef,
    ) -> ComponentHandle:
        """Open a nested component class named after ``name`` inside ``outer``.

        Args:
            outer (ClassBuilder): Builder of the enclosing class.
            name (str): Resource or method name from the discovery document.
            description (Optional[str]): Documentation for the factory method.
            body_param (Optional[ParamDef]): Request body parameter, if any.
            *required_params (ParamDef): Required parameters in declared order.

        Returns:
            ComponentHandle: Handle to finalize once the component is complete.
        """
        if self._open and outer is not self._open[-1].class_builder:
            raise ComponentScopeError(
                f"Component {name} must be opened inside "
                f"{self._open[-1].name.qualified_name}"
            )
        handle = ComponentHandle(
            stack=self,
            outer=outer,
            identifier=resolve_identifier(name),
            description=description,
            body_param=body_param,
            required_params=tuple(required_params),
        )
        self._open.append(handle)
        return handle

    def pop(self, handle: ComponentHandle) -> None:
        if not self._open or self._open[-1] is not handle:
            raise ComponentScopeError(
                f"Component {handle.name.qualified_name} finalized while "
                "a nested component is still open"
            )
        self._open.pop()
