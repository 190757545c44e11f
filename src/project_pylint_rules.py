"""Custom pylint rules enforcing the project's annotation and class policies."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from astroid import exceptions
from astroid import nodes
from pylint.checkers import BaseChecker
from pylint.lint import PyLinter

_MESSAGE_PREFER_OPTIONAL = "prefer-optional"
_MESSAGE_PREFER_UNION = "prefer-union"
_MESSAGE_NO_OBJECT_ANNOTATION = "no-object-annotation"
_MESSAGE_NO_SHADOWED_MEMBERS = "no-shadowed-members"

_EXEMPT_MEMBERS = frozenset(
    {"model_config", "__annotations__", "__module__", "__doc__", "name", "msgs"}
)


def _is_none_literal(node: nodes.NodeNG) -> bool:
    return isinstance(node, nodes.Const) and node.value is None


def _pipe_unions(annotation: nodes.NodeNG) -> Iterable[nodes.BinOp]:
    for candidate in annotation.nodes_of_class(nodes.BinOp):
        if candidate.op == "|":
            yield candidate


def _optional_pipe_unions(annotation: nodes.NodeNG) -> Iterable[nodes.NodeNG]:
    for union in _pipe_unions(annotation):
        if _is_none_literal(union.left) or _is_none_literal(union.right):
            yield union


def _plain_pipe_unions(annotation: nodes.NodeNG) -> Iterable[nodes.NodeNG]:
    for union in _pipe_unions(annotation):
        if isinstance(union.parent, nodes.BinOp) and union.parent.op == "|":
            continue
        if any(_is_none_literal(side) for side in (union.left, union.right)):
            continue
        yield union


def _object_names(annotation: nodes.NodeNG) -> Iterable[nodes.NodeNG]:
    for candidate in annotation.nodes_of_class(nodes.Name):
        if candidate.name == "object":
            yield candidate


_ANNOTATION_RULES: tuple[tuple[str, Callable[[nodes.NodeNG], Iterable[nodes.NodeNG]]], ...] = (
    (_MESSAGE_PREFER_OPTIONAL, _optional_pipe_unions),
    (_MESSAGE_PREFER_UNION, _plain_pipe_unions),
    (_MESSAGE_NO_OBJECT_ANNOTATION, _object_names),
)


class ProjectRulesChecker(BaseChecker):
    """Annotation style and member shadowing checks."""

    name = "project-rules"

    msgs = {
        "C9501": (
            "Use Optional[T] instead of T | None in annotations",
            _MESSAGE_PREFER_OPTIONAL,
            "Nullable annotations are spelled Optional[T].",
        ),
        "C9502": (
            "Avoid object in type annotations; use a more specific type",
            _MESSAGE_NO_OBJECT_ANNOTATION,
            "Annotations name the concrete type the code relies on.",
        ),
        "E9503": (
            "Member %r shadows inherited member from %s",
            _MESSAGE_NO_SHADOWED_MEMBERS,
            "Class members must not shadow inherited class members.",
        ),
        "C9504": (
            "Use Union[...] instead of | in annotations and type aliases",
            _MESSAGE_PREFER_UNION,
            "Unions of several types are spelled Union[...].",
        ),
    }

    def visit_annassign(self, node: nodes.AnnAssign) -> None:
        self._check_annotation(node.annotation)

    def visit_arguments(self, node: nodes.Arguments) -> None:
        for annotation in _argument_annotations(node):
            self._check_annotation(annotation)

    def visit_functiondef(self, node: nodes.FunctionDef) -> None:
        if node.returns is not None:
            self._check_annotation(node.returns)

    visit_asyncfunctiondef = visit_functiondef

    def visit_typealias(self, node: nodes.TypeAlias) -> None:
        """Check the value of ``type X = ...`` statements like an annotation."""
        self._check_annotation(node.value)

    def visit_classdef(self, node: nodes.ClassDef) -> None:
        """Disallow member names that shadow inherited members."""
        inherited = _inherited_member_origins(node)
        for member_name, definitions in node.locals.items():
            origin = inherited.get(member_name)
            if origin is None or _is_exempt_member(member_name):
                continue
            for definition in definitions:
                self.add_message(
                    _MESSAGE_NO_SHADOWED_MEMBERS,
                    node=definition,
                    args=(member_name, origin),
                )

    def _check_annotation(self, annotation: nodes.NodeNG) -> None:
        for message, finder in _ANNOTATION_RULES:
            for offending in finder(annotation):
                self.add_message(message, node=offending)


def _argument_annotations(arguments: nodes.Arguments) -> Iterable[nodes.NodeNG]:
    annotations = [
        *arguments.posonlyargs_annotations,
        *arguments.annotations,
        *arguments.kwonlyargs_annotations,
        arguments.varargannotation,
        arguments.kwargannotation,
    ]
    return [annotation for annotation in annotations if annotation is not None]


def _inherited_member_origins(node: nodes.ClassDef) -> dict[str, str]:
    try:
        ancestors = node.mro()[1:]
    except (exceptions.AstroidError, RecursionError):
        return {}

    inherited: dict[str, str] = {}
    for ancestor in ancestors:
        if ancestor.root().name == "builtins":
            continue
        for member_name in ancestor.locals:
            inherited.setdefault(member_name, ancestor.qname())
    return inherited


def _is_exempt_member(name: str) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return True
    return name in _EXEMPT_MEMBERS


def register(linter: PyLinter) -> None:
    """Register checker."""
    linter.register_checker(ProjectRulesChecker(linter))
