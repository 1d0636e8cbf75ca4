"""Per-file semantic model: declared types, imports and call resolution."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final

from tree_sitter import Node, Tree

from junitguard.catalog import KNOWN_SUPERTYPES, is_known_type, library_methods
from junitguard.nodes import (
    IDENTIFIER,
    METHOD_INVOCATION,
    OBJECT_CREATION,
    TYPE_DECLARATION_KINDS,
    enclosing,
    invocation_arguments,
    iter_nodes,
    named_children,
    node_text,
)
from junitguard.symbols import (
    CLASS_TYPE,
    CONSTRUCTOR_NAME,
    OBJECT_TYPE,
    PRIMITIVE_TYPES,
    STRING_TYPE,
    JavaType,
    MethodSymbol,
)

logger: logging.Logger = logging.getLogger(__name__)

_FUNCTIONAL_ARGUMENT: Final[str] = "<functional>"
_NULL_ARGUMENT: Final[str] = "<null>"

_LITERAL_TYPES: Final[dict[str, str]] = {
    "string_literal": STRING_TYPE,
    "text_block": STRING_TYPE,
    "class_literal": CLASS_TYPE,
    "decimal_integer_literal": "int",
    "hex_integer_literal": "int",
    "octal_integer_literal": "int",
    "binary_integer_literal": "int",
    "decimal_floating_point_literal": "double",
    "character_literal": "char",
    "true": "boolean",
    "false": "boolean",
    "lambda_expression": _FUNCTIONAL_ARGUMENT,
    "method_reference": _FUNCTIONAL_ARGUMENT,
    "null_literal": _NULL_ARGUMENT,
}

_SPREAD_NON_TYPE_KINDS: Final[frozenset[str]] = frozenset({
    "modifiers",
    "annotation",
    "marker_annotation",
    "variable_declarator",
})

_UNKNOWN_PARAMETER: Final[JavaType] = JavaType("?", known=False)

_VARIABLE_SCOPE_KINDS: Final[frozenset[str]] = frozenset({
    "block",
    "constructor_body",
    "switch_block_statement_group",
    "class_body",
    "enum_body_declarations",
    "interface_body",
    "program",
})


@dataclass(slots=True)
class TypeDeclaration:
    """A class, interface, enum or record declared in the parsed file."""

    name: str
    node: Node
    supertypes: tuple[JavaType, ...] = ()
    methods: list[MethodSymbol] = field(default_factory=list)
    constructors: list[MethodSymbol] = field(default_factory=list)


class SemanticModel:
    """Resolves types and call targets within one compilation unit.

    The model is built once per file and is read-only afterwards. Calls
    that cannot be bound to a declaration in the file or to a catalogued
    library signature resolve to ``None``.
    """

    def __init__(self, *, root: Node) -> None:
        self._package: str = ""
        self._imports: dict[str, str] = {}
        self._on_demand: list[str] = []
        self._static_imports: dict[str, list[str]] = {}
        self._static_on_demand: list[str] = []
        self._declarations: dict[str, TypeDeclaration] = {}
        self._fqn_by_node: dict[int, str] = {}

        self._collect_imports(root)
        self._collect_declarations(root)
        self._collect_members()

    @classmethod
    def build(cls, tree: Tree) -> SemanticModel:
        return cls(root=tree.root_node)

    @property
    def package(self) -> str:
        return self._package

    @property
    def declarations(self) -> dict[str, TypeDeclaration]:
        return dict(self._declarations)

    # ------------------------------------------------------------------
    # Collection

    def _collect_imports(self, root: Node) -> None:
        for child in named_children(root):
            if child.type == "package_declaration":
                for part in named_children(child):
                    if part.type in ("identifier", "scoped_identifier"):
                        self._package = node_text(part)
            elif child.type == "import_declaration":
                self._add_import(child)

    def _add_import(self, node: Node) -> None:
        kinds: set[str] = {c.type for c in node.children}
        is_static: bool = "static" in kinds
        on_demand: bool = "asterisk" in kinds
        name: str = ""
        for part in node.named_children:
            if part.type in ("identifier", "scoped_identifier"):
                name = node_text(part)
        if not name:
            return

        if is_static and on_demand:
            self._static_on_demand.append(name)
        elif is_static:
            owner, _, member = name.rpartition(".")
            self._static_imports.setdefault(member, []).append(owner)
        elif on_demand:
            self._on_demand.append(name)
        else:
            self._imports[name.rsplit(".", 1)[-1]] = name

    def _collect_declarations(self, root: Node) -> None:
        for node in iter_nodes(root):
            if node.type not in TYPE_DECLARATION_KINDS:
                continue
            name_node: Node | None = node.child_by_field_name("name")
            if name_node is None:
                continue
            outer: Node | None = enclosing(node, TYPE_DECLARATION_KINDS)
            prefix: str
            if outer is not None and outer.id in self._fqn_by_node:
                prefix = self._fqn_by_node[outer.id]
            else:
                prefix = self._package
            simple: str = node_text(name_node)
            fqn: str = f"{prefix}.{simple}" if prefix else simple
            self._fqn_by_node[node.id] = fqn
            self._declarations[fqn] = TypeDeclaration(name=fqn, node=node)

    def _collect_members(self) -> None:
        for declaration in self._declarations.values():
            declaration.supertypes = tuple(self._declared_supertypes(declaration.node))
            body: Node | None = declaration.node.child_by_field_name("body")
            if body is None:
                continue
            for member in _member_nodes(body):
                if member.type == "method_declaration":
                    declaration.methods.append(
                        self._method_symbol(member, owner=declaration.name),
                    )
                elif member.type == "constructor_declaration":
                    declaration.constructors.append(
                        self._method_symbol(
                            member, owner=declaration.name, name=CONSTRUCTOR_NAME,
                        ),
                    )

    def _declared_supertypes(self, node: Node) -> Iterator[JavaType]:
        superclass: Node | None = node.child_by_field_name("superclass")
        if superclass is not None:
            for type_node in named_children(superclass):
                yield self.resolve_type(type_node)
        for child in node.children:
            if child.type in ("super_interfaces", "extends_interfaces"):
                for type_list in named_children(child):
                    for type_node in named_children(type_list):
                        yield self.resolve_type(type_node)

    def _method_symbol(
        self, node: Node, *, owner: str, name: str | None = None,
    ) -> MethodSymbol:
        if name is None:
            name_node: Node | None = node.child_by_field_name("name")
            name = node_text(name_node) if name_node is not None else ""

        params: list[JavaType] = []
        varargs: bool = False
        parameters: Node | None = node.child_by_field_name("parameters")
        if parameters is not None:
            for param in named_children(parameters):
                if param.type == "formal_parameter":
                    type_node: Node | None = param.child_by_field_name("type")
                    if type_node is not None:
                        params.append(self.resolve_type(type_node))
                elif param.type == "spread_parameter":
                    varargs = True
                    element: Node | None = next(
                        (p for p in named_children(param) if p.type not in _SPREAD_NON_TYPE_KINDS),
                        None,
                    )
                    params.append(
                        _UNKNOWN_PARAMETER if element is None else self.resolve_type(element)
                    )

        thrown: list[JavaType] = []
        for child in node.children:
            if child.type == "throws":
                thrown.extend(self.resolve_type(t) for t in named_children(child))

        return MethodSymbol(
            owner=owner,
            name=name,
            parameter_types=tuple(params),
            thrown_types=tuple(thrown),
            varargs=varargs,
        )

    # ------------------------------------------------------------------
    # Types

    def resolve_type(self, node: Node) -> JavaType:
        """Resolve a type node as written at its position in the file."""
        if node.type == "generic_type":
            for child in named_children(node):
                if child.type in ("type_identifier", "scoped_type_identifier"):
                    return self.resolve_type(child)
        if node.type == "array_type":
            element: Node | None = node.child_by_field_name("element")
            if element is not None:
                resolved: JavaType = self.resolve_type(element)
                return JavaType(f"{resolved.name}[]", known=resolved.known)
        return self.resolve_type_name(node_text(node), context=node)

    def resolve_type_name(self, name: str, *, context: Node | None = None) -> JavaType:
        """Resolve a simple or qualified type name to a JavaType."""
        if name in PRIMITIVE_TYPES or name == "void":
            return JavaType(name)

        if "." in name:
            if name in self._declarations or is_known_type(name):
                return JavaType(name)
            head, _, tail = name.partition(".")
            outer: JavaType = self.resolve_type_name(head, context=context)
            nested: str = f"{outer.name}.{tail}"
            if outer.known and self._is_declared_or_known(nested):
                return JavaType(nested)
            return JavaType(name, known=False)

        fqn: str | None = self._lookup_simple_type(name, context=context)
        if fqn is None:
            return JavaType(name, known=False)
        return JavaType(fqn)

    def _lookup_simple_type(self, name: str, *, context: Node | None) -> str | None:
        if context is not None:
            scope: Node | None = (
                context if context.type in TYPE_DECLARATION_KINDS
                else enclosing(context, TYPE_DECLARATION_KINDS)
            )
            while scope is not None:
                scope_fqn: str | None = self._fqn_by_node.get(scope.id)
                if scope_fqn is not None:
                    if scope_fqn.rsplit(".", 1)[-1] == name:
                        return scope_fqn
                    if f"{scope_fqn}.{name}" in self._declarations:
                        return f"{scope_fqn}.{name}"
                scope = enclosing(scope, TYPE_DECLARATION_KINDS)

        top_level: str = f"{self._package}.{name}" if self._package else name
        if top_level in self._declarations:
            return top_level
        if name in self._imports:
            return self._imports[name]
        if is_known_type(f"java.lang.{name}"):
            return f"java.lang.{name}"
        for package in self._on_demand:
            if self._is_declared_or_known(f"{package}.{name}"):
                return f"{package}.{name}"
        return None

    def _is_declared_or_known(self, name: str) -> bool:
        return name in self._declarations or is_known_type(name)

    def supertypes(self, type_name: str) -> tuple[str, ...]:
        declaration: TypeDeclaration | None = self._declarations.get(type_name)
        if declaration is not None:
            names: tuple[str, ...] = tuple(t.name for t in declaration.supertypes)
            return names or (OBJECT_TYPE,)
        return KNOWN_SUPERTYPES.get(type_name, ())

    def is_subtype(self, subtype: JavaType, supertype: str) -> bool:
        """Whether ``subtype`` is ``supertype`` or inherits from it."""
        seen: set[str] = set()
        pending: list[str] = [subtype.name]
        while pending:
            current: str = pending.pop()
            if current == supertype:
                return True
            if current in seen:
                continue
            seen.add(current)
            pending.extend(self.supertypes(current))
        return False

    # ------------------------------------------------------------------
    # Variables

    def variable_type(self, name: str, *, context: Node) -> JavaType | None:
        """Declared type of the variable ``name`` visible from ``context``.

        Returns None when no declaration is found or when the declaration
        carries no explicit type (inferred lambda parameters, ``var``).
        """
        found, type_node = self._visible_declaration(name, context=context)
        if not found or type_node is None or node_text(type_node) == "var":
            return None
        return self.resolve_type(type_node)

    # ------------------------------------------------------------------
    # Calls

    def resolve_invocation(self, node: Node) -> MethodSymbol | None:
        """Resolve a method invocation to its target symbol."""
        if node.type != METHOD_INVOCATION:
            raise ValueError(f"expected {METHOD_INVOCATION}, got {node.type}")
        name_node: Node | None = node.child_by_field_name("name")
        if name_node is None:
            return None
        name: str = node_text(name_node)
        arguments: list[Node] = invocation_arguments(node)
        receiver: Node | None = node.child_by_field_name("object")

        candidates: list[MethodSymbol]
        if receiver is None:
            candidates = self._unqualified_candidates(node, name)
        elif receiver.type == "this":
            candidates = self._candidates_in_enclosing(node, name, innermost_only=True)
        elif receiver.type == "super":
            candidates = []
            for supertype in self._enclosing_supertypes(node):
                candidates.extend(self._lookup_methods(supertype, name))
        else:
            owner: JavaType | None = self._receiver_type(receiver)
            candidates = [] if owner is None else self._lookup_methods(owner.name, name)

        symbol: MethodSymbol | None = self._select_overload(candidates, arguments)
        if symbol is None:
            logger.debug("Unresolved invocation of %s()", name)
        return symbol

    def resolve_constructor(self, node: Node) -> MethodSymbol | None:
        """Resolve an object creation to the invoked constructor."""
        if node.type != OBJECT_CREATION:
            raise ValueError(f"expected {OBJECT_CREATION}, got {node.type}")
        type_node: Node | None = node.child_by_field_name("type")
        if type_node is None:
            return None
        created: JavaType = self.resolve_type(type_node)
        arguments: list[Node] = invocation_arguments(node)

        declaration: TypeDeclaration | None = self._declarations.get(created.name)
        if declaration is not None:
            if not declaration.constructors:
                if arguments:
                    return None
                return MethodSymbol(owner=created.name, name=CONSTRUCTOR_NAME)
            return self._select_overload(declaration.constructors, arguments)

        return self._select_overload(
            library_methods(owner=created.name, name=CONSTRUCTOR_NAME), arguments,
        )

    def _unqualified_candidates(self, node: Node, name: str) -> list[MethodSymbol]:
        candidates: list[MethodSymbol] = self._candidates_in_enclosing(node, name)
        if candidates:
            return candidates
        for owner in self._static_imports.get(name, []):
            candidates.extend(self._lookup_methods(self._static_owner(owner), name))
        if candidates:
            return candidates
        for owner in self._static_on_demand:
            candidates.extend(self._lookup_methods(self._static_owner(owner), name))
        return candidates

    def _static_owner(self, owner: str) -> str:
        resolved: JavaType = self.resolve_type_name(owner)
        return resolved.name

    def _candidates_in_enclosing(
        self, node: Node, name: str, *, innermost_only: bool = False,
    ) -> list[MethodSymbol]:
        scope: Node | None = enclosing(node, TYPE_DECLARATION_KINDS)
        while scope is not None:
            fqn: str | None = self._fqn_by_node.get(scope.id)
            if fqn is not None:
                found: list[MethodSymbol] = self._lookup_methods(fqn, name)
                if found or innermost_only:
                    return found
            scope = enclosing(scope, TYPE_DECLARATION_KINDS)
        return []

    def _enclosing_supertypes(self, node: Node) -> tuple[str, ...]:
        scope: Node | None = enclosing(node, TYPE_DECLARATION_KINDS)
        if scope is None or scope.id not in self._fqn_by_node:
            return ()
        return self.supertypes(self._fqn_by_node[scope.id])

    def _lookup_methods(self, owner: str, name: str) -> list[MethodSymbol]:
        """Methods named ``name`` on ``owner`` and its supertypes, nearest first."""
        found: list[MethodSymbol] = []
        seen: set[str] = set()
        queue: list[str] = [owner]
        while queue:
            current: str = queue.pop(0)
            if current in seen:
                continue
            seen.add(current)
            declaration: TypeDeclaration | None = self._declarations.get(current)
            if declaration is not None:
                found.extend(m for m in declaration.methods if m.name == name)
            else:
                found.extend(library_methods(owner=current, name=name))
            queue.extend(self.supertypes(current))
        return found

    def _receiver_type(self, receiver: Node) -> JavaType | None:
        if receiver.type == IDENTIFIER:
            name: str = node_text(receiver)
            found, _ = self._visible_declaration(name, context=receiver)
            if found:
                return self.variable_type(name, context=receiver)
            as_type: JavaType = self.resolve_type_name(name, context=receiver)
            return as_type if as_type.known else None
        if receiver.type == "field_access":
            qualified: str = "".join(node_text(receiver).split())
            if self._is_declared_or_known(qualified):
                return JavaType(qualified)
            obj: Node | None = receiver.child_by_field_name("object")
            field_name: Node | None = receiver.child_by_field_name("field")
            if obj is not None and obj.type == "this" and field_name is not None:
                return self.variable_type(node_text(field_name), context=receiver)
            return None
        if receiver.type == OBJECT_CREATION:
            type_node: Node | None = receiver.child_by_field_name("type")
            return None if type_node is None else self.resolve_type(type_node)
        if receiver.type in ("string_literal", "text_block"):
            return JavaType(STRING_TYPE)
        return None

    def _visible_declaration(self, name: str, *, context: Node) -> tuple[bool, Node | None]:
        scope: Node | None = context.parent
        while scope is not None:
            found, type_node = _find_declaration(scope, name)
            if found:
                return True, type_node
            scope = scope.parent
        return False, None

    def argument_type(self, argument: Node) -> str | None:
        """Static type name of an argument expression, None when unknown."""
        literal: str | None = _LITERAL_TYPES.get(argument.type)
        if literal is not None:
            return literal
        if argument.type == IDENTIFIER:
            resolved: JavaType | None = self.variable_type(node_text(argument), context=argument)
            return None if resolved is None else resolved.name
        if argument.type == OBJECT_CREATION:
            type_node: Node | None = argument.child_by_field_name("type")
            return None if type_node is None else self.resolve_type(type_node).name
        return None

    def _select_overload(
        self, candidates: list[MethodSymbol], arguments: list[Node],
    ) -> MethodSymbol | None:
        argument_types: list[str | None] = [self.argument_type(a) for a in arguments]
        for candidate in candidates:
            if not candidate.accepts_arity(len(arguments)):
                continue
            if all(
                self._fits(arg, _parameter_at(candidate, i))
                for i, arg in enumerate(argument_types)
            ):
                return candidate
        return None

    def _fits(self, argument: str | None, parameter: JavaType) -> bool:
        if argument is None or not parameter.known:
            return True
        if argument == _NULL_ARGUMENT:
            return not parameter.is_primitive
        if argument == _FUNCTIONAL_ARGUMENT:
            return not parameter.is_primitive and parameter.name not in (
                STRING_TYPE, CLASS_TYPE, OBJECT_TYPE,
            )
        if argument in PRIMITIVE_TYPES:
            return parameter.is_primitive or parameter.name.startswith("java.lang.")
        if parameter.name == OBJECT_TYPE or argument == parameter.name:
            return True
        return self.is_subtype(JavaType(argument), parameter.name)


def _parameter_at(symbol: MethodSymbol, index: int) -> JavaType:
    params: tuple[JavaType, ...] = symbol.parameter_types
    if index < len(params):
        return params[index]
    if not params:
        return _UNKNOWN_PARAMETER
    return params[-1]


def _member_nodes(body: Node) -> Iterator[Node]:
    for child in named_children(body):
        if child.type == "enum_body_declarations":
            yield from named_children(child)
        else:
            yield child


def _find_declaration(scope: Node, name: str) -> tuple[bool, Node | None]:
    """Look for a declaration of ``name`` directly introduced by ``scope``."""
    for declared, type_node in _declared_names(scope):
        if declared == name:
            return True, type_node
    return False, None


def _declared_names(scope: Node) -> Iterator[tuple[str, Node | None]]:
    kind: str = scope.type
    if kind in _VARIABLE_SCOPE_KINDS:
        for child in named_children(scope):
            if child.type in ("local_variable_declaration", "field_declaration", "constant_declaration"):
                yield from _declarators(child)
    elif kind in ("method_declaration", "constructor_declaration"):
        parameters: Node | None = scope.child_by_field_name("parameters")
        if parameters is not None:
            yield from _parameters(parameters)
    elif kind == "lambda_expression":
        parameters = scope.child_by_field_name("parameters")
        if parameters is not None:
            if parameters.type == IDENTIFIER:
                yield node_text(parameters), None
            else:
                yield from _parameters(parameters)
    elif kind == "catch_clause":
        for child in named_children(scope):
            if child.type == "catch_formal_parameter":
                name_node: Node | None = child.child_by_field_name("name")
                catch_types: list[Node] = [
                    t for c in named_children(child) if c.type == "catch_type"
                    for t in named_children(c)
                ]
                if name_node is not None:
                    yield node_text(name_node), catch_types[0] if catch_types else None
    elif kind == "enhanced_for_statement":
        name_node = scope.child_by_field_name("name")
        if name_node is not None:
            yield node_text(name_node), scope.child_by_field_name("type")
    elif kind == "for_statement":
        for init in scope.children_by_field_name("init"):
            if init.type == "local_variable_declaration":
                yield from _declarators(init)
    elif kind == "try_with_resources_statement":
        resources: Node | None = scope.child_by_field_name("resources")
        if resources is not None:
            for resource in named_children(resources):
                name_node = resource.child_by_field_name("name")
                if name_node is not None:
                    yield node_text(name_node), resource.child_by_field_name("type")


def _declarators(declaration: Node) -> Iterator[tuple[str, Node | None]]:
    type_node: Node | None = declaration.child_by_field_name("type")
    for declarator in declaration.children_by_field_name("declarator"):
        name_node: Node | None = declarator.child_by_field_name("name")
        if name_node is not None:
            yield node_text(name_node), type_node


def _parameters(parameters: Node) -> Iterator[tuple[str, Node | None]]:
    for param in named_children(parameters):
        if param.type == IDENTIFIER:
            yield node_text(param), None
        elif param.type == "formal_parameter":
            name_node: Node | None = param.child_by_field_name("name")
            if name_node is not None:
                yield node_text(name_node), param.child_by_field_name("type")
        elif param.type == "spread_parameter":
            for part in named_children(param):
                if part.type == "variable_declarator":
                    declared: Node | None = part.child_by_field_name("name")
                    if declared is not None:
                        yield node_text(declared), None
