"""Resolved types and method symbols for Java sources."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

CONSTRUCTOR_NAME: Final[str] = "<init>"

OBJECT_TYPE: Final[str] = "java.lang.Object"
STRING_TYPE: Final[str] = "java.lang.String"
CLASS_TYPE: Final[str] = "java.lang.Class"
RUNTIME_EXCEPTION_TYPE: Final[str] = "java.lang.RuntimeException"
ERROR_TYPE: Final[str] = "java.lang.Error"

PRIMITIVE_TYPES: Final[frozenset[str]] = frozenset({
    "boolean", "byte", "char", "short", "int", "long", "float", "double",
})


@dataclass(frozen=True, slots=True)
class JavaType:
    """A type reference. ``name`` is fully qualified when ``known``."""

    name: str
    known: bool = True

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_primitive(self) -> bool:
        return self.name in PRIMITIVE_TYPES

    def __str__(self) -> str:
        return self.simple_name


@dataclass(frozen=True, slots=True)
class MethodSymbol:
    """A method or constructor with its declared contract."""

    owner: str
    name: str
    parameter_types: tuple[JavaType, ...] = ()
    thrown_types: tuple[JavaType, ...] = ()
    varargs: bool = False

    @property
    def is_constructor(self) -> bool:
        return self.name == CONSTRUCTOR_NAME

    def accepts_arity(self, count: int) -> bool:
        """Whether a call with ``count`` arguments can target this symbol."""
        declared: int = len(self.parameter_types)
        if self.varargs:
            return count >= declared - 1
        return count == declared

    def __str__(self) -> str:
        params: str = ", ".join(t.simple_name for t in self.parameter_types)
        return f"{self.owner}#{self.name}({params})"
