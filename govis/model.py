from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Tuple, Union

__all__ = [
    "Named",
    "Qualified",
    "Pointer",
    "Array",
    "Map",
    "Channel",
    "Variadic",
    "Field",
    "Func",
    "Struct",
    "Interface",
    "Opaque",
    "TypeExpr",
    "ShapeKind",
    "shape_kind",
    "Declaration",
    "Scope",
]

ShapeKind = Literal["alias", "pointer", "array", "map", "channel", "func", "struct", "interface"]


@dataclass(frozen=True)
class Named:
    """A type referenced by bare identifier (`T`, `int`)."""

    name: str


@dataclass(frozen=True)
class Qualified:
    """A type referenced through another package (`pkg.T`). Never resolved further."""

    scope: str
    name: str


@dataclass(frozen=True)
class Pointer:
    inner: "TypeExpr"


@dataclass(frozen=True)
class Array:
    """Slices and fixed-size arrays alike; the length is not modeled."""

    element: "TypeExpr"


@dataclass(frozen=True)
class Map:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class Channel:
    element: "TypeExpr"


@dataclass(frozen=True)
class Variadic:
    element: "TypeExpr"


@dataclass(frozen=True)
class Field:
    """
    One entry of a field list.

    Used for struct fields, parameter and result groups (`a, b int`) and
    interface methods, where `type` is the method's `Func` signature.
    Embedded fields and unnamed parameters have no names.
    """

    names: Tuple[str, ...]
    type: "TypeExpr"


@dataclass(frozen=True)
class Func:
    params: Tuple[Field, ...] = ()
    results: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class Struct:
    fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class Interface:
    methods: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class Opaque:
    """Fallback for syntax the extractor does not model; keeps the source text."""

    text: str


TypeExpr = Union[
    Named,
    Qualified,
    Pointer,
    Array,
    Map,
    Channel,
    Variadic,
    Func,
    Struct,
    Interface,
    Opaque,
]


def shape_kind(t: TypeExpr) -> ShapeKind:
    """Classify the top-level variant of a declared shape."""
    if isinstance(t, (Named, Qualified, Opaque)):
        return "alias"
    if isinstance(t, Pointer):
        return "pointer"
    if isinstance(t, (Array, Variadic)):
        return "array"
    if isinstance(t, Map):
        return "map"
    if isinstance(t, Channel):
        return "channel"
    if isinstance(t, Func):
        return "func"
    if isinstance(t, Struct):
        return "struct"
    if isinstance(t, Interface):
        return "interface"
    raise TypeError(f"Unsupported type expression: {t!r}")


@dataclass(frozen=True)
class Declaration:
    """A named type together with its structural shape."""

    name: str
    shape: TypeExpr


@dataclass
class Scope:
    """
    A package: the declarations that can reference each other by bare name.

    `declarations` is keyed by name; adding a name twice keeps the last one.
    """

    id: str
    declarations: Dict[str, Declaration] = field(default_factory=dict)

    def add(self, decl: Declaration) -> None:
        self.declarations[decl.name] = decl

    def names(self) -> List[str]:
        return sorted(self.declarations)

    def sorted_declarations(self) -> List[Declaration]:
        """Declarations in lexicographic name order."""
        return [self.declarations[name] for name in sorted(self.declarations)]
