from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, List, Tuple

from .model import (
    Array,
    Channel,
    Declaration,
    Field,
    Func,
    Interface,
    Map,
    Named,
    Opaque,
    Pointer,
    Qualified,
    Struct,
    TypeExpr,
    Variadic,
)

__all__ = [
    "DependencyEdge",
    "depends_on",
    "iter_positions",
    "resolve_edges",
]


@dataclass(frozen=True)
class DependencyEdge:
    """
    A reference from one declaration to another declaration of the same scope.

    `port` is the structural position (field, method, or 0 for a whole
    func/channel shape) the reference was found at.
    """

    source: str
    port: int
    target: str


def depends_on(t: TypeExpr) -> List[str]:
    """
    Collect every type name `t` refers to, in declaration order.

    Qualified references come back as `"pkg.Name"` and therefore never match
    a declaration of the current scope. Repeated references are kept.
    """
    if isinstance(t, Named):
        return [t.name]
    if isinstance(t, Qualified):
        return [f"{t.scope}.{t.name}"]
    if isinstance(t, Pointer):
        return depends_on(t.inner)
    if isinstance(t, (Array, Channel, Variadic)):
        return depends_on(t.element)
    if isinstance(t, Map):
        return depends_on(t.key) + depends_on(t.value)
    if isinstance(t, Func):
        return _fields_depend_on(t.params) + _fields_depend_on(t.results)
    if isinstance(t, Struct):
        return _fields_depend_on(t.fields)
    if isinstance(t, Interface):
        return _fields_depend_on(t.methods)
    if isinstance(t, Opaque):
        return [t.text]
    raise TypeError(f"Unsupported type expression: {t!r}")


def _fields_depend_on(fields: Tuple[Field, ...]) -> List[str]:
    names: List[str] = []
    for f in fields:
        names.extend(depends_on(f.type))
    return names


def iter_positions(shape: TypeExpr) -> List[Tuple[int, TypeExpr]]:
    """
    Structural positions of a declared shape that edges can start from.

    Struct fields and interface methods are one position each. A func or
    channel shape is a single position 0 covering everything it references.
    Other shapes have no positions.
    """
    if isinstance(shape, Struct):
        return [(i, f.type) for i, f in enumerate(shape.fields)]
    if isinstance(shape, Interface):
        return [(i, m.type) for i, m in enumerate(shape.methods)]
    if isinstance(shape, (Func, Channel)):
        return [(0, shape)]
    return []


def resolve_edges(decl: Declaration, declared_names: AbstractSet[str]) -> List[DependencyEdge]:
    """
    Edges from `decl` to the declarations in `declared_names` it references.

    One edge per occurrence; names outside `declared_names` are dropped.
    """
    edges: List[DependencyEdge] = []
    for port, typ in iter_positions(decl.shape):
        for name in depends_on(typ):
            if name in declared_names:
                edges.append(DependencyEdge(source=decl.name, port=port, target=name))
    return edges
