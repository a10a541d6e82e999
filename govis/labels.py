"""
Text rendering of type shapes for node labels.

`render` gives the one-line Go signature of a shape. The label builders wrap
signatures into Graphviz label strings: a plain `{name signature}` label, or
a record label with one compartment (and one port) per struct field or
interface method.
"""
from __future__ import annotations

from typing import List, Tuple

from .model import (
    Array,
    Channel,
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

__all__ = ["render", "escape", "build_simple_label", "build_record_label"]

# Characters with a meaning inside Graphviz record labels.
_SPECIAL_CHARS = " '`[]{}()*"
# Record field separators and port markers, literal inside a compartment.
_RECORD_CHARS = "|<>"


def escape(text: str, extra: str = "") -> str:
    for ch in _SPECIAL_CHARS + extra:
        text = text.replace(ch, "\\" + ch)
    return text


def render(t: TypeExpr) -> str:
    if isinstance(t, Named):
        return t.name
    if isinstance(t, Qualified):
        return f"{t.scope}.{t.name}"
    if isinstance(t, Pointer):
        return "*" + render(t.inner)
    if isinstance(t, Array):
        return "[]" + render(t.element)
    if isinstance(t, Map):
        return f"map[{render(t.key)}]{render(t.value)}"
    if isinstance(t, Channel):
        return "chan " + render(t.element)
    if isinstance(t, Variadic):
        return "..." + render(t.element)
    if isinstance(t, Func):
        out = f"func({_render_fields(t.params)})"
        if t.results:
            out += f" ({_render_fields(t.results)})"
        return out
    # nested structs and interfaces are only expanded by build_record_label
    if isinstance(t, Struct):
        return "struct {}"
    if isinstance(t, Interface):
        return "interface{}"
    if isinstance(t, Opaque):
        return t.text
    raise TypeError(f"Unsupported type expression: {t!r}")


def _render_field(f: Field) -> str:
    if f.names:
        return f"{', '.join(f.names)} {render(f.type)}"
    return render(f.type)


def _render_fields(fields: Tuple[Field, ...]) -> str:
    return ", ".join(_render_field(f) for f in fields)


def build_simple_label(name: str, shape: TypeExpr) -> str:
    return "{" + escape(f"{name} {render(shape)}") + "}"


def build_record_label(name: str, shape: TypeExpr) -> str:
    """
    Record label for a struct or interface declaration.

    The first compartment holds the name (`Name interface` for interfaces),
    each following one a field or method prefixed with its `<fN>` port.
    """
    if isinstance(shape, Interface):
        title = f"{name} interface"
        members = shape.methods
    elif isinstance(shape, Struct):
        title = name
        members = shape.fields
    else:
        raise TypeError(f"Record labels need a struct or interface, got {shape!r}")

    cells: List[str] = [escape(title, _RECORD_CHARS)]
    for i, member in enumerate(members):
        cells.append(f"<f{i}>" + escape(_render_field(member), _RECORD_CHARS))
    return "{" + "|".join(cells) + "}"
