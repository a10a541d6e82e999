"""
Go front end: turns Go source text into syntax trees for type declarations.

Parsing is delegated to Tree-sitter and its Go grammar (`tree_sitter_go`).
The concrete syntax tree is walked once: every type declaration (at package
level or inside a function body), every function or method declaration and
every comment group is kept, the rest of the file is skipped. Error and
missing nodes inserted by Tree-sitter's recovery become `ParseFailure`.

The trees mirror `go/ast` node kinds:

    TypeSpec       names=[name]         children=[type]
    Ident          names=[name]
    SelectorExpr   names=[pkg, name]
    StarExpr / ArrayType / ChanType / Ellipsis / ParenExpr   children=[elem]
    MapType        children=[key, value]
    FuncType       children=[params FieldList, results FieldList]
    StructType / InterfaceType   children=[FieldList]
    FieldList      children=[Field, ...]
    Field          names=[...]          children=[type]
    IndexExpr      generic instantiation
    UnionExpr      constraint union (`~int | string`)
    Comment        one comment group
    FuncDecl       names=[name]

Grammar node types without a counterpart keep their Tree-sitter type as
`kind` and their source text.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from .errors import ParseFailure

__all__ = [
    "SyntaxNode",
    "SourceUnit",
    "parse_source",
    "parse_file",
    "parse_type_expr",
]

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

# Reserved words; the grammar only treats them as keywords where one is expected.
GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
        "map", "package", "range", "return", "select", "struct", "switch", "type",
        "var",
    }
)

_ARRAY_TYPES = frozenset({"slice_type", "array_type", "implicit_length_array_type"})
_METHOD_ELEMS = frozenset({"method_elem", "method_spec"})
_PARAM_DECLS = frozenset({"parameter_declaration", "variadic_parameter_declaration"})
_FUNC_DECLS = frozenset({"function_declaration", "method_declaration"})

# wraps a standalone type expression into a compilable unit
_EXPR_PREFIX = "package p\n\nvar _ "


@dataclass
class SyntaxNode:
    kind: str
    text: str = ""
    names: List[str] = field(default_factory=list)
    children: List["SyntaxNode"] = field(default_factory=list)
    lineno: int = 0


@dataclass
class SourceUnit:
    """One parsed Go file: its package clause and the syntax nodes kept from it."""

    unit: str
    package: str
    nodes: List[SyntaxNode]

    def type_specs(self) -> List[SyntaxNode]:
        return [n for n in self.nodes if n.kind == "TypeSpec"]


def parse_source(source: str, unit: str = "<source>", scope: Optional[str] = None) -> SourceUnit:
    """
    Parse one Go source file.

    `scope` names the package in errors raised before the package clause
    has been read.
    """
    conv = _Converter(source, unit, scope)
    root = conv.parse()
    package = conv.package_name(root)
    if package is not None:
        conv.scope = package
    conv.check(root)
    if package is None:
        raise conv.fail("expected 'package' clause", root)

    nodes: List[SyntaxNode] = []
    for ts_node in _walk(root):
        if ts_node.type in ("type_spec", "type_alias"):
            nodes.append(conv.type_spec(ts_node))
        elif ts_node.type in _FUNC_DECLS:
            name = ts_node.child_by_field_name("name")
            nodes.append(
                SyntaxNode(
                    "FuncDecl",
                    text=conv.text(name),
                    names=[conv.text(name)],
                    lineno=_lineno(ts_node),
                )
            )
    nodes.extend(conv.comment_groups(root))
    nodes.sort(key=lambda n: n.lineno)
    return SourceUnit(unit=unit, package=package, nodes=nodes)


def parse_file(path: Path, scope: Optional[str] = None) -> SourceUnit:
    source = path.read_text(encoding="utf-8")
    return parse_source(source, unit=str(path), scope=scope)


def parse_type_expr(text: str) -> SyntaxNode:
    """Parse a standalone type expression such as `map[string]*T`."""
    conv = _Converter(_EXPR_PREFIX + text + "\n", "<expr>", None)
    root = conv.parse()
    conv.check(root)
    for ts_node in _walk(root):
        if ts_node.type == "var_spec":
            return conv.type_expr(ts_node.child_by_field_name("type"))
    raise ParseFailure("<expr>", f"not a type expression: {text!r}")


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def _walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of a Tree-sitter subtree."""
    yield node
    for child in node.children:
        yield from _walk(child)


def _lineno(node: Node) -> int:
    return node.start_point[0] + 1


def _named(node: Node) -> List[Node]:
    return [c for c in node.named_children if c.type != "comment"]


class _Converter:
    """Converts the Tree-sitter tree of one unit into `SyntaxNode`s."""

    def __init__(self, source: str, unit: str, scope: Optional[str]) -> None:
        self.source = source.encode("utf-8")
        self.unit = unit
        self.scope = scope

    def fail(self, message: str, node: Optional[Node] = None) -> ParseFailure:
        lineno = _lineno(node) if node is not None else None
        return ParseFailure(self.unit, message, scope=self.scope, lineno=lineno)

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def ident(self, node: Node) -> str:
        name = self.text(node)
        if name in GO_KEYWORDS:
            raise self.fail(f"keyword {name!r} used as identifier", node)
        return name

    # --- unit level --------------------------------------------------------

    def parse(self) -> Node:
        return Parser(GO_LANGUAGE).parse(self.source).root_node

    def check(self, root: Node) -> None:
        if root.has_error:
            raise self._first_error(root)

    def _first_error(self, root: Node) -> ParseFailure:
        for node in _walk(root):
            if node.is_missing:
                return self.fail(f"missing {node.type!r}", node)
            if node.type == "ERROR":
                snippet = self.text(node).strip().splitlines()
                near = snippet[0][:40] if snippet else ""
                return self.fail(f"syntax error near {near!r}", node)
        return self.fail("syntax error")

    def package_name(self, root: Node) -> Optional[str]:
        for child in root.named_children:
            if child.type == "package_clause" and not child.has_error:
                return self.text(_named(child)[0])
        return None

    def comment_groups(self, root: Node) -> List[SyntaxNode]:
        """Comments on adjacent lines form one group."""
        groups: List[SyntaxNode] = []
        prev_end: Optional[int] = None
        for node in _walk(root):
            if node.type != "comment":
                continue
            gap = self.source[prev_end:node.start_byte] if prev_end is not None else None
            if gap is not None and not gap.strip() and gap.count(b"\n") <= 1:
                groups[-1].text += "\n" + self.text(node)
            else:
                groups.append(SyntaxNode("Comment", text=self.text(node), lineno=_lineno(node)))
            prev_end = node.end_byte
        return groups

    def type_spec(self, node: Node) -> SyntaxNode:
        name = self.ident(node.child_by_field_name("name"))
        rhs = self.type_expr(node.child_by_field_name("type"))
        logger.debug("%s: type %s (%s)", self.unit, name, rhs.kind)
        return SyntaxNode(
            "TypeSpec",
            text=self.text(node),
            names=[name],
            children=[rhs],
            lineno=_lineno(node),
        )

    # --- type expressions ----------------------------------------------------

    def type_expr(self, node: Node) -> SyntaxNode:
        kind = node.type
        text = self.text(node)
        lineno = _lineno(node)

        def make(go_kind: str, names=None, children=None) -> SyntaxNode:
            return SyntaxNode(go_kind, text=text, names=names or [], children=children or [], lineno=lineno)

        if kind in ("type_identifier", "identifier"):
            return make("Ident", names=[self.ident(node)])
        if kind == "qualified_type":
            pkg = self.ident(node.child_by_field_name("package"))
            name = self.ident(node.child_by_field_name("name"))
            return make("SelectorExpr", names=[pkg, name])
        if kind == "pointer_type":
            return make("StarExpr", children=[self.type_expr(_named(node)[0])])
        if kind in _ARRAY_TYPES:
            return make("ArrayType", children=[self.type_expr(node.child_by_field_name("element"))])
        if kind == "map_type":
            key = self.type_expr(node.child_by_field_name("key"))
            value = self.type_expr(node.child_by_field_name("value"))
            return make("MapType", children=[key, value])
        if kind == "channel_type":
            # direction is not kept
            return make("ChanType", children=[self.type_expr(node.child_by_field_name("value"))])
        if kind == "function_type":
            return make("FuncType", children=self.signature(node))
        if kind == "struct_type":
            return make("StructType", children=[self.struct_fields(node)])
        if kind == "interface_type":
            return make("InterfaceType", children=[self.interface_elems(node)])
        if kind == "generic_type":
            return make("IndexExpr")
        if kind == "parenthesized_type":
            return make("ParenExpr", children=[self.type_expr(_named(node)[0])])
        if kind == "negated_type":
            return make("UnionExpr")
        return make(kind)

    def signature(self, node: Node) -> List[SyntaxNode]:
        """Parameter and result `FieldList`s of a function type or method."""
        params = self.parameters(node.child_by_field_name("parameters"))
        result = node.child_by_field_name("result")
        if result is None:
            results = SyntaxNode("FieldList", lineno=params.lineno)
        elif result.type == "parameter_list":
            results = self.parameters(result)
        else:
            typ = self.type_expr(result)
            field_node = SyntaxNode("Field", text=typ.text, children=[typ], lineno=typ.lineno)
            results = SyntaxNode("FieldList", text=typ.text, children=[field_node], lineno=typ.lineno)
        return [params, results]

    def parameters(self, node: Node) -> SyntaxNode:
        fields: List[SyntaxNode] = []
        for decl in _named(node):
            if decl.type not in _PARAM_DECLS:
                raise self.fail(f"unexpected {decl.type} in parameter list", decl)
            names = [self.ident(n) for n in decl.children_by_field_name("name")]
            typ = self.type_expr(decl.child_by_field_name("type"))
            if decl.type == "variadic_parameter_declaration":
                typ = SyntaxNode("Ellipsis", text="..." + typ.text, children=[typ], lineno=typ.lineno)
            fields.append(SyntaxNode("Field", text=self.text(decl), names=names, children=[typ], lineno=_lineno(decl)))

        named = [bool(f.names) for f in fields]
        if any(named) and not all(named):
            raise self.fail("mixed named and unnamed parameters", node)
        return SyntaxNode("FieldList", text=self.text(node), children=fields, lineno=_lineno(node))

    def struct_fields(self, node: Node) -> SyntaxNode:
        field_list = next(c for c in node.named_children if c.type == "field_declaration_list")
        fields: List[SyntaxNode] = []
        for decl in _named(field_list):
            names = [self.ident(n) for n in decl.children_by_field_name("name")]
            typ = self.type_expr(decl.child_by_field_name("type"))
            if not names and any(c.type == "*" for c in decl.children):
                # embedded pointer `*Base`
                typ = SyntaxNode("StarExpr", text="*" + typ.text, children=[typ], lineno=typ.lineno)
            fields.append(SyntaxNode("Field", text=self.text(decl), names=names, children=[typ], lineno=_lineno(decl)))
        return SyntaxNode("FieldList", text=self.text(field_list), children=fields, lineno=_lineno(field_list))

    def interface_elems(self, node: Node) -> SyntaxNode:
        methods: List[SyntaxNode] = []
        for elem in _named(node):
            if elem.type in _METHOD_ELEMS:
                name = self.ident(elem.child_by_field_name("name"))
                sig = SyntaxNode(
                    "FuncType",
                    text=self.text(elem),
                    children=self.signature(elem),
                    lineno=_lineno(elem),
                )
                methods.append(SyntaxNode("Field", text=self.text(elem), names=[name], children=[sig], lineno=_lineno(elem)))
                continue
            terms = _named(elem) if elem.type == "type_elem" else [elem]
            if len(terms) == 1:
                typ = self.type_expr(terms[0])
            else:
                typ = SyntaxNode("UnionExpr", text=self.text(elem), lineno=_lineno(elem))
            methods.append(SyntaxNode("Field", text=self.text(elem), children=[typ], lineno=_lineno(elem)))
        return SyntaxNode("FieldList", text=self.text(node), children=methods, lineno=_lineno(node))
