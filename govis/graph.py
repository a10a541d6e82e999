from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Literal, Mapping, Optional, Tuple

from .labels import build_record_label, build_simple_label
from .model import (
    Array,
    Channel,
    Declaration,
    Func,
    Interface,
    Map,
    Scope,
    ShapeKind,
    Struct,
    shape_kind,
)
from .resolver import DependencyEdge, resolve_edges

__all__ = [
    "NodeShape",
    "GraphNode",
    "Subgraph",
    "TypeGraph",
    "GraphConfig",
    "is_test_scope",
    "build_type_graph",
]

NodeShape = Literal["ellipse", "box", "rectangle", "Mrecord", "record"]


@dataclass(frozen=True)
class GraphNode:
    """
    A node in the type graph: one declared type.

    - id    : the declared name (unique within its subgraph)
    - kind  : the shape kind of the declaration
    - shape : Graphviz node shape
    - label : label string, already escaped for Graphviz
    """

    id: str
    kind: ShapeKind
    shape: NodeShape
    label: str


@dataclass(frozen=True)
class Subgraph:
    """The nodes and edges of one package."""

    id: str
    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[DependencyEdge, ...] = ()


@dataclass(frozen=True)
class TypeGraph:
    """
    Graph model derived from extracted scopes.

    The `graph` module does not know about DOT syntax; it focuses on:
    - dropping excluded scopes
    - choosing node shapes and labels
    - resolving intra-package references into edges
    """

    subgraphs: Tuple[Subgraph, ...] = ()

    def iter_nodes(self) -> Iterator[GraphNode]:
        for sub in self.subgraphs:
            yield from sub.nodes

    def iter_edges(self) -> List[DependencyEdge]:
        return [e for sub in self.subgraphs for e in sub.edges]

    def subgraph(self, scope_id: str) -> Optional[Subgraph]:
        for sub in self.subgraphs:
            if sub.id == scope_id:
                return sub
        return None


def is_test_scope(scope_id: str) -> bool:
    """True for external test packages (`foo_test`)."""
    return scope_id.endswith("_test")


@dataclass
class GraphConfig:
    """
    Configuration controlling how a type graph is built from scopes.

    Parameters
    ----------
    is_excluded_scope:
        Predicate over scope ids; matching scopes are left out of the graph
        (they are still extracted). Defaults to dropping `_test` packages.
    """

    is_excluded_scope: Callable[[str], bool] = field(default=is_test_scope)


def build_type_graph(scopes: Mapping[str, Scope], config: Optional[GraphConfig] = None) -> TypeGraph:
    """
    Build a `TypeGraph` from extracted scopes.

    Scopes are visited by id and declarations by name, so the same input
    always gives the same graph. The input scopes are not modified.
    """
    if config is None:
        config = GraphConfig()

    subgraphs: List[Subgraph] = []
    for scope_id in sorted(scopes):
        if config.is_excluded_scope(scope_id):
            continue
        scope = scopes[scope_id]
        decls = scope.sorted_declarations()

        # ------------------------------------------------------------------
        # Step 1: one node per declaration
        # ------------------------------------------------------------------
        nodes = tuple(_make_node(decl) for decl in decls)

        # ------------------------------------------------------------------
        # Step 2: edges to other declarations of the same scope
        # ------------------------------------------------------------------
        declared = frozenset(scope.declarations)
        edges: List[DependencyEdge] = []
        for decl in decls:
            edges.extend(resolve_edges(decl, declared))

        subgraphs.append(Subgraph(id=scope_id, nodes=nodes, edges=tuple(edges)))

    return TypeGraph(subgraphs=tuple(subgraphs))


def _node_shape(decl: Declaration) -> NodeShape:
    shape = decl.shape
    if isinstance(shape, Struct):
        return "record"
    if isinstance(shape, Interface):
        return "Mrecord"
    if isinstance(shape, Channel):
        return "box"
    if isinstance(shape, (Func, Array, Map)):
        return "rectangle"
    # names, qualified names, pointers and opaque shapes
    return "ellipse"


def _make_node(decl: Declaration) -> GraphNode:
    shape = _node_shape(decl)
    if shape in ("record", "Mrecord"):
        label = build_record_label(decl.name, decl.shape)
    else:
        label = build_simple_label(decl.name, decl.shape)
    return GraphNode(id=decl.name, kind=shape_kind(decl.shape), shape=shape, label=label)
