# govis/renderer.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from .graph import GraphConfig, GraphNode, Subgraph, TypeGraph, build_type_graph
from .labels import escape
from .model import Scope
from .resolver import DependencyEdge

GRAPH_NAME = "go-vis"


@dataclass
class RendererConfig:
    """
    Controls how a type graph is written as DOT.

    cluster_scopes:
        If True, package subgraphs are named `cluster_<id>` and drawn as
        rounded boxes by Graphviz. Otherwise they are plain subgraphs.
    rankdir:
        Optional graph-level `rankdir` (e.g. "LR").
    """

    cluster_scopes: bool = False
    rankdir: Optional[str] = None


def _quote(s: str) -> str:
    """
    Quote an identifier or attribute value for DOT.

    Labels carry their own backslash escapes, so only quotes are escaped.
    """
    return '"' + s.replace('"', '\\"') + '"'


def serialize(graph: TypeGraph, config: Optional[RendererConfig] = None) -> str:
    """
    Write a `TypeGraph` as a Graphviz DOT string.

    This is a pure function: it does not touch the filesystem or run Graphviz.
    """
    if config is None:
        config = RendererConfig()

    lines: List[str] = []
    lines.append(f"digraph {_quote(GRAPH_NAME)} {{")
    if config.rankdir:
        lines.append(f"  rankdir={config.rankdir};")

    for sub in graph.subgraphs:
        lines.extend(_subgraph_lines(sub, config))

    lines.append("}")
    return "\n".join(lines) + "\n"


def build_dot(
    scopes: Mapping[str, Scope],
    graph_config: Optional[GraphConfig] = None,
    renderer_config: Optional[RendererConfig] = None,
) -> str:
    """Build the type graph of `scopes` and serialize it to DOT."""
    return serialize(build_type_graph(scopes, graph_config), renderer_config)


def write_svg(dot: str, output: Path) -> None:  # pragma: no cover
    """
    Render a DOT string to an SVG file using the `graphviz` package.

    This requires the Graphviz `dot` binary to be installed on the system.
    """
    from graphviz import Source

    src = Source(dot)
    svg_bytes = src.pipe(format="svg")
    output.write_bytes(svg_bytes)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _subgraph_lines(sub: Subgraph, config: RendererConfig) -> List[str]:
    name = f"cluster_{sub.id}" if config.cluster_scopes else sub.id
    lines = [f"  subgraph {_quote(name)} {{"]
    lines.append(f"    label={_quote('{' + escape(sub.id) + '}')};")
    if config.cluster_scopes:
        lines.append("    style=rounded;")
    for node in sub.nodes:
        lines.append("    " + _node_stmt(node))
    for edge in sub.edges:
        lines.append("    " + _edge_stmt(edge))
    lines.append("  }")
    return lines


def _node_stmt(node: GraphNode) -> str:
    return f"{_quote(node.id)} [shape={node.shape}, label={_quote(node.label)}];"


def _edge_stmt(edge: DependencyEdge) -> str:
    return f"{_quote(edge.source)}:f{edge.port} -> {_quote(edge.target)};"
