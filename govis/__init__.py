
from .errors import GoVisError, NoInputSpecified, ParseFailure

from .model import (
    Named,
    Qualified,
    Pointer,
    Array,
    Map,
    Channel,
    Variadic,
    Field,
    Func,
    Struct,
    Interface,
    Opaque,
    Declaration,
    Scope,
)

from .frontend import SourceUnit, SyntaxNode, parse_file, parse_source, parse_type_expr

from .extractor import ExtractorConfig, extract, extract_dirs, load_units, to_type_expr

from .resolver import DependencyEdge, depends_on, resolve_edges

from .labels import build_record_label, build_simple_label, escape, render

from .graph import (
    GraphConfig,
    GraphNode,
    Subgraph,
    TypeGraph,
    build_type_graph,
    is_test_scope,
)

from .renderer import RendererConfig, build_dot, serialize, write_svg

__all__ = [
    "GoVisError",
    "NoInputSpecified",
    "ParseFailure",
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
    "Declaration",
    "Scope",
    "SourceUnit",
    "SyntaxNode",
    "parse_file",
    "parse_source",
    "parse_type_expr",
    "ExtractorConfig",
    "extract",
    "extract_dirs",
    "load_units",
    "to_type_expr",
    "DependencyEdge",
    "depends_on",
    "resolve_edges",
    "render",
    "escape",
    "build_simple_label",
    "build_record_label",
    "GraphConfig",
    "GraphNode",
    "Subgraph",
    "TypeGraph",
    "build_type_graph",
    "is_test_scope",
    "RendererConfig",
    "build_dot",
    "serialize",
    "write_svg",
]

__version__ = "0.1.0"
