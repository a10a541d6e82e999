from __future__ import annotations

import logging
import os
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import DefaultDict, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import NoInputSpecified
from .frontend import SourceUnit, SyntaxNode, parse_file
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
    Scope,
    Struct,
    TypeExpr,
    Variadic,
)

__all__ = [
    "ExtractorConfig",
    "extract",
    "extract_dirs",
    "load_units",
    "to_type_expr",
]

logger = logging.getLogger(__name__)


@dataclass
class ExtractorConfig:
    """
    Configuration for reading Go packages from disk.

    recursive:
        If False (the default) only the `.go` files directly inside each root
        are read. If True, subdirectories are walked as well.
    follow_symlinks:
        Whether symlinked `.go` files are read.
    exclude:
        Directory names skipped while walking recursively.
    """

    recursive: bool = False
    follow_symlinks: bool = False
    exclude: Sequence[str] = (
        ".git",
        ".hg",
        ".svn",
        "vendor",
        "testdata",
        "node_modules",
    )


def extract(units_by_scope: Mapping[str, Iterable[SourceUnit]]) -> Dict[str, Scope]:
    """
    Build one `Scope` per scope id from parsed source units.

    Comment groups and every other non type-declaration node are skipped.
    A name declared twice in a scope keeps its last declaration.
    """
    scopes: Dict[str, Scope] = {}
    for scope_id, units in units_by_scope.items():
        scope = Scope(id=scope_id)
        for unit in units:
            for node in unit.nodes:
                if node.kind != "TypeSpec":
                    continue
                name = node.names[0]
                if name in scope.declarations:
                    logger.debug("%s: %s redeclared in %s", unit.unit, name, scope_id)
                scope.add(Declaration(name=name, shape=to_type_expr(node.children[0])))
        scopes[scope_id] = scope
    return scopes


def to_type_expr(node: SyntaxNode) -> TypeExpr:
    """
    Convert a front-end syntax tree into a `TypeExpr`.

    Node kinds without a `TypeExpr` counterpart become `Opaque` with the
    node's source text.
    """
    kind = node.kind
    if kind == "Ident":
        return Named(node.names[0])
    if kind == "SelectorExpr":
        return Qualified(node.names[0], node.names[1])
    if kind == "StarExpr":
        return Pointer(to_type_expr(node.children[0]))
    if kind == "ArrayType":
        return Array(to_type_expr(node.children[0]))
    if kind == "MapType":
        return Map(to_type_expr(node.children[0]), to_type_expr(node.children[1]))
    if kind == "ChanType":
        return Channel(to_type_expr(node.children[0]))
    if kind == "Ellipsis":
        return Variadic(to_type_expr(node.children[0]))
    if kind == "FuncType":
        params, results = node.children
        return Func(params=_to_fields(params), results=_to_fields(results))
    if kind == "StructType":
        return Struct(fields=_to_fields(node.children[0]))
    if kind == "InterfaceType":
        return Interface(methods=_to_fields(node.children[0]))
    return Opaque(node.text)


def _to_fields(field_list: SyntaxNode) -> Tuple[Field, ...]:
    return tuple(
        Field(names=tuple(f.names), type=to_type_expr(f.children[0]))
        for f in field_list.children
    )


# ---------------------------------------------------------------------------
# Reading packages from disk
# ---------------------------------------------------------------------------

def load_units(
    roots: Sequence[Path],
    config: Optional[ExtractorConfig] = None,
) -> Dict[str, List[SourceUnit]]:
    """
    Parse every `.go` file under `roots` and group the units by package name.

    Files are read in sorted path order so redeclarations resolve the same
    way on every run.
    """
    if config is None:
        config = ExtractorConfig()
    if not roots:
        raise NoInputSpecified("No package directory given")

    units: DefaultDict[str, List[SourceUnit]] = defaultdict(list)
    for root in roots:
        root = Path(root)
        if not root.is_dir():
            raise ValueError(f"Package root does not exist or is not a directory: {root}")
        for path in sorted(_iter_go_files(root, config)):
            unit = parse_file(path, scope=path.parent.name)
            logger.debug(
                "parsed %s (package %s, %d type declarations)",
                path,
                unit.package,
                len(unit.type_specs()),
            )
            units[unit.package].append(unit)
    return dict(units)


def extract_dirs(
    roots: Sequence[Path],
    config: Optional[ExtractorConfig] = None,
) -> Dict[str, Scope]:
    """Read, parse and extract the packages under `roots`."""
    scopes = extract(load_units(roots, config))
    logger.info(
        "extracted %d package(s), %d type declaration(s)",
        len(scopes),
        sum(len(s.declarations) for s in scopes.values()),
    )
    return scopes


def _iter_go_files(root: Path, config: ExtractorConfig) -> Iterable[Path]:
    if config.recursive:
        for dirpath, dirnames, filenames in os.walk(root, followlinks=config.follow_symlinks):
            # mutate dirnames in-place to respect exclude list
            dirnames[:] = [d for d in dirnames if d not in config.exclude]
            for name in filenames:
                path = Path(dirpath) / name
                if _is_go_file(path, config):
                    yield path
        return

    for path in root.iterdir():
        if _is_go_file(path, config):
            yield path


def _is_go_file(path: Path, config: ExtractorConfig) -> bool:
    if not path.name.endswith(".go"):
        return False
    if not config.follow_symlinks and path.is_symlink():
        return False
    return path.is_file()
