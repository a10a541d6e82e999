# govis/cli.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .errors import NoInputSpecified, ParseFailure
from .extractor import ExtractorConfig, extract_dirs
from .graph import GraphConfig, is_test_scope
from .labels import render
from .model import Scope, shape_kind
from .renderer import RendererConfig, build_dot, write_svg
from .resolver import depends_on

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govis",
        description=(
            "Extract the type declarations of Go packages and visualize which "
            "types reference which as a Graphviz graph."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Package directories to visualize.",
    )
    parser.add_argument(
        "--path",
        type=str,
        default="",
        help="Comma separated package directories (combined with positional paths).",
    )
    parser.add_argument(
        "--format",
        choices=("dot", "svg", "summary", "json"),
        default="dot",
        help=(
            "Output format: 'dot' (Graphviz DOT), 'svg' (rendered SVG), "
            "'summary' (human-readable) or 'json' (extracted declarations). "
            "Default: dot."
        ),
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output file for DOT/SVG. DOT defaults to stdout, SVG to go-vis.svg.",
    )

    # Extraction options
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Also read packages in subdirectories.",
    )

    # Graph / rendering options
    parser.add_argument(
        "--include-tests",
        action="store_true",
        help="Keep external test packages (names ending in _test) in the graph.",
    )
    parser.add_argument(
        "--cluster",
        action="store_true",
        help="Draw each package as a Graphviz cluster.",
    )
    parser.add_argument(
        "--rankdir",
        choices=("TB", "LR", "BT", "RL"),
        help="Graph layout direction.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )

    return parser


def _keep_all_scopes(scope_id: str) -> bool:
    return False


def _collect_paths(args: argparse.Namespace) -> List[Path]:
    raw = list(args.paths)
    raw.extend(p.strip() for p in args.path.split(",") if p.strip())
    return [Path(p) for p in raw]


def main(argv: Any | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    extractor_cfg = ExtractorConfig(recursive=args.recursive)
    try:
        scopes = extract_dirs(_collect_paths(args), extractor_cfg)
    except NoInputSpecified:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: no package directory given", file=sys.stderr)
        return 1
    except ParseFailure as exc:
        logger.error("failed to parse %s", exc)
        return 1

    excluded = _keep_all_scopes if args.include_tests else is_test_scope

    if args.format == "summary":
        _print_summary(scopes, excluded)
        return 0

    if args.format == "json":
        data = _scopes_to_jsonable(scopes, excluded)
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    graph_cfg = GraphConfig(is_excluded_scope=excluded)
    renderer_cfg = RendererConfig(cluster_scopes=args.cluster, rankdir=args.rankdir)
    dot = build_dot(scopes, graph_cfg, renderer_cfg)

    if args.format == "dot":
        if args.output:
            output = Path(args.output)
            output.write_text(dot, encoding="utf-8")
            print(f"Wrote DOT to {output}", file=sys.stderr)
        else:
            sys.stdout.write(dot)
        return 0

    # args.format == "svg"
    output = Path(args.output) if args.output else Path("go-vis.svg")
    write_svg(dot, output)
    print(f"Wrote SVG to {output}", file=sys.stderr)
    return 0


def _scopes_to_jsonable(scopes: Mapping[str, Scope], excluded) -> Dict[str, Any]:
    return {
        "scopes": [
            {
                "id": scope_id,
                "excluded": excluded(scope_id),
                "declarations": [
                    {
                        "name": decl.name,
                        "kind": shape_kind(decl.shape),
                        "signature": render(decl.shape),
                        "depends_on": depends_on(decl.shape),
                    }
                    for decl in scopes[scope_id].sorted_declarations()
                ],
            }
            for scope_id in sorted(scopes)
        ],
    }


def _print_summary(scopes: Mapping[str, Scope], excluded) -> None:
    total = sum(len(s.declarations) for s in scopes.values())
    print(f"Packages     : {len(scopes)}")
    print(f"  Declarations : {total}")
    for scope_id in sorted(scopes):
        scope = scopes[scope_id]
        note = " (excluded)" if excluded(scope_id) else ""
        print(f"    - {scope_id}: {len(scope.declarations)} types{note}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
