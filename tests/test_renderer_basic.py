# tests/test_renderer_basic.py
from pathlib import Path
import textwrap

from govis.extractor import extract_dirs
from govis.graph import GraphConfig
from govis.renderer import RendererConfig, build_dot


def _make_package(tmp_path: Path) -> Path:
    pkg = tmp_path / "shapes"
    pkg.mkdir()
    (pkg / "shapes.go").write_text(
        textwrap.dedent(
            """
            package shapes

            type Point struct {
                X, Y int
            }

            type Circle struct {
                Center Point
                Radius float64
                tags   map[string]int `json:"tags"`
            }

            type Handler func(c *Circle) (Shape, error)

            type Shape interface {
                Area() float64
            }

            type Events chan Point

            type Points []Point

            type ID int
            """
        ),
        encoding="utf-8",
    )
    return pkg


def test_build_dot_structure(tmp_path: Path) -> None:
    scopes = extract_dirs([_make_package(tmp_path)])

    dot = build_dot(scopes, GraphConfig(), RendererConfig())

    assert dot.startswith('digraph "go-vis" {\n')
    assert '  subgraph "shapes" {' in dot
    assert '    label="{shapes}";' in dot
    assert dot.rstrip().endswith("}")


def test_build_dot_node_shapes_and_labels(tmp_path: Path) -> None:
    scopes = extract_dirs([_make_package(tmp_path)])

    dot = build_dot(scopes)

    assert r'"Point" [shape=record, label="{Point|<f0>X,\ Y\ int}"];' in dot
    assert (
        r'"Circle" [shape=record, label="{Circle|<f0>Center\ Point|<f1>Radius\ float64'
        r'|<f2>tags\ map\[string\]int}"];'
    ) in dot
    assert r'"Shape" [shape=Mrecord, label="{Shape\ interface|<f0>Area\ func\(\)\ \(float64\)}"];' in dot
    assert r'"Handler" [shape=rectangle, label="{Handler\ func\(c\ \*Circle\)\ \(Shape,\ error\)}"];' in dot
    assert r'"Events" [shape=box, label="{Events\ chan\ Point}"];' in dot
    assert r'"Points" [shape=rectangle, label="{Points\ \[\]Point}"];' in dot
    assert r'"ID" [shape=ellipse, label="{ID\ int}"];' in dot


def test_build_dot_edges_in_name_order(tmp_path: Path) -> None:
    scopes = extract_dirs([_make_package(tmp_path)])

    dot = build_dot(scopes)
    edges = [line.strip() for line in dot.splitlines() if "->" in line]

    assert edges == [
        '"Circle":f0 -> "Point";',
        '"Events":f0 -> "Point";',
        '"Handler":f0 -> "Circle";',
        '"Handler":f0 -> "Shape";',
    ]


def test_build_dot_is_reproducible(tmp_path: Path) -> None:
    scopes = extract_dirs([_make_package(tmp_path)])
    assert build_dot(scopes) == build_dot(scopes)


def test_cluster_scopes(tmp_path: Path) -> None:
    scopes = extract_dirs([_make_package(tmp_path)])

    dot = build_dot(scopes, renderer_config=RendererConfig(cluster_scopes=True, rankdir="LR"))

    assert '  subgraph "cluster_shapes" {' in dot
    assert "    style=rounded;" in dot
    assert "  rankdir=LR;" in dot


def test_constraint_union_stays_in_one_compartment(tmp_path: Path) -> None:
    pkg = tmp_path / "num"
    pkg.mkdir()
    (pkg / "num.go").write_text(
        textwrap.dedent(
            """
            package num

            type Number interface {
                ~int | ~float64
                Scale(f float64) Number
            }
            """
        ),
        encoding="utf-8",
    )

    dot = build_dot(extract_dirs([pkg]))

    assert (
        r'"Number" [shape=Mrecord, label="{Number\ interface|<f0>~int\ \|\ ~float64'
        r'|<f1>Scale\ func\(f\ float64\)\ \(Number\)}"];'
    ) in dot
    assert '"Number":f1 -> "Number";' in dot
