from govis.graph import GraphConfig, build_type_graph, is_test_scope
from govis.model import (
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
)


def _scope(scope_id, **shapes):
    scope = Scope(scope_id)
    for name, shape in shapes.items():
        scope.add(Declaration(name, shape))
    return scope


def test_node_shapes_and_kinds() -> None:
    scope = _scope(
        "p",
        A=Named("int"),
        B=Qualified("io", "Reader"),
        C=Pointer(Named("A")),
        D=Opaque("List[int]"),
        E=Channel(Named("A")),
        F=Func(),
        G=Array(Named("A")),
        H=Map(Named("A"), Named("B")),
        I=Interface(),
        J=Struct(),
    )

    graph = build_type_graph({"p": scope})

    shapes = {n.id: (n.shape, n.kind) for n in graph.iter_nodes()}
    assert shapes == {
        "A": ("ellipse", "alias"),
        "B": ("ellipse", "alias"),
        "C": ("ellipse", "pointer"),
        "D": ("ellipse", "alias"),
        "E": ("box", "channel"),
        "F": ("rectangle", "func"),
        "G": ("rectangle", "array"),
        "H": ("rectangle", "map"),
        "I": ("Mrecord", "interface"),
        "J": ("record", "struct"),
    }


def test_top_level_func_and_channel_use_port_zero() -> None:
    scope = _scope(
        "p",
        T=Struct(),
        Handler=Func(params=(Field((), Named("T")),), results=(Field((), Pointer(Named("T"))),)),
        Queue=Channel(Named("T")),
    )

    edges = build_type_graph({"p": scope}).iter_edges()

    assert [(e.source, e.port, e.target) for e in edges] == [
        ("Handler", 0, "T"),
        ("Handler", 0, "T"),
        ("Queue", 0, "T"),
    ]


def test_subgraphs_sorted_and_test_scopes_excluded() -> None:
    scopes = {
        "zeta": _scope("zeta", Z=Named("int")),
        "alpha": _scope("alpha", A=Named("int")),
        "alpha_test": _scope("alpha_test", C=Named("int")),
    }

    graph = build_type_graph(scopes)

    assert [s.id for s in graph.subgraphs] == ["alpha", "zeta"]
    assert graph.subgraph("alpha_test") is None
    assert graph.subgraph("zeta").nodes[0].id == "Z"


def test_custom_exclusion_predicate() -> None:
    scopes = {"a": _scope("a"), "a_test": _scope("a_test"), "b": _scope("b")}

    graph = build_type_graph(scopes, GraphConfig(is_excluded_scope=lambda sid: sid == "b"))

    assert [s.id for s in graph.subgraphs] == ["a", "a_test"]


def test_edges_stay_inside_their_scope() -> None:
    scopes = {
        "a": _scope("a", X=Struct(fields=(Field(("y",), Named("Y")),))),
        "b": _scope("b", Y=Named("int")),
    }

    graph = build_type_graph(scopes)

    assert graph.iter_edges() == []


def test_building_does_not_modify_scopes() -> None:
    scope = _scope("p", A=Struct(fields=(Field(("b",), Named("B")),)), B=Named("int"))
    before = dict(scope.declarations)

    build_type_graph({"p": scope})

    assert scope.declarations == before


def test_is_test_scope() -> None:
    assert is_test_scope("shop_test")
    assert not is_test_scope("shop")
    assert not is_test_scope("testing")
