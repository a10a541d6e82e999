from hypothesis import given, settings, strategies as st

from govis.extractor import to_type_expr
from govis.frontend import parse_type_expr
from govis.labels import render
from govis.model import (
    Array,
    Channel,
    Field,
    Func,
    Interface,
    Map,
    Named,
    Pointer,
    Qualified,
    Struct,
    Variadic,
)
from govis.resolver import depends_on

TYPE_NAMES = ["a", "b", "x", "Node", "Item", "int", "string"]
PARAM_NAMES = ["a", "b", "n", "err", "ctx"]


def _field_list(elem, allow_variadic: bool):
    """
    A parameter or result list as Go accepts it: every entry named or none,
    with a variadic entry only in last position.
    """

    @st.composite
    def build(draw):
        types = draw(st.lists(elem, max_size=3))
        if allow_variadic and types and draw(st.booleans()):
            types[-1] = Variadic(types[-1])
        if draw(st.booleans()):
            fields = []
            for t in types:
                # a variadic entry takes a single name
                max_names = 1 if isinstance(t, Variadic) else 2
                names = draw(st.lists(st.sampled_from(PARAM_NAMES), min_size=1, max_size=max_names))
                fields.append(Field(tuple(names), t))
            return tuple(fields)
        return tuple(Field((), t) for t in types)

    return build()


leaf_types = st.one_of(
    st.builds(Named, st.sampled_from(TYPE_NAMES)),
    st.builds(Qualified, st.sampled_from(["io", "pkg"]), st.sampled_from(TYPE_NAMES)),
    st.just(Struct()),
    st.just(Interface()),
)


def _extend(children):
    return st.one_of(
        st.builds(Pointer, children),
        st.builds(Array, children),
        st.builds(Map, children, children),
        st.builds(Channel, children),
        st.builds(Func, _field_list(children, True), _field_list(children, False)),
    )


type_exprs = st.recursive(leaf_types, _extend, max_leaves=12)


@given(t=type_exprs)
@settings(max_examples=200, deadline=None)
def test_rendered_signature_parses_back(t):
    assert to_type_expr(parse_type_expr(render(t))) == t


@given(t=type_exprs)
@settings(max_examples=200, deadline=None)
def test_every_dependency_appears_in_signature(t):
    text = render(t)
    for name in depends_on(t):
        assert name in text
