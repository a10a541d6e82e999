import pytest

from hypothesis import given, settings, strategies as st

from govis.errors import ParseFailure
from govis.frontend import parse_source

GO_KEYWORDS = [
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
]


@st.composite
def unit_with_keyword_type(draw):
    """
    A source unit that is always invalid:
    type <keyword> <underlying>
    """
    kw = draw(st.sampled_from(GO_KEYWORDS))
    underlying = draw(st.sampled_from(["int", "[]string", "struct{}", "map[string]int"]))
    return f"package p\n\ntype {kw} {underlying}\n", kw


@given(data=unit_with_keyword_type())
@settings(max_examples=50, deadline=None)
def test_keyword_as_type_name_raises(data):
    src, kw = data

    with pytest.raises(ParseFailure) as excinfo:
        parse_source(src, unit="kw.go")

    assert excinfo.value.unit == "kw.go"
    assert excinfo.value.lineno == 3
