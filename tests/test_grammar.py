from pathlib import Path

import pytest

from selfpeg import compile
from selfpeg.grammar.loader import load_grammar
from selfpeg.peg.errors import (
    CompileError, DuplicateRuleDefinition, EmptyGrammar, InvalidRegex,
    MalformedGrammarSource, UnknownRule, UnresolvedReference,
)
from selfpeg.peg.runtime import Grammar

ARITH = Path(__file__).resolve().parent.parent / "examples" / "arith.peg"


def test_forward_reference():
    g = compile('s = x y\nx = "x"\ny = "y"')
    node = g.parse("xy")
    assert (node.start, node.end) == (0, 2)
    assert [c.expr_name for c in node] == ["x", "y"]


def test_self_recursive_rule():
    g = compile('a = "(" a ")" / "0"')
    assert g.parse("((0))").end == 5
    assert g.parse("((0)") is None
    assert g.parse(")") is None


def test_mutually_recursive_rules():
    g = compile('list = "[" items? "]"\nitems = list ("," list)*')
    assert g.parse("[[],[[]]]").end == 9


def test_negative_lookahead():
    g = compile(r'''
        start = ref !equals
        ref = label
        equals = "="
        label = ~"[a-z]+"
    ''')
    assert g.parse("foo").end == 3
    assert g.parse("foo=") is None


def test_positive_lookahead():
    g = compile('w = &"ab" ~"[a-z]+"')
    assert g.parse("abc").text == "abc"
    assert g.parse("bac") is None


def test_comments_and_blank_lines():
    g = compile('''
        # greetings
        greeting = hi / howdy   # two ways

        hi    = "hi"
        howdy = "howdy"
    ''')
    assert list(g) == ["greeting", "hi", "howdy"]
    assert g.parse("howdy").text == "howdy"


def test_default_rule():
    g = compile('a = "a"\nb = "b"')
    assert g.default_rule == "a"
    assert g.parse("b") is None
    assert g.parse("b", "b").text == "b"

    g = compile('a = "a"\nb = "b"', default_rule="b")
    assert g.parse("b").text == "b"


def test_parse_from_position():
    g = compile('word = ~"[a-z]+"')
    node = g.parse("12abc", pos=2)
    assert (node.start, node.end) == (2, 5)
    assert node.text == "abc"


def test_partial_match_is_not_an_error():
    g = compile('a = "a"+')
    node = g.parse("aab")
    assert node.end == 2


def test_unknown_rule():
    g = compile('a = "a"')
    with pytest.raises(UnknownRule):
        g.parse("a", "nope")
    with pytest.raises(LookupError):
        g.require_rule("nope")
    with pytest.raises(UnknownRule):
        compile('a = "a"', default_rule="nope")


def test_grammar_mapping_surface():
    g = compile('a = "a"\nb = a')
    assert "a" in g
    assert "c" not in g
    assert len(g) == 2
    with pytest.raises(TypeError):
        g.rules["c"] = g.rules["a"]
    assert g.require_rule("b") is g.rules["b"]
    assert repr(g) == "<Grammar rules=2 default='a'>"


def test_from_source():
    g = Grammar.from_source('a = "a"')
    assert g.parse("a").expr_name == "a"


def test_undefined_reference():
    with pytest.raises(UnresolvedReference) as info:
        compile('a = b')
    assert info.value.name == "b"


def test_duplicate_rule():
    with pytest.raises(DuplicateRuleDefinition) as info:
        compile('a = "x"\nb = "y"\na = "z"')
    assert info.value.name == "a"


def test_invalid_regex():
    with pytest.raises(InvalidRegex):
        compile('a = ~"(unclosed"')


def test_errors_are_compile_errors():
    for src in ('a = b', 'a = ~"("', '= "x"'):
        with pytest.raises(CompileError):
            compile(src)
        with pytest.raises(SyntaxError):
            compile(src)


@pytest.mark.parametrize("src", [
    "",
    "   # only a comment\n",
    'a = ',
    'a "x"',
    'a = "unterminated',
    '= "x"',
])
def test_malformed_source(src):
    with pytest.raises(MalformedGrammarSource):
        compile(src)


def test_malformed_source_position():
    src = 'a = "x"\nb = "y" )\n'
    with pytest.raises(MalformedGrammarSource) as info:
        compile(src)
    assert info.value.pos == src.index(")")
    assert "2:9" in str(info.value)
    assert str(info.value).endswith('b = "y" )\n        ^')


def test_malformed_source_after_leading_comment():
    src = '# heading\n@'
    with pytest.raises(MalformedGrammarSource) as info:
        compile(src)
    assert info.value.pos == src.index("@")
    assert "2:1" in str(info.value)


def test_empty_mapping():
    with pytest.raises(EmptyGrammar):
        Grammar({})


def test_arith_example():
    g = load_grammar(str(ARITH))
    assert g.default_rule == "expr"
    text = "1 + (2 * 3) - 40/5"
    node = g.parse(text)
    assert node.end == len(text)
    assert g.parse("1 + ").end == 2
    assert g.parse("(1", "factor") is None


def test_forward_reference_from_a_sequence():
    g = compile('a = "x" b\nb = "y"')
    node = g.parse("xy", "a")
    assert node.kind == "sequence"
    assert len(node.children) == 2
    assert (node.start, node.end) == (0, 2)


def test_lookahead_stops_a_reference_before_equals():
    g = compile('ref = label !equals\nequals = "="\nlabel = ~"[a-z]+"')
    assert g.parse("foo", "ref").end == 3
    assert g.parse("foo=", "ref") is None


def test_caret_anchors_at_the_rule_position():
    g = compile('s = "a" b\nb = ~"^b"')
    assert g.parse("ab").end == 2
