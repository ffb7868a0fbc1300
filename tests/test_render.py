from pathlib import Path

from selfpeg import compile
from selfpeg.peg.ast import Literal, Not, Optional, Regex, Sequence
from selfpeg.peg.bootstrap import RULE_SYNTAX, meta_grammar
from selfpeg.peg.render import render_grammar, render_rule, render_tree
from selfpeg.peg.simplify import SimplifiedNode, simplify

ARITH = Path(__file__).resolve().parent.parent / "examples" / "arith.peg"


def test_render_rule():
    g = compile('expr = term (add term)*\nterm = ~"[0-9]+"\nadd = "+"')
    assert render_rule(g.rules["expr"]) == "expr = term (add term)*"
    assert render_rule(g.rules["term"]) == 'term = ~"[0-9]+"'
    assert render_rule(g.rules["add"]) == 'add = "+"'


def test_render_anonymous_expressions():
    a = Literal("a")
    assert render_rule(a) == '"a"'
    assert render_rule(Optional(Optional(a))) == '("a"?)?'
    assert render_rule(Not(Optional(a))) == '!"a"?'
    assert render_rule(Optional(Not(a))) == '(!"a")?'
    assert render_rule(Not(Sequence([a, Literal("b")]))) == '!("a" "b")'


def test_render_escapes():
    assert render_rule(Literal('say "hi"\n')) == r'"say \"hi\"\n"'
    assert render_rule(Regex(r'"\d"', flags="i")) == r'~"\"\\d\""i'


def test_render_grammar_puts_the_default_rule_first():
    g = compile('a = "a"\nb = "b"', default_rule="b")
    assert render_grammar(g) == 'b = "b"\na = "a"'
    assert str(g) == render_grammar(g)


def test_rendered_grammar_compiles_to_an_equivalent_grammar():
    first = compile(ARITH.read_text(encoding="utf-8"))
    again = compile(render_grammar(first))
    assert list(again) == list(first)
    for text in ("1", "1 + (2 * 3) - 40/5", "((7))*2"):
        assert again.parse(text) == first.parse(text)


def test_rule_grammar_renders_and_recompiles():
    again = compile(str(meta_grammar()))
    assert again.parse(RULE_SYNTAX) == meta_grammar().parse(RULE_SYNTAX)


def test_render_tree():
    g = compile('greeting = "hi" name\nname = ~"[a-z]+"')
    assert render_tree(g.parse("hiyou")) == "\n".join([
        '<sequence called "greeting" matching \'hiyou\'>',
        "    <literal matching 'hi'>",
        '    <regex called "name" matching \'you\'>',
    ])


def test_simplify_keeps_named_nodes():
    g = compile('pair = key "=" value\nkey = ~"[a-z]+"\nvalue = ~"[0-9]+"')
    s = simplify(g.parse("a=1"))
    assert s.name == "pair"
    assert [c.name for c in s.children] == ["key", "value"]
    assert s.children[1].text == "1"
    assert (s.children[1].start, s.children[1].end) == (2, 3)
    assert str(s) == r"<pair> <key\>, <value\> </pair>"


def test_simplify_hoists_through_anonymous_nodes():
    g = compile('list = (item ",")+\nitem = ~"[a-z]"')
    s = simplify(g.parse("a,b,c,"))
    assert [c.text for c in s.children] == ["a", "b", "c"]
    assert s.children[0] == SimplifiedNode("item", "a,b,c,", 0, 1)


def test_simplify_anonymous_root():
    assert simplify(Literal("a").match("a")) is None


def test_simplified_str_breaks_long_lines():
    g = compile('list = item+\nitem = ~"[a-z]"')
    s = simplify(g.parse("a" * 20))
    assert str(s).splitlines() == ["<list>"] + ["  <item\\>"] * 20 + ["</list>"]
