# selfpeg/peg/render.py
"""Debug renderings of grammars and parse trees."""

from __future__ import annotations
import json
from typing import TYPE_CHECKING, List

from .ast import (
    Expression, Literal, Regex, Sequence, OneOf, Compound, Unary,
    Lookahead, Not, Optional as OptionalExpr, ZeroOrMore, OneOrMore, LazyReference,
)
from .errors import InternalInvariantViolation
from .node import Node

if TYPE_CHECKING:
    from .runtime import Grammar

_PREFIX = {Lookahead: "&", Not: "!"}
_SUFFIX = {OptionalExpr: "?", ZeroOrMore: "*", OneOrMore: "+"}


def _quote_literal(text: str) -> str:
    # JSON string escapes are all valid Python string escapes
    return json.dumps(text, ensure_ascii=False)


def _quote_regex(expr: Regex) -> str:
    pattern = expr.pattern.replace("\\", "\\\\").replace('"', '\\"')
    return f'~"{pattern}"{expr.flags}'


def _member(expr: Expression, in_quantifier: bool = False) -> str:
    """A member as it appears inside another expression's right-hand side."""
    if expr.name:
        return expr.name
    rhs = render_rhs(expr)
    if isinstance(expr, Compound) and len(expr.members) > 1:
        return f"({rhs})"
    if in_quantifier and isinstance(expr, Unary):
        # `a??` and `!a?` don't mean (a?)? and (!a)?
        return f"({rhs})"
    return rhs


def render_rhs(expr: Expression) -> str:
    """The right-hand side of a rule for expr, named members by name."""
    if isinstance(expr, Literal):
        return _quote_literal(expr.literal)
    if isinstance(expr, Regex):
        return _quote_regex(expr)
    if isinstance(expr, Sequence):
        return " ".join(_member(m) for m in expr.members)
    if isinstance(expr, OneOf):
        return " / ".join(_member(m) for m in expr.members)
    if isinstance(expr, (Lookahead, Not)):
        return _PREFIX[type(expr)] + _member(expr.member)
    if isinstance(expr, (OptionalExpr, ZeroOrMore, OneOrMore)):
        return _member(expr.member, in_quantifier=True) + _SUFFIX[type(expr)]
    if isinstance(expr, LazyReference):
        return expr.target
    raise InternalInvariantViolation(f"unknown expression: {expr!r}")


def render_rule(expr: Expression) -> str:
    return f"{expr.name} = {render_rhs(expr)}" if expr.name else render_rhs(expr)


def render_grammar(grammar: Grammar) -> str:
    """Rule definitions that compile back to an equivalent grammar, default rule first."""
    rules = grammar.rules
    names = [grammar.default_rule] + [n for n in rules if n != grammar.default_rule]
    return "\n".join(render_rule(rules[n]) for n in names)


def render_tree(node: Node) -> str:
    lines: List[str] = []

    def walk(n: Node, depth: int) -> None:
        called = f' called "{n.expr_name}"' if n.expr_name else ""
        lines.append(f"{'    ' * depth}<{n.kind}{called} matching {n.text!r}>")
        for child in n.children:
            walk(child, depth + 1)

    walk(node, 0)
    return "\n".join(lines)
