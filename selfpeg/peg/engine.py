# selfpeg/peg/engine.py
from __future__ import annotations
from typing import List, Optional
from .ast import (
    Expression, Literal, Regex, Sequence, OneOf, Lookahead, Not,
    Optional as OptionalExpr, ZeroOrMore, OneOrMore, LazyReference,
)
from .errors import InternalInvariantViolation
from .node import Node

# Recursive-descent engine:
# - Ordered choice with unlimited backtracking, no memoization.
# - Left recursion is not supported (typical PEG restriction).
# - Every match is anchored at `pos`; a failed match returns None.
# - A regex only sees text[pos:]: ^ and \A anchor at pos, and lookbehind
#   cannot reach the text before it.


def _repeat(expr: Expression, text: str, pos: int) -> List[Node]:
    """Match expr over and over from pos. A zero-width match ends the
    repetition and is not kept, or it would loop forever."""
    children: List[Node] = []
    cur = pos
    while True:
        node = match_expr(expr, text, cur)
        if node is None or node.end == cur:
            break
        children.append(node)
        cur = node.end
    return children


def match_expr(expr: Expression, text: str, pos: int) -> Optional[Node]:
    if isinstance(expr, Literal):
        if text.startswith(expr.literal, pos):
            return Node(expr, text, pos, pos + len(expr.literal))
        return None

    if isinstance(expr, Regex):
        m = expr.re.match(text[pos:])
        if m is None:
            return None
        return Node(expr, text, pos, pos + m.end())

    if isinstance(expr, Sequence):
        children: List[Node] = []
        cur = pos
        for member in expr.members:
            node = match_expr(member, text, cur)
            if node is None:
                return None
            children.append(node)
            cur = node.end
        return Node(expr, text, pos, cur, tuple(children))

    if isinstance(expr, OneOf):
        for member in expr.members:
            node = match_expr(member, text, pos)
            if node is not None:
                return Node(expr, text, pos, node.end, (node,))
        return None

    if isinstance(expr, Lookahead):
        if match_expr(expr.member, text, pos) is None:
            return None
        return Node(expr, text, pos, pos)

    if isinstance(expr, Not):
        if match_expr(expr.member, text, pos) is not None:
            return None
        return Node(expr, text, pos, pos)

    if isinstance(expr, OptionalExpr):
        node = match_expr(expr.member, text, pos)
        if node is None:
            return Node(expr, text, pos, pos)
        return Node(expr, text, pos, node.end, (node,))

    if isinstance(expr, ZeroOrMore):
        children = _repeat(expr.member, text, pos)
        end = children[-1].end if children else pos
        return Node(expr, text, pos, end, tuple(children))

    if isinstance(expr, OneOrMore):
        children = _repeat(expr.member, text, pos)
        if len(children) < expr.min:
            return None
        end = children[-1].end if children else pos
        return Node(expr, text, pos, end, tuple(children))

    if isinstance(expr, LazyReference):
        raise InternalInvariantViolation(f"unresolved reference to '{expr.target}' reached while matching")

    raise InternalInvariantViolation(f"unknown expression: {expr!r}")
