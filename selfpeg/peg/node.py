# selfpeg/peg/node.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Tuple

from .ast import Expression


@dataclass(frozen=True, eq=False, repr=False)
class Node:
    """One successful match: the span [start, end) of full_text, plus the
    nodes of the member matches that made it up."""

    expr: Expression
    full_text: str
    start: int
    end: int
    children: Tuple["Node", ...] = ()

    @property
    def text(self) -> str:
        return self.full_text[self.start:self.end]

    @property
    def expr_name(self) -> str:
        return self.expr.name

    @property
    def kind(self) -> str:
        return self.expr.kind

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.children)

    def __eq__(self, other: object) -> bool:
        # Structural: positions and the expression's identity don't matter.
        if not isinstance(other, Node):
            return NotImplemented
        return (self.text == other.text
                and self.expr_name == other.expr_name
                and self.kind == other.kind
                and self.children == other.children)

    def __hash__(self) -> int:
        return hash((self.expr_name, self.kind, self.text, len(self.children)))

    def __repr__(self) -> str:
        return f"Node({self.kind}, {self.expr_name!r}, {self.start}, {self.end}, children={len(self.children)})"
