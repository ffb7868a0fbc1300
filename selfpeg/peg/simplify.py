# selfpeg/peg/simplify.py
"""Collapse a parse tree down to its named nodes, for reading."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .node import Node


@dataclass(frozen=True)
class SimplifiedNode:
    name: str
    full_text: str = field(repr=False)
    start: int
    end: int
    children: Tuple["SimplifiedNode", ...] = ()

    @property
    def text(self) -> str:
        return self.full_text[self.start:self.end]

    def __str__(self) -> str:
        if not self.children:
            return f"<{self.name}\\>"
        header = f"<{self.name}>"
        tail = f"</{self.name}>"
        child_str = "\n".join(str(c) for c in self.children)
        if len(child_str) < 80:
            child_str = child_str.replace("\n", ", ")
            if len(header) + len(child_str) + len(tail) < 80:
                return f"{header} {child_str} {tail}"
            return f"{header}\n  {child_str}\n{tail}"
        child_str = child_str.replace("\n", "\n  ")
        return f"{header}\n  {child_str}\n{tail}"


def simplify(node: Node) -> Optional[SimplifiedNode]:
    """Keep named nodes only; anonymous nodes hand their children up.

    None if the root itself is anonymous.
    """
    if not node.expr_name:
        return None
    children: List[SimplifiedNode] = []
    for child in node.children:
        children.extend(_named_descendants(child))
    return SimplifiedNode(node.expr_name, node.full_text, node.start, node.end, tuple(children))


def _named_descendants(node: Node) -> List[SimplifiedNode]:
    if node.expr_name:
        simplified = simplify(node)
        assert simplified is not None
        return [simplified]
    out: List[SimplifiedNode] = []
    for child in node.children:
        out.extend(_named_descendants(child))
    return out
