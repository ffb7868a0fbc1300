# selfpeg/peg/errors.py
"""Errors raised while compiling or using a grammar.

Failing to match is not an error: every match returns a Node or None.
"""

from __future__ import annotations
from typing import Optional, Tuple


class CompileError(SyntaxError):
    """A grammar definition could not be turned into a Grammar."""


class MalformedGrammarSource(CompileError):
    def __init__(self, msg: str, pos: Optional[int] = None):
        super().__init__(msg)
        self.pos = pos

    @classmethod
    def at(cls, src: str, pos: Optional[int]) -> "MalformedGrammarSource":
        if pos is None:
            return cls("Grammar definition did not parse", None)
        line, col = line_col(src, pos)
        snippet = snippet_caret_at_pos(src, pos)
        return cls(f"Grammar definition did not parse past {line}:{col}\n{snippet}", pos)


class UnresolvedReference(CompileError):
    def __init__(self, name: str):
        super().__init__(f"Reference to undefined rule '{name}'")
        self.name = name


class DuplicateRuleDefinition(CompileError):
    def __init__(self, name: str):
        super().__init__(f"Rule '{name}' is defined more than once")
        self.name = name


class InvalidRegex(CompileError):
    def __init__(self, pattern: str, flags: str, reason: str):
        super().__init__(f"Invalid regex ~{pattern!r}{flags}: {reason}")
        self.pattern = pattern
        self.flags = flags


class EmptyGrammar(CompileError):
    def __init__(self):
        super().__init__("Grammar defines no rules")


class InternalInvariantViolation(AssertionError):
    """A bug in the compiler or a hand-built graph, never bad user input."""


class UnknownRule(LookupError):
    def __init__(self, name: str):
        super().__init__(f"Grammar has no rule '{name}'")
        self.name = name


# ---------- error position utils ----------

def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """[start, end) of the line holding pos"""
    start = src.rfind("\n", 0, pos)
    if start == -1:
        start = 0
    else:
        start += 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end


def line_col(src: str, pos: int) -> Tuple[int, int]:
    """1-based line and column of pos."""
    start, _ = _line_bounds(src, pos)
    return src.count("\n", 0, pos) + 1, (pos - start) + 1


def snippet_caret_at_pos(src: str, pos: int) -> str:
    start, end = _line_bounds(src, pos)
    line_text = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line_text}\n{caret}"
