# selfpeg/peg/ast.py
"""Expression graph: the executable form of a grammar.

Rules refer to each other, so the graph has cycles and shared members.
Expressions therefore compare and hash by identity.
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Dict, Iterable, List

from .errors import InternalInvariantViolation, InvalidRegex

if TYPE_CHECKING:
    from .node import Node


class Kind:
    LITERAL        = "literal"
    REGEX          = "regex"
    SEQUENCE       = "sequence"
    ONE_OF         = "one_of"
    OPTIONAL       = "optional"
    ZERO_OR_MORE   = "zero_or_more"
    ONE_OR_MORE    = "one_or_more"
    LOOKAHEAD      = "lookahead"
    NOT            = "not"
    LAZY_REFERENCE = "lazy_reference"


class Expression:
    """Something that can be matched against a position in a text.

    Top-level rules and named sub-expressions carry a name; inline ones have ''.
    """

    kind: ClassVar[str] = ""
    name: str

    def match(self, text: str, pos: int = 0) -> Node | None:
        """Match at exactly `pos`. None means no match, not an error."""
        return match_expr(self, text, pos)

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<{type(self).__name__}{label} at {id(self):#x}>"


@dataclass(eq=False, repr=False)
class Literal(Expression):
    kind: ClassVar[str] = Kind.LITERAL

    literal: str  # unescaped text
    name: str = ""


# flag letter -> regex flag; the letters are those the grammar language accepts
REGEX_FLAGS: Dict[str, int] = {
    "i": re.IGNORECASE,
    "l": re.LOCALE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": re.UNICODE,
    "x": re.VERBOSE,
    "a": re.ASCII,
}


@dataclass(eq=False, repr=False)
class Regex(Expression):
    kind: ClassVar[str] = Kind.REGEX

    pattern: str  # semantic pattern, grammar-language escapes already removed
    flags: str = ""
    name: str = ""

    def __post_init__(self) -> None:
        letters = self.flags.lower()
        unknown = [c for c in letters if c not in REGEX_FLAGS]
        if unknown:
            raise InvalidRegex(self.pattern, self.flags, f"unknown flag {unknown[0]!r}")
        # canonical order, no repeats
        self.flags = "".join(c for c in REGEX_FLAGS if c in letters)
        bits = 0
        for c in self.flags:
            bits |= REGEX_FLAGS[c]
        try:
            self.re = re.compile(self.pattern, bits)
        except (re.error, ValueError) as e:
            raise InvalidRegex(self.pattern, self.flags, str(e)) from e


@dataclass(eq=False, repr=False)
class Compound(Expression):
    """An expression over an ordered list of members."""

    # a list while the graph is being built; a tuple once sealed
    members: List[Expression]
    name: str = ""

    def __post_init__(self) -> None:
        self.members = list(self.members)
        for i, member in enumerate(self.members):
            if isinstance(member, LazyReference):
                member.attach(self, i)


@dataclass(eq=False, repr=False)
class Sequence(Compound):
    kind: ClassVar[str] = Kind.SEQUENCE


@dataclass(eq=False, repr=False)
class OneOf(Compound):
    kind: ClassVar[str] = Kind.ONE_OF


@dataclass(eq=False, repr=False)
class Unary(Expression):
    """An expression wrapping a single member."""

    member: Expression
    name: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.member, LazyReference):
            self.member.attach(self, None)


@dataclass(eq=False, repr=False)
class Lookahead(Unary):
    kind: ClassVar[str] = Kind.LOOKAHEAD  # &


@dataclass(eq=False, repr=False)
class Not(Unary):
    kind: ClassVar[str] = Kind.NOT  # !


@dataclass(eq=False, repr=False)
class Optional(Unary):
    kind: ClassVar[str] = Kind.OPTIONAL  # ?


@dataclass(eq=False, repr=False)
class ZeroOrMore(Unary):
    kind: ClassVar[str] = Kind.ZERO_OR_MORE  # *


@dataclass(eq=False, repr=False)
class OneOrMore(Unary):
    kind: ClassVar[str] = Kind.ONE_OR_MORE  # +

    min: int = 1


@dataclass(eq=False, repr=False)
class LazyReference(Expression):
    """Placeholder for a rule that may not exist yet.

    Records the slot it occupies so the compiler can overwrite that slot with
    the rule itself: `slot` is the member index in a Compound parent, None for
    a Unary parent.
    """

    kind: ClassVar[str] = Kind.LAZY_REFERENCE

    target: str
    name: str = ""
    parent: Expression | None = None
    slot: int | None = None

    def attach(self, parent: Expression, slot: int | None) -> None:
        if self.parent is not None:
            raise InternalInvariantViolation(f"reference to '{self.target}' already has a parent")
        self.parent = parent
        self.slot = slot


def seal(roots: Iterable[Expression]) -> None:
    """Freeze the member lists of everything reachable from `roots`.

    Fails if a LazyReference is still in the graph.
    """
    seen = set()
    stack = list(roots)
    while stack:
        expr = stack.pop()
        if id(expr) in seen:
            continue
        seen.add(id(expr))
        if isinstance(expr, Compound):
            expr.members = tuple(expr.members)  # type: ignore[assignment]
            stack.extend(expr.members)
        elif isinstance(expr, Unary):
            stack.append(expr.member)
        elif isinstance(expr, LazyReference):
            raise InternalInvariantViolation(f"unresolved reference to '{expr.target}'")


# engine needs the classes above
from .engine import match_expr  # noqa: E402
