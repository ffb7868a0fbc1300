# selfpeg/__init__.py
"""selfpeg: a self-hosting Parsing Expression Grammar engine.

    >>> from selfpeg import compile
    >>> g = compile('greeting = "hi" / "howdy"')
    >>> g.parse("howdy").text
    'howdy'
"""

from .peg import (
    Kind, Expression, Literal, Regex, Sequence, OneOf,
    Optional, ZeroOrMore, OneOrMore, Lookahead, Not, LazyReference,
    Node, Grammar, compile, bootstrap, RULE_SYNTAX,
    CompileError, MalformedGrammarSource, UnresolvedReference,
    DuplicateRuleDefinition, InvalidRegex, EmptyGrammar,
    InternalInvariantViolation, UnknownRule,
    render_grammar, render_tree, simplify, SimplifiedNode,
)

__version__ = "0.1.0"
