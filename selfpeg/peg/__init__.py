# selfpeg/peg/__init__.py
"""PEG engine for selfpeg.

This package provides:
- Expression graph nodes and their matching semantics
- Parse tree nodes
- The bootstrapped rule grammar and the compiler built on it
- Debug renderings and tree simplification
"""

from .ast import (
    Kind, Expression, Literal, Regex, Compound, Sequence, OneOf, Unary,
    Optional, ZeroOrMore, OneOrMore, Lookahead, Not, LazyReference,
)
from .node import Node
from .errors import (
    CompileError, MalformedGrammarSource, UnresolvedReference,
    DuplicateRuleDefinition, InvalidRegex, EmptyGrammar,
    InternalInvariantViolation, UnknownRule,
)
from .runtime import Grammar, compile
from .bootstrap import RULE_SYNTAX, bootstrap, bootstrap_rules, meta_grammar
from .visitor import RuleVisitor
from .render import render_grammar, render_rule, render_tree
from .simplify import SimplifiedNode, simplify
