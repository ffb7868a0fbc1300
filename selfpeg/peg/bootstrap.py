# selfpeg/peg/bootstrap.py
"""The grammar that parses grammar definitions, built from itself.

A hand-assembled expression graph understands just enough of the grammar
language to parse RULE_SYNTAX, the language's full description of itself.
Compiling that parse gives the rule grammar every other grammar is
compiled with.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Dict

from .ast import (
    Expression, Literal, Regex, Sequence, OneOf, Not, ZeroOrMore, OneOrMore, seal,
)
from .errors import InternalInvariantViolation
from .runtime import Grammar
from .visitor import RuleVisitor


# The grammar for parsing grammar definitions.
RULE_SYNTAX = r'''# Ignored things (represented by _) are typically hung off the end of the
# leafmost kinds of nodes. Literals like "/" count as leaves.

rules = _ rule+
rule = label equals expression
equals = "=" _
literal = spaceless_literal _

# So you can't spell a regex like `~"..." ilm`:
spaceless_literal = ~"\"[^\"\\\\]*(?:\\\\.[^\"\\\\]*)*\""is

expression = ored / sequence / term
or_term = "/" _ alternative
ored = alternative or_term+
alternative = sequence / term
sequence = term term+
not_term = "!" term _
lookahead_term = "&" term _
term = not_term / lookahead_term / quantified / atom
quantified = atom quantifier
atom = reference / literal / regex / parenthesized
regex = "~" spaceless_literal ~"[ilmsuxa]*"i _
parenthesized = "(" _ expression ")" _
quantifier = ~"[*+?]" _
reference = label !equals

# A subsequent equal sign is the only thing that distinguishes a label
# (which begins a new rule) from a reference (which is just a pointer to a
# rule defined somewhere else):
label = ~"[a-zA-Z_][a-zA-Z_0-9]*" _

# _ = ~"\s*(?:#[^\r\n]*)?\s*"
_ = meaninglessness*
meaninglessness = ~"\s+" / comment
comment = ~"#[^\r\n]*"
'''

# Documents bootstrap_rules(): the graph it builds by hand, spelled in the
# grammar language. Compiling this text gives a graph of the same shape.
BOOTSTRAP_SYNTAX = r'''rules = _ rule+
rule = label equals expression
equals = "=" _
literal = spaceless_literal _
spaceless_literal = ~"\"[^\"\\\\]*(?:\\\\.[^\"\\\\]*)*\""is
expression = ored / sequence / term
or_term = "/" _ alternative
ored = alternative or_term+
alternative = sequence / term
sequence = term term+
not_term = "!" term _
term = not_term / quantified / atom
quantified = atom quantifier
atom = reference / literal / regex
regex = "~" spaceless_literal ~"[ilmsuxa]*"i _
quantifier = ~"[*+?]" _
reference = label !equals
label = ~"[a-zA-Z_][a-zA-Z_0-9]*" _
_ = meaninglessness*
meaninglessness = ~"\s+" / comment
comment = ~"#[^\r\n]*"
'''


def bootstrap_rules() -> Dict[str, Expression]:
    """Hard-code enough of the rules to parse RULE_SYNTAX.

    No parentheses or lookahead here: RULE_SYNTAX doesn't use them.
    """
    comment = Regex(r"#[^\r\n]*", name="comment")
    meaninglessness = OneOf([Regex(r"\s+"), comment], name="meaninglessness")
    _ = ZeroOrMore(meaninglessness, name="_")

    equals = Sequence([Literal("="), _], name="equals")
    label = Sequence([Regex(r"[a-zA-Z_][a-zA-Z_0-9]*"), _], name="label")
    reference = Sequence([label, Not(equals)], name="reference")
    quantifier = Sequence([Regex(r"[*+?]"), _], name="quantifier")
    spaceless_literal = Regex(r'"[^"\\]*(?:\\.[^"\\]*)*"', flags="is", name="spaceless_literal")
    literal = Sequence([spaceless_literal, _], name="literal")
    regex = Sequence([Literal("~"), spaceless_literal, Regex(r"[ilmsuxa]*", flags="i"), _],
                     name="regex")
    atom = OneOf([reference, literal, regex], name="atom")
    quantified = Sequence([atom, quantifier], name="quantified")

    term = OneOf([quantified, atom], name="term")
    # not_term needs term, and term needs not_term first in line
    not_term = Sequence([Literal("!"), term, _], name="not_term")
    term.members.insert(0, not_term)

    sequence = Sequence([term, OneOrMore(term)], name="sequence")
    alternative = OneOf([sequence, term], name="alternative")
    or_term = Sequence([Literal("/"), _, alternative], name="or_term")
    ored = Sequence([alternative, OneOrMore(or_term)], name="ored")
    expression = OneOf([ored, sequence, term], name="expression")
    rule = Sequence([label, equals, expression], name="rule")
    rules = Sequence([_, OneOrMore(rule)], name="rules")

    named = [
        rules, rule, equals, literal, spaceless_literal, expression, or_term, ored,
        alternative, sequence, not_term, term, quantified, atom, regex, quantifier,
        reference, label, _, meaninglessness, comment,
    ]
    seal(named)
    return {expr.name: expr for expr in named}


def bootstrap() -> Grammar:
    """Parse RULE_SYNTAX with the hand-built rules and compile the result."""
    hand_built = bootstrap_rules()
    tree = hand_built["rules"].match(RULE_SYNTAX)
    if tree is None or tree.end != len(RULE_SYNTAX):
        raise InternalInvariantViolation("hand-built rules failed to parse RULE_SYNTAX")
    return Grammar(RuleVisitor().visit_rules(tree), default_rule="rules")


@lru_cache(maxsize=None)
def meta_grammar() -> Grammar:
    """The rule grammar, bootstrapped once per process."""
    return bootstrap()
