# selfpeg/peg/visitor.py
"""Compile a meta-parse-tree (a grammar definition parsed by the rule
grammar) into a linked expression graph.

One visit method per meta-grammar rule. Each expects a node produced by
the rule of the same name; anything else means the meta-grammar and this
visitor disagree, which is a bug, not bad input.
"""

from __future__ import annotations
import ast as _pyast
import warnings
import regex as re
from typing import Callable, Dict, List

from .ast import (
    Expression, Literal, Regex, Sequence, OneOf, Compound, Unary,
    Lookahead, Not, Optional as OptionalExpr, ZeroOrMore, OneOrMore,
    LazyReference, seal,
)
from .errors import (
    DuplicateRuleDefinition, InternalInvariantViolation,
    MalformedGrammarSource, UnresolvedReference,
)
from .node import Node

# The grammar language's own escapes inside ~"...": \\ and \"
_REGEX_ESCAPE_RE = re.compile(r'\\([\\"])')
# An escape pair, or a line break written straight into a literal
_LITERAL_LINE_BREAK_RE = re.compile(r"\\.|[\r\n]", re.DOTALL)
_LINE_BREAK_ESCAPES = {"\n": "\\n", "\r": "\\r"}


def _escape_line_breaks(quoted: str) -> str:
    # backslash pairs pass through untouched, so \<newline> stays a continuation
    return _LITERAL_LINE_BREAK_RE.sub(lambda m: _LINE_BREAK_ESCAPES.get(m.group(), m.group()), quoted)


def _eval_literal(quoted: str) -> object:
    # Fixed filter: an unknown escape such as \d is an error whatever the
    # caller's warning filters say.
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        return _pyast.literal_eval(_escape_line_breaks(quoted))


class RuleVisitor:
    quantifier_classes = {"?": OptionalExpr, "*": ZeroOrMore, "+": OneOrMore}

    def __init__(self) -> None:
        # every reference created so far, in source order
        self.lazy_references: List[LazyReference] = []

    def _expect(self, node: Node, name: str) -> None:
        if node.expr_name != name:
            raise InternalInvariantViolation(
                f"expected a '{name}' node, got '{node.expr_name}' ({node.kind}) at {node.start}")

    def _dispatch(self, node: Node, table: Dict[str, Callable[[Node], Expression]]) -> Expression:
        """Visit the single child of a choice node."""
        child = node.children[0]
        visit = table.get(child.expr_name)
        if visit is None:
            raise InternalInvariantViolation(
                f"unexpected '{child.expr_name}' node inside '{node.expr_name}' at {child.start}")
        return visit(child)

    # rules = _ rule+
    def visit_rules(self, node: Node) -> Dict[str, Expression]:
        """Return rule name -> expression, in source order, fully linked."""
        self._expect(node, "rules")
        rule_map: Dict[str, Expression] = {}
        for child in node.children[1].children:
            expr = self.visit_rule(child)
            if expr.name in rule_map:
                raise DuplicateRuleDefinition(expr.name)
            rule_map[expr.name] = expr
        self.substitute_lazy_references(rule_map)
        seal(rule_map.values())
        return rule_map

    # rule = label equals expression
    def visit_rule(self, node: Node) -> Expression:
        self._expect(node, "rule")
        label = self.visit_label(node.children[0])
        expr = self.visit_expression(node.children[2])
        if isinstance(expr, LazyReference):
            # `a = b`: give the reference a parent slot to be patched into
            expr = Sequence([expr])
        expr.name = label
        return expr

    # label = ~"[a-zA-Z_][a-zA-Z_0-9]*" _
    def visit_label(self, node: Node) -> str:
        self._expect(node, "label")
        return node.children[0].text

    # expression = ored / sequence / term
    def visit_expression(self, node: Node) -> Expression:
        self._expect(node, "expression")
        return self._dispatch(node, {
            "ored": self.visit_ored,
            "sequence": self.visit_sequence,
            "term": self.visit_term,
        })

    # ored = alternative or_term+
    def visit_ored(self, node: Node) -> Expression:
        self._expect(node, "ored")
        first = self.visit_alternative(node.children[0])
        rest = [self.visit_or_term(c) for c in node.children[1].children]
        return OneOf([first] + rest)

    # or_term = "/" _ alternative
    def visit_or_term(self, node: Node) -> Expression:
        self._expect(node, "or_term")
        return self.visit_alternative(node.children[2])

    # alternative = sequence / term
    def visit_alternative(self, node: Node) -> Expression:
        self._expect(node, "alternative")
        return self._dispatch(node, {
            "sequence": self.visit_sequence,
            "term": self.visit_term,
        })

    # sequence = term term+
    def visit_sequence(self, node: Node) -> Expression:
        self._expect(node, "sequence")
        first = self.visit_term(node.children[0])
        rest = [self.visit_term(c) for c in node.children[1].children]
        return Sequence([first] + rest)

    # term = not_term / lookahead_term / quantified / atom
    def visit_term(self, node: Node) -> Expression:
        self._expect(node, "term")
        return self._dispatch(node, {
            "not_term": self.visit_not_term,
            "lookahead_term": self.visit_lookahead_term,
            "quantified": self.visit_quantified,
            "atom": self.visit_atom,
        })

    # not_term = "!" term _
    def visit_not_term(self, node: Node) -> Expression:
        self._expect(node, "not_term")
        return Not(self.visit_term(node.children[1]))

    # lookahead_term = "&" term _
    def visit_lookahead_term(self, node: Node) -> Expression:
        self._expect(node, "lookahead_term")
        return Lookahead(self.visit_term(node.children[1]))

    # quantified = atom quantifier
    def visit_quantified(self, node: Node) -> Expression:
        self._expect(node, "quantified")
        atom = self.visit_atom(node.children[0])
        symbol = self.visit_quantifier(node.children[1])
        cls = self.quantifier_classes.get(symbol)
        if cls is None:
            raise InternalInvariantViolation(f"unknown quantifier {symbol!r}")
        return cls(atom)

    # quantifier = ~"[*+?]" _
    def visit_quantifier(self, node: Node) -> str:
        self._expect(node, "quantifier")
        return node.children[0].text

    # atom = reference / literal / regex / parenthesized
    def visit_atom(self, node: Node) -> Expression:
        self._expect(node, "atom")
        return self._dispatch(node, {
            "reference": self.visit_reference,
            "literal": self.visit_literal,
            "regex": self.visit_regex,
            "parenthesized": self.visit_parenthesized,
        })

    # parenthesized = "(" _ expression ")" _
    def visit_parenthesized(self, node: Node) -> Expression:
        # grouping lives on in the shape of the graph; no node of its own
        self._expect(node, "parenthesized")
        return self.visit_expression(node.children[2])

    # reference = label !equals
    def visit_reference(self, node: Node) -> Expression:
        self._expect(node, "reference")
        ref = LazyReference(self.visit_label(node.children[0]))
        self.lazy_references.append(ref)
        return ref

    # literal = spaceless_literal _
    def visit_literal(self, node: Node) -> Expression:
        self._expect(node, "literal")
        quoted = node.children[0].text
        # Python's string literal rules give us \" \\ \n \t \xHH \uXXXX for free.
        try:
            value = _eval_literal(quoted)
        except (SyntaxError, ValueError, Warning) as e:
            raise MalformedGrammarSource(f"Bad string literal {quoted}: {e}", node.start) from e
        if not isinstance(value, str):
            raise MalformedGrammarSource(f"Bad string literal {quoted}", node.start)
        return Literal(value)

    # regex = "~" spaceless_literal ~"[ilmsuxa]*"i _
    def visit_regex(self, node: Node) -> Expression:
        self._expect(node, "regex")
        quoted = node.children[1].text
        flags = node.children[2].text
        # ~"\"[a]\"" spells the pattern "[a]"; other escapes belong to the regex
        pattern = _REGEX_ESCAPE_RE.sub(r"\1", quoted[1:-1])
        return Regex(pattern, flags=flags)

    def substitute_lazy_references(self, rule_map: Dict[str, Expression]) -> None:
        """Overwrite every reference's slot with the rule it names.

        All rules exist before any slot is patched, so references may point
        forward, or back at their own rule.
        """
        for ref in self.lazy_references:
            if ref.target not in rule_map:
                raise UnresolvedReference(ref.target)
        for ref in self.lazy_references:
            target = rule_map[ref.target]
            parent = ref.parent
            if isinstance(parent, Compound):
                assert ref.slot is not None
                parent.members[ref.slot] = target
            elif isinstance(parent, Unary):
                parent.member = target
            else:
                raise InternalInvariantViolation(f"reference to '{ref.target}' has no parent slot")
        self.lazy_references.clear()
