# selfpeg/peg/runtime.py
from __future__ import annotations
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from .ast import Expression
from .errors import EmptyGrammar, MalformedGrammarSource, UnknownRule
from .node import Node
from .visitor import RuleVisitor


class Grammar:
    """Compiled grammar: rule name -> entry-point expression.

    Immutable once built; any number of texts may be parsed against any of
    its rules, from any number of threads.
    """

    def __init__(self, rules: Mapping[str, Expression], default_rule: Optional[str] = None):
        if not rules:
            raise EmptyGrammar()
        self._rules = dict(rules)
        if default_rule is None:
            default_rule = next(iter(self._rules))
        elif default_rule not in self._rules:
            raise UnknownRule(default_rule)
        self.default_rule = default_rule

    @classmethod
    def from_source(cls, src: str, default_rule: Optional[str] = None) -> "Grammar":
        return compile(src, default_rule)

    @property
    def rules(self) -> Mapping[str, Expression]:
        return MappingProxyType(self._rules)

    def require_rule(self, name: str) -> Expression:
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRule(name) from None

    def parse(self, text: str, rule_name: Optional[str] = None, pos: int = 0) -> Optional[Node]:
        """Match `rule_name` (default: the first rule) at `pos`.

        The match need not reach the end of `text`; compare the node's `end`
        with `len(text)` when it has to.
        """
        rule = self.require_rule(self.default_rule if rule_name is None else rule_name)
        return rule.match(text, pos)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __str__(self) -> str:
        from .render import render_grammar
        return render_grammar(self)

    def __repr__(self) -> str:
        return f"<Grammar rules={len(self._rules)} default={self.default_rule!r}>"


def compile(src: str, default_rule: Optional[str] = None) -> Grammar:
    """Compile a grammar definition.

    Raises a CompileError subclass if `src` is not a well-formed definition,
    names an undefined rule, defines a rule twice, or holds a bad regex.
    """
    from .bootstrap import meta_grammar
    meta = meta_grammar()
    tree = meta.parse(src, "rules")
    if tree is None:
        # Nothing matched; point past any leading whitespace and comments.
        skipped = meta.parse(src, "_")
        raise MalformedGrammarSource.at(src, skipped.end if skipped is not None else 0)
    if tree.end != len(src):
        raise MalformedGrammarSource.at(src, tree.end)
    rules = RuleVisitor().visit_rules(tree)
    return Grammar(rules, default_rule)
