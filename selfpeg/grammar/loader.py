# selfpeg/grammar/loader.py
"""Grammar file loading"""

from __future__ import annotations
from pathlib    import Path
from typing     import Optional

from ..peg.runtime import Grammar, compile


def load_grammar_text(path: str) -> str:
    """
    Read a grammar definition as UTF-8, with every line ending as \\n
    (offsets in error messages then count one character per line break).
    """
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_grammar(path: str, default_rule: Optional[str] = None) -> Grammar:
    """Read and compile a grammar definition file."""
    return compile(load_grammar_text(path), default_rule)
