# selfpeg/pegc.py
"""pegc – selfpeg CLI

Examples:
    $ pegc check examples/arith.peg -D
    $ pegc parse examples/arith.peg --text "1+(2*3)" --full
    $ pegc parse examples/arith.peg --rule term --input expr.txt --simplify

Commands
--------
- check : compile a grammar definition and summarize it
- parse : compile a grammar and parse text with one of its rules

Debug mode (-D/--debug) reports progress and prints the compiled grammar.
"""

from __future__ import annotations
import argparse
import sys
from typing import Optional

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _load(path: str, debug: bool):
    from .grammar.loader import load_grammar_text
    from .peg.runtime import compile

    src = load_grammar_text(path)
    if debug: _eprint(f"[DEBUG] read {path} | chars={len(src)}")
    g = compile(src)
    if debug: _eprint(f"[DEBUG] compiled | rules={len(g)} default={g.default_rule}")
    return g


def _print_grammar(g) -> None:
    from .peg.render import render_grammar
    _eprint("\n[GRAMMAR]\n" + render_grammar(g))

# ------------------------------
# commands
# ------------------------------

def cmd_check(args) -> int:
    from .peg.errors import CompileError
    try:
        g = _load(args.file, debug=args.debug)
    except CompileError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_grammar(g)

    print(f"[CHECK OK] rules={len(g)} default={g.default_rule}")
    return 0


def cmd_parse(args) -> int:
    from .peg.errors import CompileError, UnknownRule
    from .peg.render import render_tree
    from .peg.simplify import simplify
    try:
        g = _load(args.file, debug=args.debug)
    except CompileError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    try:
        if args.text is not None:
            text = args.text
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                text = f.read()
        node = g.parse(text, args.rule)
    except UnknownRule as e:
        _eprint("[ERROR]", str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    rule = args.rule or g.default_rule
    if node is None:
        _eprint(f"[NO MATCH] rule={rule}")
        return 1
    if args.full and node.end != len(text):
        _eprint(f"[NO MATCH] rule={rule} stopped at {node.end} of {len(text)}")
        return 1
    if args.debug:
        _eprint(f"[DEBUG] matched | rule={rule} span={node.start}..{node.end}")

    if args.simplify:
        simplified = simplify(node)
        print(simplified if simplified is not None else f"<anonymous {node.kind}>")
    else:
        print(render_tree(node))
    return 0

# ------------------------------
# entry point
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="pegc", description="selfpeg grammar CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="compile a grammar definition and report its rules")
    p_check.add_argument("file", help="grammar definition file")
    p_check.add_argument("-D", "--debug", action="store_true", help="print debug details")
    p_check.set_defaults(func=cmd_check)

    p_parse = sub.add_parser("parse", help="parse text with a rule of the grammar")
    p_parse.add_argument("file", help="grammar definition file")
    p_parse.add_argument("-r", "--rule", help="rule to parse with (default: the first rule)")
    src_group = p_parse.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="text to parse")
    src_group.add_argument("--input", help="path of a file to parse")
    p_parse.add_argument("--simplify", action="store_true", help="print only named nodes")
    p_parse.add_argument("--full", action="store_true", help="require the whole input to match")
    p_parse.add_argument("-D", "--debug", action="store_true", help="print debug details")
    p_parse.set_defaults(func=cmd_parse)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
