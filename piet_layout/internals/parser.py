"""Lark parser setup and schema AST construction."""
from __future__ import annotations

from pathlib import Path
from typing import Tuple

from lark import Lark, Tree, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from piet_layout.internals.errors import ParseError
from piet_layout.internals.report import Span
from piet_layout.schema.ast import SchemaModule
from piet_layout.schema.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

# Friendly names for anonymous terminals in "expected ..." hints
_TERMINAL_NAMES = {
    "COMMA": "','",
    "COLON": "':'",
    "SEMICOLON": "';'",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LPAR": "'('",
    "RPAR": "')'",
    "LSQB": "'['",
    "RSQB": "']'",
    "LESSTHAN": "'<'",
    "MORETHAN": "'>'",
    "NAME": "a name",
    "INT": "an integer",
    "STRUCT": "'struct'",
    "ENUM": "'enum'",
    "MOD": "'mod'",
}


def improve_parse_error(e: UnexpectedInput) -> str:
    """Turn a lark exception into a one-line message."""
    if isinstance(e, UnexpectedToken):
        expected = sorted(_TERMINAL_NAMES.get(t, t) for t in e.expected)
        got = "end of input" if e.token.type == "$END" else f"'{e.token}'"
        detail = f"unexpected {got}, expected {', '.join(expected)}"
        if "':'" in expected and e.token.type == "NAME":
            detail += " (fields are written as `name: type`)"
        return detail
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    return str(e).splitlines()[0]


def make_parser() -> Lark:
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        lexer="contextual",
        propagate_positions=True,
        maybe_placeholders=False,
    )


def parse_tree(src: str) -> Tree:
    """Parse schema text into a raw lark tree, raising ParseError on bad syntax."""
    try:
        return make_parser().parse(src)
    except UnexpectedInput as e:
        line = getattr(e, "line", -1)
        col = getattr(e, "column", -1)
        span = Span(line, col, line, col) if line and line > 0 else None
        raise ParseError("CE0001", span, detail=improve_parse_error(e)) from None


def parse_to_ast(src: str, dump_parse: bool = False) -> Tuple[SchemaModule, Tree]:
    """Parse schema text into a SchemaModule.

    Returns:
        Tuple of (module, parse_tree).
    """
    tree = parse_tree(src)
    if dump_parse:
        print(tree.pretty())

    ast_builder = ASTBuilder()
    return ast_builder.build(tree), tree
