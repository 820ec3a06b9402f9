from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Optional

from lark import Lark, Token, Tree, UnexpectedCharacters, UnexpectedInput, UnexpectedToken
from lark.exceptions import VisitError
from lark.lark import PostLex

from .ast_transforms import Lower
from .tree import Node
from .types import CulebraSyntaxError

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).resolve().parent / "grammar.lark"

STATEMENT_BREAK = "_STATEMENT_BREAK"

_EXPRESSION_END_TYPES = frozenset({
    "IDENTIFIER",
    "NUMBER",
    "BOOLEAN",
    "STRING",
    "INTERPOLATED_STRING",
    "RPAR",
    "RSQB",
    "RBRACE",
})
_OPEN_TYPES = frozenset({"LPAR", "LSQB", "LBRACE"})
_CLOSE_TYPES = frozenset({"RPAR", "RSQB", "RBRACE"})

class StatementBreaks(PostLex):
    """
    After a complete expression a `[` is read as an index suffix, except when
    the brackets are empty or hold a top-level comma: no index can look like
    that, so a statement break goes in front and the list starts a new
    statement.
    """

    always_accept = ()

    def process(self, stream: Iterator[Token]) -> Iterator[Token]:
        tokens = list(stream)
        prev: Optional[Token] = None

        for i, tok in enumerate(tokens):
            if (
                tok.type == "LSQB"
                and prev is not None
                and prev.type in _EXPRESSION_END_TYPES
                and _opens_list(tokens, i)
            ):
                yield Token.new_borrow_pos(STATEMENT_BREAK, "", tok)

            yield tok
            prev = tok

def _opens_list(tokens: List[Token], start: int) -> bool:
    depth = 0

    for j in range(start, len(tokens)):
        kind = tokens[j].type

        if kind in _OPEN_TYPES:
            depth += 1
        elif kind in _CLOSE_TYPES:
            depth -= 1
            if depth == 0:
                return j == start + 1
        elif kind == "COMMA" and depth == 1:
            return True

    return False

def _read_grammar(grammar_path: Optional[str]) -> str:
    if grammar_path:
        p = Path(grammar_path)
        if p.exists():
            return p.read_text(encoding="utf-8")

        raise FileNotFoundError(f"grammar file not found: {grammar_path}")

    return GRAMMAR_PATH.read_text(encoding="utf-8")

@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str]=None) -> Lark:
    g = _read_grammar(grammar_path)
    logger.debug("building LALR parser from %s", grammar_path or GRAMMAR_PATH)

    return Lark(
        g,
        parser="lalr",
        lexer="basic",
        postlex=StatementBreaks(),
        start=["statements", "interpolation"],
        propagate_positions=True,
        maybe_placeholders=True,
    )

def parse_source(src: str, grammar_path: Optional[str]=None) -> Tree:
    """Parse a whole program into a lowered `statements` tree."""
    tree = _parse(src, "statements", grammar_path)
    assert isinstance(tree, Tree)

    return tree

def parse_expression(src: str, grammar_path: Optional[str]=None) -> Node:
    tree = _parse(src, "interpolation", grammar_path)

    return tree.children[0]

def _parse(src: str, start: str, grammar_path: Optional[str]) -> Tree:
    parser = make_parser(grammar_path)

    try:
        tree = parser.parse(src, start=start)
    except UnexpectedInput as exc:
        raise _syntax_error(exc, src) from None

    lower = Lower(lambda text: parse_expression(text, grammar_path))

    try:
        return lower.transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, CulebraSyntaxError):
            raise exc.orig_exc from None
        raise

def _syntax_error(exc: UnexpectedInput, src: str) -> CulebraSyntaxError:
    line = getattr(exc, "line", -1)
    column = getattr(exc, "column", -1)

    if isinstance(exc, UnexpectedToken):
        tok = exc.token
        if tok.type == "$END":
            message = "syntax error, unexpected end of input"
        else:
            message = f"syntax error, unexpected '{tok.value}'"
    elif isinstance(exc, UnexpectedCharacters):
        message = f"syntax error, unexpected character '{exc.char}'"
    else:
        message = "syntax error, unexpected end of input"

    if line is None or line < 1:
        # end of input: point just past the last character
        line = src.count("\n") + 1
        column = len(src) - src.rfind("\n")

    return CulebraSyntaxError(message, line, column)
