"""Post-parse lowering from the raw Lark tree to the shape the evaluator expects."""
from __future__ import annotations

from typing import Callable, List, Optional

from lark import Token, Transformer, Tree, v_args
from lark.tree import Meta

from .tree import Node, is_token, token_kind, tree_children, tree_label
from .types import CulebraSyntaxError

ParseExpr = Callable[[str], Node]

_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
    '$': '$',
}


class UnterminatedInterpolation(ValueError):
    def __init__(self, offset: int):
        super().__init__(f"unterminated '${{' at offset {offset}")
        self.offset = offset


class Lower(Transformer):
    """
    - STRING tokens lose their quotes.
    - INTERPOLATED_STRING tokens become `interpolated_string` trees of TEXT
      tokens and parsed `${...}` expressions.
    - `assignment` nodes whose target is a `.name` chain become
      `property_assignment`; any other non-identifier target is rejected.
    """

    def __init__(self, parse_expr: ParseExpr):
        super().__init__(visit_tokens=True)
        self._parse_expr = parse_expr

    def STRING(self, token: Token) -> Token:
        return token.update(value=token.value[1:-1])

    def INTERPOLATED_STRING(self, token: Token) -> Tree:
        try:
            pieces = split_interpolation(token.value[1:-1])
        except UnterminatedInterpolation as exc:
            line, column = _position_at(token, 1 + exc.offset)
            raise CulebraSyntaxError("unterminated '${' in string", line, column) from None

        parts: List[Node] = []
        for kind, text, offset in pieces:
            if kind == 'text':
                parts.append(Token.new_borrow_pos('TEXT', text, token))
                continue

            # pad so positions inside `${...}` line up with the source
            line, column = _position_at(token, 1 + offset)
            padding = "\n" * (line - 1) + " " * (column - 1)
            parts.append(self._parse_expr(padding + text))

        return Tree('interpolated_string', parts)

    @v_args(meta=True)
    def assignment(self, meta: Meta, children: List[Optional[Node]]) -> Tree:
        mut_tok, target, value = children

        if is_token(target) and token_kind(target) == 'IDENTIFIER':
            return Tree('assignment', [mut_tok, target, value], meta)

        ops = tree_children(target)
        if tree_label(target) == 'call' and tree_label(ops[-1]) == 'dot':
            if mut_tok is not None:
                raise CulebraSyntaxError("'mut' is not allowed on a property assignment", mut_tok.line, mut_tok.column)

            receiver: Node = ops[0] if len(ops) == 2 else Tree('call', ops[:-1], target.meta)
            return Tree('property_assignment', [receiver, ops[-1].children[0], value], meta)

        line, column = _first_position(target)
        raise CulebraSyntaxError("invalid assignment target", line, column)


def split_interpolation(body: str) -> List[tuple[str, str, int]]:
    """Split the inside of a double-quoted string into text and `${...}` parts.

    Returns `(kind, text, offset)` triples where kind is `text` or `expr` and
    offset is where the part starts in `body`.
    """
    parts: List[tuple[str, str, int]] = []
    buf: List[str] = []
    buf_start = 0
    i = 0

    def flush() -> None:
        if buf:
            parts.append(('text', "".join(buf), buf_start))
            buf.clear()

    while i < len(body):
        ch = body[i]

        if ch == '\\' and i + 1 < len(body):
            if not buf:
                buf_start = i
            nxt = body[i + 1]
            buf.append(_ESCAPES.get(nxt, '\\' + nxt))
            i += 2
            continue

        if ch == '$' and body.startswith('${', i):
            end = _matching_brace(body, i + 1)
            flush()
            parts.append(('expr', body[i + 2:end], i + 2))
            i = end + 1
            continue

        if not buf:
            buf_start = i
        buf.append(ch)
        i += 1

    flush()
    return parts


def _matching_brace(body: str, open_idx: int) -> int:
    depth = 0
    j = open_idx

    while j < len(body):
        ch = body[j]

        if ch == "'":
            # braces inside a single-quoted string literal do not count
            close = body.find("'", j + 1)
            if close == -1:
                break
            j = close + 1
            continue

        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return j

        j += 1

    raise UnterminatedInterpolation(open_idx - 1)


def _position_at(token: Token, offset: int) -> tuple[int, int]:
    text = token.value[:offset]
    line = (token.line or 1) + text.count("\n")
    last_nl = text.rfind("\n")

    if last_nl == -1:
        return line, (token.column or 1) + offset

    return line, offset - last_nl


def _first_position(node: Node) -> tuple[int, int]:
    if is_token(node):
        return node.line or 0, node.column or 0

    for child in tree_children(node):
        if child is not None:
            return _first_position(child)

    return 0, 0
