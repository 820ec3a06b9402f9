from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .evaluator import eval_expr
from .parser import parse_source
from .runtime import CulValue, CulebraRuntimeError, CulebraSyntaxError, Environment, root_environment
from .eval.common import stringify

logger = logging.getLogger(__name__)

# each Culebra call costs roughly twenty Python frames
DEFAULT_RECURSION_LIMIT = 20000

@contextmanager
def recursion_limit(limit: int) -> Iterator[None]:
    prev = sys.getrecursionlimit()
    sys.setrecursionlimit(limit)

    try:
        yield
    finally:
        sys.setrecursionlimit(prev)

def run(
    src: str,
    env: Optional[Environment]=None,
    grammar_path: Optional[str]=None,
    max_depth: int=DEFAULT_RECURSION_LIMIT,
) -> CulValue:
    """Parse and evaluate `src`, raising on syntax or runtime errors."""
    ast = parse_source(src, grammar_path=grammar_path)

    if env is None:
        env = root_environment()

    with recursion_limit(max_depth):
        return eval_expr(ast, env)

def evaluate_program(
    path: str,
    env: Environment,
    source: str,
    grammar_path: Optional[str]=None,
    print_ast: bool=False,
    max_depth: int=DEFAULT_RECURSION_LIMIT,
) -> Tuple[Optional[CulValue], Optional[str]]:
    """
    Driver entry point. Returns `(value, None)` on success, or `(None, message)`
    where syntax errors read `path:line:column: message` and runtime errors
    carry their bare message.
    """
    try:
        ast = parse_source(source, grammar_path=grammar_path)
    except CulebraSyntaxError as exc:
        logger.debug("syntax error in %s at %d:%d", path, exc.line, exc.column)
        return None, f"{path}:{exc.line}:{exc.column}: {exc.message}"

    if print_ast:
        print(ast.pretty())

    logger.debug("evaluating %s", path)

    try:
        with recursion_limit(max_depth):
            return eval_expr(ast, env), None
    except CulebraRuntimeError as exc:
        logger.debug("runtime error in %s: %s", path, exc)
        return None, exc.message
    except RecursionError:
        return None, "stack overflow: maximum recursion depth exceeded"

def _load_source(arg: Optional[str]) -> Tuple[str, str]:
    """
    Resolve CLI input into (path, source text).
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return "<stdin>", data

    candidate = Path(arg)
    if candidate.exists():
        return str(candidate), candidate.read_text(encoding="utf-8")

    return "<string>", arg

def main() -> None:
    grammar_path = None
    print_ast = False
    max_depth = DEFAULT_RECURSION_LIMIT
    arg = None
    it = iter(sys.argv[1:])

    for token in it:
        if token == "--ast":
            print_ast = True
            continue

        if token == "--verbose":
            logging.basicConfig(level=logging.DEBUG)
            continue

        if token.startswith("--grammar="):
            grammar_path = token.split("=", 1)[1]
            continue

        if token == "--grammar":
            try:
                grammar_path = next(it)
            except StopIteration:
                raise SystemExit("--grammar flag requires a path") from None
            continue

        if token.startswith("--recursion-limit"):
            raw = token.split("=", 1)[1] if "=" in token else next(it, None)
            if raw is None or not raw.isdigit() or int(raw) == 0:
                raise SystemExit("--recursion-limit flag requires a positive integer")
            max_depth = int(raw)
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    path, source = _load_source(arg or "-")
    value, msg = evaluate_program(
        path,
        root_environment(),
        source,
        grammar_path=grammar_path,
        print_ast=print_ast,
        max_depth=max_depth,
    )

    if msg is not None:
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    print(stringify(value))

if __name__ == "__main__":
    main()
