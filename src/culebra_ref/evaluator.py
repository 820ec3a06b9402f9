from __future__ import annotations

from typing import Callable, Optional
from lark import Token

from .runtime import (
    CulValue,
    Environment,
    CulebraInternalError,
    CulebraRuntimeError,
    root_environment,
)

from .tree import Node, Tree, is_token, node_meta

from .eval.blocks import eval_statements
from .eval.loops import eval_while_loop, eval_if_chain
from .eval.fn import eval_function
from .eval.chains import eval_call
from .eval.expr import eval_logical, eval_condition, eval_unary, eval_infix
from .eval.bind import eval_assignment, eval_property_assignment
from .eval.objects import eval_object, eval_array
from .eval.literals import eval_interpolated_string
from .eval.common import token_boolean, token_number, token_text

EvalFunc = Callable[[Node, Environment], CulValue]


def _maybe_attach_location(exc: CulebraRuntimeError, node: Node) -> None:
    if exc.meta is not None:
        return

    meta = node_meta(node)

    if meta is not None and getattr(meta, "line", None) is not None:
        exc.meta = meta

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment]=None) -> CulValue:
    if env is None:
        env = root_environment()

    return eval_node(ast, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> CulValue:
    try:
        return _eval_node_inner(n, env)
    except CulebraRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, env: Environment) -> CulValue:
    if is_token(n):
        return _eval_token(n, env)

    if not isinstance(n, Tree):
        raise CulebraInternalError(f"invalid AST node {n!r}")

    handler = _NODE_DISPATCH.get(n.data)
    if handler is None:
        raise CulebraInternalError(f"invalid AST type {n.data}")

    return handler(n, env)

# ---------------- Tokens ----------------

def _eval_token(t: Token, env: Environment) -> CulValue:
    if t.type == 'IDENTIFIER':
        return env.get(t.value)

    handler = _TOKEN_DISPATCH.get(t.type)
    if handler:
        return handler(t, env)

    # any other leaf (string literals, operators) is its own text
    return token_text(t, env)

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[str, Callable[[Tree, Environment], CulValue]] = {
    'statements': lambda n, env: eval_statements(n.children, env, eval_node),
    'while_loop': lambda n, env: eval_while_loop(n, env, eval_node),
    'if_chain': lambda n, env: eval_if_chain(n, env, eval_node),
    'function': eval_function,
    'call': lambda n, env: eval_call(n, env, eval_node),
    'assignment': lambda n, env: eval_assignment(n, env, eval_node),
    'property_assignment': lambda n, env: eval_property_assignment(n, env, eval_node),
    'logical_or': lambda n, env: eval_logical(n.data, n.children, env, eval_node),
    'logical_and': lambda n, env: eval_logical(n.data, n.children, env, eval_node),
    'condition': lambda n, env: eval_condition(n.children, env, eval_node),
    'unary_plus': lambda n, env: eval_unary(n.data, n.children, env, eval_node),
    'unary_minus': lambda n, env: eval_unary(n.data, n.children, env, eval_node),
    'unary_not': lambda n, env: eval_unary(n.data, n.children, env, eval_node),
    'additive': lambda n, env: eval_infix(n.children, env, eval_node),
    'multiplicative': lambda n, env: eval_infix(n.children, env, eval_node),
    'object': lambda n, env: eval_object(n, env, eval_node),
    'array': lambda n, env: eval_array(n, env, eval_node),
    'interpolated_string': lambda n, env: eval_interpolated_string(n, env, eval_node),
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Environment], CulValue]] = {
    'NUMBER': token_number,
    'BOOLEAN': token_boolean,
}
