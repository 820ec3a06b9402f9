from __future__ import annotations

import logging
from typing import Callable, List

from lark import Tree

from ..runtime import (
    CulArray,
    CulFn,
    CulValue,
    Environment,
    CulebraArityError,
    CulebraInternalError,
    call_culfn,
    get_property,
)
from ..tree import Node, node_position, tree_children, tree_label
from .common import expect_ident_token as _expect_ident_token, to_array, to_function, to_integer

logger = logging.getLogger(__name__)

EvalFunc = Callable[[Node, Environment], CulValue]

def eval_call(n: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    """Evaluate the head, then fold `(...)`, `[...]` and `.name` suffixes left to right."""
    head, *ops = tree_children(n)
    val = eval_func(head, env)

    for op in ops:
        val = apply_op(val, op, n, env, eval_func)

    return val

def apply_op(recv: CulValue, op: Node, call_node: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    match tree_label(op):
        case 'arguments':
            fn = to_function(recv)
            args = eval_args(fn, tree_children(op), env, eval_func)
            return call_culfn(fn, args, node_position(call_node))
        case 'index':
            return apply_index(recv, op, env, eval_func)
        case 'dot':
            name = _expect_ident_token(op.children[0], "property access")
            return bind_property(recv, get_property(recv, name))
        case _:
            raise CulebraInternalError("invalid internal condition: unknown call suffix")

def eval_args(fn: CulFn, arg_nodes: List[Node], env: Environment, eval_func: EvalFunc) -> List[CulValue]:
    """Evaluate only as many arguments as the function declares parameters."""
    if len(arg_nodes) < len(fn.params):
        raise CulebraArityError(f"function expects {len(fn.params)} argument(s); got {len(arg_nodes)}")

    return [eval_func(arg, env) for arg in arg_nodes[:len(fn.params)]]

def apply_index(recv: CulValue, op: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    arr: CulArray = to_array(recv)
    idx = to_integer(eval_func(op.children[0], env))

    if 0 <= idx < len(arr.items):
        return arr.items[idx]

    # out of range leaves the running value untouched
    logger.debug("index %d out of range for array of length %d", idx, len(arr.items))
    return recv

def bind_property(recv: CulValue, prop: CulValue) -> CulValue:
    if isinstance(prop, CulFn):
        return prop.bind(recv)

    return prop
