from __future__ import annotations

from typing import Callable, List

from ..runtime import (
    CulBool,
    CulInt,
    CulNull,
    CulValue,
    Environment,
    CulebraDivisionByZero,
    CulebraInternalError,
)
from ..tree import Node
from ..utils import compare_values
from .common import stringify, to_integer
from .helpers import is_truthy

EvalFunc = Callable[[Node, Environment], CulValue]

COMPARISON_OPS = frozenset({'==', '!=', '<=', '<', '>=', '>'})

def eval_logical(kind: str, children: List[Node], env: Environment, eval_func: EvalFunc) -> CulValue:
    """Short-circuit `or`/`and`, yielding the deciding operand itself."""
    last_val: CulValue = CulNull()

    for child in children:
        last_val = eval_func(child, env)

        if kind == 'logical_or' and is_truthy(last_val):
            return last_val

        if kind == 'logical_and' and not is_truthy(last_val):
            return last_val

    return last_val

def eval_condition(children: List[Node], env: Environment, eval_func: EvalFunc) -> CulValue:
    if len(children) == 1:
        return eval_func(children[0], env)

    lhs_node, op_node, rhs_node = children
    lhs = eval_func(lhs_node, env)
    op = stringify(eval_func(op_node, env))
    rhs = eval_func(rhs_node, env)

    if op not in COMPARISON_OPS:
        raise CulebraInternalError(f"invalid internal condition: comparison operator {op!r}")

    return CulBool(compare_values(op, lhs, rhs))

def eval_unary(kind: str, children: List[Node], env: Environment, eval_func: EvalFunc) -> CulValue:
    if len(children) == 1:
        return eval_func(children[0], env)

    rhs = eval_func(children[1], env)

    match kind:
        case 'unary_plus':
            return rhs
        case 'unary_minus':
            return CulInt(-to_integer(rhs))
        case 'unary_not':
            return CulBool(not is_truthy(rhs))

    raise CulebraInternalError(f"unknown unary node {kind}")

def eval_infix(children: List[Node], env: Environment, eval_func: EvalFunc) -> CulValue:
    """Left-associative integer fold over `operand (op operand)*`."""
    acc = to_integer(eval_func(children[0], env))

    for i in range(1, len(children), 2):
        rhs = to_integer(eval_func(children[i + 1], env))
        op = stringify(eval_func(children[i], env))
        acc = apply_binary_operator(op, acc, rhs)

    return CulInt(acc)

def apply_binary_operator(op: str, lhs: int, rhs: int) -> int:
    match op:
        case '+':
            return lhs + rhs
        case '-':
            return lhs - rhs
        case '*':
            return lhs * rhs
        case '/':
            if rhs == 0:
                raise CulebraDivisionByZero()
            return _trunc_div(lhs, rhs)
        case '%':
            if rhs == 0:
                raise CulebraDivisionByZero("modulo by zero")
            return lhs - rhs * _trunc_div(lhs, rhs)

    raise CulebraInternalError(f"unknown operator {op!r}")

def _trunc_div(lhs: int, rhs: int) -> int:
    # integer division rounds toward zero, like C
    q = abs(lhs) // abs(rhs)
    return q if (lhs < 0) == (rhs < 0) else -q
