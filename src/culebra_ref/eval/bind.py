from __future__ import annotations

from typing import Callable

from lark import Tree

from ..runtime import CulValue, Environment
from ..tree import Node, token_kind, tree_children
from .common import expect_ident_token as _expect_ident_token, to_object

EvalFunc = Callable[[Node, Environment], CulValue]

def eval_assignment(n: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    """Mutate an existing binding, or declare a new one in the current frame."""
    mut_tok, name_tok, value_node = tree_children(n)
    name = _expect_ident_token(name_tok, "assignment target")
    val = eval_func(value_node, env)

    if env.has(name):
        env.assign(name, val)
    else:
        env.initialize(name, val, token_kind(mut_tok) == 'MUTABLE')

    return val

def eval_property_assignment(n: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    recv_node, name_tok, value_node = tree_children(n)
    obj = to_object(eval_func(recv_node, env))
    name = _expect_ident_token(name_tok, "property name")
    val = eval_func(value_node, env)
    obj.props[name] = val

    return val
