from __future__ import annotations

from typing import Callable

from lark import Tree

from ..runtime import CulNull, CulValue, Environment
from ..tree import Node, tree_children
from .helpers import is_truthy

EvalFunc = Callable[[Node, Environment], CulValue]

def eval_while_loop(n: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    cond_node, body_node = tree_children(n)

    while is_truthy(eval_func(cond_node, env)):
        eval_func(body_node, env)

    return CulNull()

def eval_if_chain(n: Tree, env: Environment, eval_func: EvalFunc) -> CulValue:
    """Children alternate condition/branch, with an optional trailing else branch."""
    children = tree_children(n)

    for i in range(0, len(children), 2):
        if i + 1 == len(children):
            return eval_func(children[i], env)

        if is_truthy(eval_func(children[i], env)):
            return eval_func(children[i + 1], env)

    return CulNull()
