from __future__ import annotations

from typing import Callable

from lark import Tree

from ..runtime import CulString, CulValue, Environment
from ..tree import Node, tree_children
from .common import stringify

EvalFunc = Callable[[Node, Environment], CulValue]

def eval_interpolated_string(n: Tree, env: Environment, eval_func: EvalFunc) -> CulString:
    # literal text parts are TEXT tokens and evaluate to themselves
    parts = [stringify(eval_func(part, env)) for part in tree_children(n)]

    return CulString("".join(parts))
