from __future__ import annotations

from typing import Callable, List

from ..runtime import CulNull, CulValue, Environment
from ..tree import Node

EvalFunc = Callable[[Node, Environment], CulValue]

def eval_statements(children: List[Node], env: Environment, eval_func: EvalFunc) -> CulValue:
    """Run a statement list for effect, returning the last value."""
    result: CulValue = CulNull()

    for child in children:
        result = eval_func(child, env)

    return result
